"""Relay launch outcomes back to the requester.

Posting to the social network itself is out of scope; a notifier is injected
into the monitor. ``TelegramNotifier`` forwards replies to an operator chat,
``LogNotifier`` just logs them. Notifier failures never reach the monitor.
"""
import logging
from typing import Optional, Protocol

import httpx

from launchpad.models import LaunchResult, Mention, ParsedLaunch

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, mention: Mention, message: str) -> None:
        ...


# ── Message formatters ──

def _handle(mention: Mention) -> str:
    return f"@{mention.author}" if mention.author else "there"


def format_usage_hint(mention: Mention) -> str:
    return (
        f"🐑 Hey {_handle(mention)}! To launch a token, use this format:\n\n"
        f"\"TOKEN NAME + TICKER\"\n\n"
        f"Example: \"Super Sheep + SHEEP\"\n\n"
        f"Add an image for your token logo!"
    )


def format_launching(parsed: ParsedLaunch) -> str:
    return (
        f"🚀 Launching {parsed.name} (${parsed.symbol})...\n\n"
        f"Processing your token launch! This may take a moment... ⏳"
    )


def format_launched(parsed: ParsedLaunch, result: LaunchResult) -> str:
    return (
        f"🎉 {parsed.name} (${parsed.symbol}) launched successfully!\n\n"
        f"📍 Contract: {result.mint}\n\n"
        f"🔗 Trade on Pump.fun: {result.pump_fun_url}\n\n"
        f"📊 DexScreener: {result.dexscreener_url}"
    )


def format_failed(parsed: ParsedLaunch, error: str) -> str:
    return (
        f"❌ Failed to launch {parsed.name} (${parsed.symbol})\n\n"
        f"Error: {error}\n\n"
        f"Please try again!"
    )


def _escape_md(text: str) -> str:
    """Escape Markdown v1 special chars."""
    for ch in ['_', '*', '`', '[']:
        text = text.replace(ch, f'\\{ch}')
    return text


# ── Notifiers ──

class LogNotifier:
    async def notify(self, mention: Mention, message: str) -> None:
        logger.info("reply | mention %s | %s", mention.id, message.replace("\n", " "))


class TelegramNotifier:
    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout

    async def send_message(self, text: str, parse_mode: Optional[str] = "Markdown") -> bool:
        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": parse_mode,
                   "disable_web_page_preview": True}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, json=payload)
                if resp.status_code == 200:
                    return True
                # If Markdown fails, retry without parse_mode
                if resp.status_code == 400 and "parse" in resp.text.lower():
                    payload["parse_mode"] = None
                    resp = await client.post(url, json=payload)
                    return resp.status_code == 200
                logger.error("Telegram send failed: %s %s", resp.status_code, resp.text)
                return False
        except httpx.HTTPError as e:
            logger.error("Telegram send error: %s", e)
            return False

    async def notify(self, mention: Mention, message: str) -> None:
        header = f"*Mention {_escape_md(mention.id)}*"
        if mention.author:
            header += f" from @{_escape_md(mention.author)}"
        await self.send_message(f"{header}\n\n{_escape_md(message)}")


def build_notifier(telegram_bot_token: str = "", telegram_chat_id: str = ""):
    if telegram_bot_token and telegram_chat_id:
        return TelegramNotifier(telegram_bot_token, telegram_chat_id)
    return LogNotifier()
