"""Pipeline facade: prompt analysis, suggestions, manual launch, trades and the mention monitor."""
import logging
import random
from collections import deque
from typing import Dict, List, Optional

from config import Settings
from launchpad import prompt_analyzer
from launchpad.asset_uploader import AssetUploader
from launchpad.errors import MonitorNotConfiguredError, WalletNotConfiguredError
from launchpad.launch_client import LaunchTransactionClient
from launchpad.mention_parser import test_parse
from launchpad.models import LaunchRequest, LaunchResult, PromptAnalysis, TokenSuggestion
from launchpad.monitor import IngestionMonitor, MentionSource
from launchpad.notifier import Notifier, build_notifier
from launchpad.processed_store import ProcessedStore, build_processed_store
from launchpad.synthesizer import SuggestionSynthesizer, validate_prompt
from launchpad.wallet import KeypairWallet, WalletCapability

logger = logging.getLogger(__name__)

RECENT_LAUNCHES = 50
MAX_SUGGESTIONS = 10


class LaunchPipeline:
    def __init__(
        self,
        launcher: Optional[LaunchTransactionClient] = None,
        source: Optional[MentionSource] = None,
        store: Optional[ProcessedStore] = None,
        notifier: Optional[Notifier] = None,
        synthesizer: Optional[SuggestionSynthesizer] = None,
        poll_interval: float = 30,
        error_backoff: float = 60,
        monitor_initial_buy: float = 0.0,
    ):
        self.launcher = launcher
        self.store = store
        self.synthesizer = synthesizer or SuggestionSynthesizer()
        self._launches: deque = deque(maxlen=RECENT_LAUNCHES)
        self.monitor: Optional[IngestionMonitor] = None
        if source is not None and launcher is not None:
            self.monitor = IngestionMonitor(
                source, launcher,
                store=store, notifier=notifier,
                poll_interval=poll_interval, error_backoff=error_backoff,
                initial_buy=monitor_initial_buy,
                on_launch=self._record,
            )

    def _record(self, result: LaunchResult):
        self._launches.appendleft(result)

    def _require_launcher(self) -> LaunchTransactionClient:
        if self.launcher is None:
            raise WalletNotConfiguredError("No wallet configured (set SOLANA_PRIVATE_KEY)")
        return self.launcher

    def _require_monitor(self) -> IngestionMonitor:
        if self.monitor is None:
            raise MonitorNotConfiguredError("Mention monitor not configured (set TWITTER_HANDLE and a wallet)")
        return self.monitor

    # ── Prompt → suggestions ──

    def analyze_prompt(self, text: str) -> PromptAnalysis:
        return prompt_analyzer.analyze(text)

    def synthesize_suggestions(self, text: str, count: int = 3) -> List[TokenSuggestion]:
        count = max(1, min(count, MAX_SUGGESTIONS))
        return self.synthesizer.synthesize(text, self.analyze_prompt(text), count)

    def validate_prompt(self, text: str) -> Dict:
        return validate_prompt(text)

    # ── On-chain operations ──

    async def launch(self, request: LaunchRequest, image: Optional[bytes] = None) -> LaunchResult:
        result = await self._require_launcher().create(request, image=image)
        self._record(result)
        return result

    async def buy(self, mint: str, amount: float, slippage_bps: Optional[int] = None) -> str:
        return await self._require_launcher().buy(mint, amount, slippage_bps)

    async def sell(self, mint: str, amount: float, slippage_bps: Optional[int] = None) -> str:
        return await self._require_launcher().sell(mint, amount, slippage_bps)

    async def token_info(self, mint: str) -> Dict:
        return await self._require_launcher().token_info(mint)

    def recent_launches(self, limit: int = RECENT_LAUNCHES) -> List[LaunchResult]:
        return list(self._launches)[:limit]

    # ── Monitor ──

    async def start_monitor(self) -> Dict:
        return await self._require_monitor().start()

    async def stop_monitor(self) -> Dict:
        return await self._require_monitor().stop()

    def monitor_status(self) -> Dict:
        if self.monitor is None:
            return {"isMonitoring": False, "processedCount": 0, "lastError": None,
                    "startedAt": None, "lastPollAt": None, "message": "Monitor not configured"}
        return self.monitor.status()

    def test_parse(self, text: str) -> Dict:
        return test_parse(text)

    async def shutdown(self):
        if self.monitor is not None:
            await self.monitor.stop()
            await self.monitor.join()
        close = getattr(self.store, "close", None)
        if close is not None:
            await close()


def build_pipeline(settings: Settings, source: Optional[MentionSource] = None,
                   wallet: Optional[WalletCapability] = None,
                   rng: Optional[random.Random] = None) -> LaunchPipeline:
    if wallet is None and settings.solana_private_key:
        wallet = KeypairWallet.from_base58(settings.solana_private_key, settings.solana_rpc_url, settings.http_timeout)
    if wallet is None:
        logger.warning("No SOLANA_PRIVATE_KEY provided; launch, buy and sell are disabled")

    launcher = None
    if wallet is not None:
        launcher = LaunchTransactionClient(
            wallet,
            uploader=AssetUploader(settings.launch_api_url, settings.http_timeout),
            base_url=settings.launch_api_url,
            timeout=settings.http_timeout,
            default_slippage_bps=settings.default_slippage_bps,
            default_priority_fee=settings.default_priority_fee,
            pool=settings.launch_pool,
        )

    if source is None and settings.twitter_handle:
        from collectors.twitter_mentions import TwitterMentionSource
        source = TwitterMentionSource(settings.twitter_handle, timeout=settings.http_timeout)

    return LaunchPipeline(
        launcher=launcher,
        source=source,
        store=build_processed_store(settings.database_url),
        notifier=build_notifier(settings.telegram_bot_token, settings.telegram_chat_id),
        synthesizer=SuggestionSynthesizer(rng),
        poll_interval=settings.monitor_poll_interval,
        error_backoff=settings.monitor_error_backoff,
        monitor_initial_buy=settings.monitor_initial_buy,
    )
