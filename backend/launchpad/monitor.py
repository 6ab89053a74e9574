"""Poll a mention stream and turn launch-formatted mentions into token launches.

Stopped -> Running -> Stopped. One poll at a time; each mention is driven to
a terminal outcome before it is marked processed, and processed mentions are
never retried. Failures land in ``last_error`` and never reach the caller.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol, Set

from launchpad.errors import LaunchError
from launchpad.launch_client import LaunchTransactionClient
from launchpad.mention_parser import parse_launch_mention
from launchpad.models import LaunchRequest, LaunchResult, Mention, MonitorState, ParsedLaunch
from launchpad.notifier import (
    LogNotifier, Notifier,
    format_failed, format_launched, format_launching, format_usage_hint,
)
from launchpad.processed_store import InMemoryProcessedStore, ProcessedStore

logger = logging.getLogger(__name__)

POLL_INTERVAL = 30
ERROR_BACKOFF = 60


class MentionSource(Protocol):
    async def fetch_mentions(self) -> List[Mention]:
        ...


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class IngestionMonitor:
    def __init__(
        self,
        source: MentionSource,
        launcher: LaunchTransactionClient,
        store: Optional[ProcessedStore] = None,
        notifier: Optional[Notifier] = None,
        poll_interval: float = POLL_INTERVAL,
        error_backoff: float = ERROR_BACKOFF,
        initial_buy: float = 0.0,
        on_launch=None,
    ):
        self.source = source
        self.launcher = launcher
        self.store = store if store is not None else InMemoryProcessedStore()
        self.notifier = notifier or LogNotifier()
        self.poll_interval = poll_interval
        self.error_backoff = error_backoff
        self.initial_buy = initial_buy
        self.on_launch = on_launch
        self.state = MonitorState()
        self._task: Optional[asyncio.Task] = None
        self._stop_event = asyncio.Event()
        self._poll_lock = asyncio.Lock()
        # Ids attempted by this monitor, independent of whether the store write landed
        self._seen: Set[str] = set()

    @property
    def is_monitoring(self) -> bool:
        return self.state.is_monitoring

    def status(self) -> Dict:
        return self.state.to_dict()

    async def start(self) -> Dict:
        if self.state.is_monitoring:
            logger.info("Mention monitoring already running")
            return self.status()
        previous = self._task
        if previous is not None and not previous.done():
            # The old loop already saw its stop event; let its last tick finish
            await previous
        if self.state.is_monitoring:
            return self.status()
        self.state = MonitorState(is_monitoring=True, started_at=_now_iso())
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(self._stop_event))
        logger.info("Started mention monitoring (every %ss)", self.poll_interval)
        return self.status()

    async def stop(self) -> Dict:
        if not self.state.is_monitoring:
            return self.status()
        self.state.is_monitoring = False
        self._stop_event.set()
        logger.info("Mention monitoring stopped")
        return self.status()

    async def join(self):
        """Wait for the poll loop (and any in-flight launch) to finish."""
        if self._task is not None:
            await self._task

    async def _run(self, stop_event: asyncio.Event):
        while not stop_event.is_set():
            try:
                ok = await self.poll_once()
            except Exception as e:
                logger.error("Mention poll error: %s", e, exc_info=True)
                self.state.last_error = f"Mention poll error: {e}"
                ok = False
            if stop_event.is_set():
                break
            delay = self.poll_interval if ok else self.error_backoff
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass

    async def poll_once(self) -> bool:
        """Fetch and process one batch. Returns False when the fetch itself failed."""
        async with self._poll_lock:
            self.state.last_poll_at = _now_iso()
            try:
                mentions = await self.source.fetch_mentions()
            except Exception as e:
                logger.warning("Mention fetch failed: %s", e)
                self.state.last_error = f"Mention fetch failed: {e}"
                return False

            for mention in mentions:
                if mention.id in self._seen or await self.store.contains(mention.id):
                    continue
                self._seen.add(mention.id)
                try:
                    await self.process_mention(mention)
                finally:
                    self.state.processed_count += 1
                    await self._mark_processed(mention.id)
            return True

    async def process_mention(self, mention: Mention) -> Optional[LaunchResult]:
        logger.info("Processing mention %s: %s", mention.id, mention.text)
        parsed = parse_launch_mention(mention.text)
        if parsed is None:
            self.state.last_error = f"Mention {mention.id} doesn't match token launch format"
            logger.info("Mention %s doesn't match token launch format", mention.id)
            await self._notify(mention, format_usage_hint(mention))
            return None

        await self._notify(mention, format_launching(parsed))
        by = f" by @{mention.author}" if mention.author else ""
        request = LaunchRequest(
            name=parsed.name,
            symbol=parsed.symbol,
            description=f"{parsed.name} - Launched via Tweet-to-Launch{by}!",
            twitter=f"https://twitter.com/{mention.author}" if mention.author else None,
            initial_buy=self.initial_buy,
        )
        try:
            result = await self.launcher.create(request, image=mention.image)
        except LaunchError as e:
            logger.warning("Launch from mention %s failed: %s", mention.id, e)
            return await self._record_failure(mention, parsed, e)
        except Exception as e:
            logger.error("Unexpected error launching from mention %s: %s", mention.id, e, exc_info=True)
            return await self._record_failure(mention, parsed, e)

        if self.on_launch is not None:
            self.on_launch(result)
        await self._notify(mention, format_launched(parsed, result))
        return result

    async def _mark_processed(self, mention_id: str):
        try:
            await self.store.add(mention_id)
        except Exception as e:
            logger.warning("Failed to record mention %s as processed: %s", mention_id, e)
            self.state.last_error = f"Failed to record mention {mention_id}: {e}"

    async def _record_failure(self, mention: Mention, parsed: ParsedLaunch, error: Exception) -> None:
        self.state.last_error = f"Mention {mention.id}: {error}"
        await self._notify(mention, format_failed(parsed, str(error)))
        return None

    async def _notify(self, mention: Mention, message: str):
        try:
            await self.notifier.notify(mention, message)
        except Exception as e:
            logger.warning("Notifier failed for mention %s: %s", mention.id, e)
