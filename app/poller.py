"""Background poller that keeps the latest parsed metrics snapshot"""
import asyncio
import time
from dataclasses import dataclass
from typing import Optional
import httpx
from config import Config
from metrics.models import ParseResult
from metrics.parser import parse_metrics
from logging_config import get_logger, log_poll_completed, log_error


logger = get_logger(__name__)


@dataclass(frozen=True)
class MetricsSnapshot:
    """One successful fetch-and-parse result"""
    families: ParseResult
    fetched_at: float
    source_url: str
    samples_count: int = 0


class MetricsPoller:
    """Fetches exposition text on a fixed interval and parses it.

    Only one fetch is outstanding at a time: a poll requested while another
    is in flight is skipped. Each successful poll replaces the snapshot as a
    whole; a failed fetch keeps the previous snapshot and records the error.
    """

    def __init__(self, config: Config, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = client
        self._owns_client = client is None
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

        self.snapshot: Optional[MetricsSnapshot] = None
        self.poll_count = 0
        self.poll_errors = 0
        self.skipped_polls = 0
        self.last_error: Optional[str] = None
        self.last_success_time = 0.0

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.request_timeout)
        return self._client

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def start(self) -> None:
        """Start the repeating poll task"""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(
            "Metrics poller started",
            metrics_url=self.config.metrics_url,
            poll_interval=self.config.poll_interval,
            event_type="poller_start"
        )

    async def stop(self) -> None:
        """Cancel the poll task and release the HTTP client"""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

        logger.info("Metrics poller stopped", event_type="poller_stop")

    async def _poll_loop(self):
        """Poll now, then every poll_interval seconds until cancelled"""
        while True:
            try:
                await self.poll_once()
            except Exception as e:
                self.poll_errors += 1
                self.last_error = f"{type(e).__name__}: {e}"
                log_error(logger, e, {"component": "poll_loop", "metrics_url": self.config.metrics_url})
            await asyncio.sleep(self.config.poll_interval)

    async def poll_once(self) -> bool:
        """Fetch and parse once; False when skipped because a fetch is in flight"""
        if self._lock.locked():
            self.skipped_polls += 1
            logger.debug("Poll skipped, fetch already in flight", event_type="poll_skipped")
            return False

        async with self._lock:
            self.poll_count += 1
            start_time = time.time()
            try:
                text = await self.fetch_text()
            except httpx.HTTPError as e:
                self.poll_errors += 1
                self.last_error = f"{type(e).__name__}: {e}"
                log_error(logger, e, {"component": "metrics_poller", "metrics_url": self.config.metrics_url})
                return True

            families = parse_metrics(text)
            samples_count = sum(len(family.values) for family in families)
            self.snapshot = MetricsSnapshot(
                families=families,
                fetched_at=time.time(),
                source_url=self.config.metrics_url,
                samples_count=samples_count
            )
            self.last_success_time = self.snapshot.fetched_at
            self.last_error = None

            log_poll_completed(logger, len(families), samples_count,
                               time.time() - start_time, self.config.metrics_url)
            return True

    async def fetch_text(self) -> str:
        """GET the exposition text; raises httpx.HTTPError on failure"""
        response = await self.client.get(self.config.metrics_url)
        response.raise_for_status()
        return response.text
