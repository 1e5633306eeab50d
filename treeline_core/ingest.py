from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone, tzinfo
import json
import logging
import threading
from typing import Any, Callable, Literal, Protocol
import urllib.error
import urllib.request

from treeline_plot.adapters.normalize import normalize_events
from treeline_plot.aggregate import aggregate
from treeline_plot.errors import FeedDecodeError, FeedFetchError
from treeline_plot.series import RawEvent

from .config import DEFAULT_FEED_URL
from .events import IngestionFailed, SeriesLoaded, StoreEvent

LOGGER = logging.getLogger(__name__)

IngestionOutcome = Literal["pending", "loaded", "failed"]


class EventFeed(Protocol):
    def fetch_events(self) -> list[RawEvent]:
        ...


class FeedClient:
    """Single GET of the planting feed, decoded into raw events."""

    def __init__(self, url: str = DEFAULT_FEED_URL, timeout_s: float = 30.0) -> None:
        if timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        self._url = url
        self._timeout_s = timeout_s

    @property
    def url(self) -> str:
        return self._url

    def fetch_events(self) -> list[RawEvent]:
        return normalize_events(self._get_json())

    def _get_json(self) -> Any:
        req = urllib.request.Request(
            url=self._url,
            headers={"Accept": "application/json", "User-Agent": "treeline-feed/1.0"},
            method="GET",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout_s) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            raise FeedFetchError(f"feed error {exc.code} on GET {self._url}") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise FeedFetchError(f"feed unreachable at {self._url}: {exc}") from exc
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise FeedDecodeError(f"feed at {self._url} is not valid JSON: {exc}") from exc


@dataclass(frozen=True)
class IngestionResult:
    outcome: IngestionOutcome
    event: StoreEvent | None = None
    error: Exception | None = None


class IngestionTask:
    """Fetches and aggregates the feed once on a worker thread.

    Exactly one event is handed to ``deliver``: ``SeriesLoaded`` on success,
    ``IngestionFailed`` otherwise.
    """

    def __init__(
        self,
        feed: EventFeed,
        deliver: Callable[[StoreEvent], None],
        tz: tzinfo = timezone.utc,
    ) -> None:
        self._feed = feed
        self._deliver = deliver
        self._tz = tz
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self._result = IngestionResult(outcome="pending")
        self._lock = threading.Lock()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="treeline-ingest", daemon=True)
        self._thread.start()

    def wait(self, timeout: float | None = None) -> IngestionResult:
        self._done.wait(timeout=timeout)
        return self._result

    @property
    def outcome(self) -> IngestionOutcome:
        return self._result.outcome

    @property
    def last_error(self) -> Exception | None:
        return self._result.error

    def run_once(self) -> IngestionResult:
        """Run the fetch on the calling thread. ``start()`` runs it on the worker instead."""
        with self._lock:
            if self._done.is_set():
                return self._result
            return self._ingest()

    def _ingest(self) -> IngestionResult:
        LOGGER.info("ingestion started")
        try:
            series = aggregate(self._feed.fetch_events(), self._tz)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("ingestion failed: %s", exc)
            event: StoreEvent = IngestionFailed(reason=str(exc) or type(exc).__name__)
            self._result = IngestionResult(outcome="failed", event=event, error=exc)
        else:
            LOGGER.info("ingestion finished with %d daily points", len(series))
            event = SeriesLoaded(trees=series)
            self._result = IngestionResult(outcome="loaded", event=event)
        try:
            self._deliver(event)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("delivering %s failed: %s", type(event).__name__, exc)
            self._result = IngestionResult(outcome="failed", event=event, error=exc)
        finally:
            self._done.set()
        return self._result

    def _run(self) -> None:
        self.run_once()
