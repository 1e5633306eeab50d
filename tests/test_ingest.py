from __future__ import annotations

from datetime import datetime, timezone
import io
import json
from pathlib import Path
import tempfile
import unittest
from unittest import mock
import urllib.error

from treeline_core.events import IngestionFailed, SeriesLoaded
from treeline_core.ingest import FeedClient, IngestionTask
from treeline_core.state import initial_state
from treeline_core.store import ChartStore
from treeline_plot.errors import FeedDecodeError, FeedFetchError
from treeline_plot.series import RawEvent

FEED = [
    {"createdAt": "2023-01-02T09:00:00Z", "value": 2},
    {"createdAt": "2023-01-01T20:00:00Z", "value": 3},
    {"createdAt": "2023-01-01T10:00:00Z", "value": 5},
]


class _StaticFeed:
    def __init__(self, events: list[RawEvent]) -> None:
        self.events = events
        self.calls = 0

    def fetch_events(self) -> list[RawEvent]:
        self.calls += 1
        return self.events


class _FailingFeed:
    def fetch_events(self) -> list[RawEvent]:
        raise FeedFetchError("feed unreachable at https://example.invalid/trees")


class FeedClientTests(unittest.TestCase):
    def test_reads_local_json_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "trees.json"
            path.write_text(json.dumps(FEED), encoding="utf-8")
            events = FeedClient(path.as_uri()).fetch_events()
        self.assertEqual(len(events), 3)
        self.assertEqual(events[0].created_at, datetime(2023, 1, 2, 9, 0, tzinfo=timezone.utc))
        self.assertEqual(events[0].value, 2.0)

    def test_http_error_becomes_fetch_error(self) -> None:
        err = urllib.error.HTTPError("https://example.invalid/trees", 503, "unavailable", {}, io.BytesIO(b""))
        with mock.patch("treeline_core.ingest.urllib.request.urlopen", side_effect=err):
            with self.assertRaises(FeedFetchError):
                FeedClient("https://example.invalid/trees").fetch_events()

    def test_unreachable_host_becomes_fetch_error(self) -> None:
        with mock.patch(
            "treeline_core.ingest.urllib.request.urlopen",
            side_effect=urllib.error.URLError("name resolution failed"),
        ):
            with self.assertRaises(FeedFetchError):
                FeedClient("https://example.invalid/trees").fetch_events()

    def test_invalid_json_becomes_decode_error(self) -> None:
        response = mock.MagicMock()
        response.__enter__.return_value.read.return_value = b"<html>"
        with mock.patch("treeline_core.ingest.urllib.request.urlopen", return_value=response):
            with self.assertRaises(FeedDecodeError):
                FeedClient("https://example.invalid/trees").fetch_events()

    def test_timeout_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            FeedClient("https://example.invalid/trees", timeout_s=0)


class IngestionTaskTests(unittest.TestCase):
    def _events(self) -> list[RawEvent]:
        return [
            RawEvent(created_at=datetime.fromisoformat(r["createdAt"].replace("Z", "+00:00")), value=r["value"])
            for r in FEED
        ]

    def test_delivers_series_loaded_once(self) -> None:
        store = ChartStore(initial_state(width=100, height=100))
        feed = _StaticFeed(self._events())
        task = IngestionTask(feed, deliver=store.dispatch)
        task.start()
        result = task.wait(timeout=2.0)
        self.assertEqual(result.outcome, "loaded")
        self.assertIsInstance(result.event, SeriesLoaded)
        task.run_once()
        self.assertEqual(feed.calls, 1)
        self.assertEqual(store.process_pending(), 1)
        trees = store.state.trees
        self.assertEqual([(p.total, p.cumulative) for p in trees], [(8.0, 8.0), (2.0, 10.0)])
        self.assertEqual(store.state.ingestion, "loaded")

    def test_failure_surfaces_as_failed_state(self) -> None:
        store = ChartStore()
        task = IngestionTask(_FailingFeed(), deliver=store.dispatch)
        with self.assertLogs("treeline_core.ingest", level="ERROR"):
            result = task.run_once()
        self.assertEqual(result.outcome, "failed")
        self.assertIsInstance(result.event, IngestionFailed)
        self.assertIsInstance(task.last_error, FeedFetchError)
        store.process_pending()
        self.assertEqual(store.state.ingestion, "failed")
        self.assertIn("unreachable", store.state.ingestion_error or "")
        self.assertEqual(store.state.trees, ())

    def test_delivery_error_is_recorded_as_failure(self) -> None:
        store = ChartStore(max_queue_size=1)
        store.dispatch(SeriesLoaded(trees=()))
        task = IngestionTask(_StaticFeed(self._events()), deliver=store.dispatch)
        with self.assertLogs("treeline_core.ingest", level="ERROR") as logs:
            task.start()
            result = task.wait(timeout=2.0)
        self.assertEqual(result.outcome, "failed")
        self.assertIsInstance(result.event, SeriesLoaded)
        self.assertIsInstance(task.last_error, RuntimeError)
        self.assertIn("store queue is full", str(task.last_error))
        self.assertTrue(any("delivering SeriesLoaded failed" in line for line in logs.output))
        self.assertEqual(task.outcome, "failed")

    def test_outcome_is_pending_before_run(self) -> None:
        task = IngestionTask(_StaticFeed([]), deliver=lambda event: None)
        self.assertEqual(task.outcome, "pending")
        self.assertEqual(task.wait(timeout=0.01).outcome, "pending")


if __name__ == "__main__":
    unittest.main()
