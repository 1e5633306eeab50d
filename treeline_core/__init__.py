from .config import DEFAULT_FEED_URL, TreelineConfig, load_config
from .events import DisplayModeChanged, IngestionFailed, Resized, SeriesLoaded, StoreEvent, Zoomed
from .ingest import EventFeed, FeedClient, IngestionResult, IngestionTask
from .state import AppState, initial_state, reduce
from .store import ChartStore
from .view import ChartFrame, ChartSession, build_frame

__all__ = [
    "AppState",
    "ChartFrame",
    "ChartSession",
    "ChartStore",
    "DEFAULT_FEED_URL",
    "DisplayModeChanged",
    "EventFeed",
    "FeedClient",
    "IngestionFailed",
    "IngestionResult",
    "IngestionTask",
    "Resized",
    "SeriesLoaded",
    "StoreEvent",
    "TreelineConfig",
    "Zoomed",
    "build_frame",
    "initial_state",
    "load_config",
    "reduce",
]
