from .normalize import normalize_events, parse_timestamp

__all__ = ["normalize_events", "parse_timestamp"]
