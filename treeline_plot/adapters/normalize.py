from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from decimal import Decimal
import math
from typing import Any

from treeline_plot.errors import FeedDecodeError
from treeline_plot.series import RawEvent


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


CREATED_AT_KEY = "createdAt"
VALUE_KEY = "value"


def normalize_events(records: Any) -> list[RawEvent]:
    """Coerce decoded feed records into ``RawEvent`` values.

    ``records`` is a sequence of mappings with ``createdAt`` and ``value`` keys,
    or a pandas DataFrame with those columns.
    """
    if pd is not None and isinstance(records, pd.DataFrame):
        records = _records_from_frame(records)
    if isinstance(records, (str, bytes, bytearray)) or not isinstance(records, Sequence):
        raise FeedDecodeError(f"feed must be a list of records, got {type(records).__name__}")

    events: list[RawEvent] = []
    for i, raw in enumerate(records):
        if not isinstance(raw, Mapping):
            raise FeedDecodeError(f"record {i} is not an object: {raw!r}")
        if CREATED_AT_KEY not in raw or VALUE_KEY not in raw:
            raise FeedDecodeError(f"record {i} is missing `{CREATED_AT_KEY}` or `{VALUE_KEY}`")
        events.append(
            RawEvent(
                created_at=parse_timestamp(raw[CREATED_AT_KEY], index=i),
                value=_coerce_value(raw[VALUE_KEY], index=i),
            )
        )
    return events


def parse_timestamp(raw: Any, *, index: int = 0) -> datetime:
    if isinstance(raw, datetime):
        moment = raw
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as exc:
            raise FeedDecodeError(f"record {index} has an invalid timestamp: {raw!r}") from exc
    else:
        raise FeedDecodeError(f"record {index} has an invalid timestamp: {raw!r}")
    if moment.tzinfo is None:
        # Naive feed timestamps are UTC.
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _coerce_value(raw: Any, *, index: int) -> float:
    if isinstance(raw, bool) or raw is None:
        raise FeedDecodeError(f"record {index} has a non-numeric value: {raw!r}")
    if isinstance(raw, Decimal):
        value = float(raw)
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise FeedDecodeError(f"record {index} has a non-numeric value: {raw!r}") from exc
    if not math.isfinite(value):
        raise FeedDecodeError(f"record {index} has a non-finite value: {raw!r}")
    return value


def _records_from_frame(frame: Any) -> list[dict[str, Any]]:
    missing = [c for c in (CREATED_AT_KEY, VALUE_KEY) if c not in frame.columns]
    if missing:
        raise FeedDecodeError(f"column not found: {missing[0]}")
    return frame[[CREATED_AT_KEY, VALUE_KEY]].to_dict(orient="records")
