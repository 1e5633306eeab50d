from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TypeAlias


@dataclass(frozen=True)
class RawEvent:
    created_at: datetime
    value: float


@dataclass(frozen=True)
class DailyPoint:
    date: datetime
    total: float
    cumulative: float

    @property
    def timestamp(self) -> float:
        return self.date.timestamp()


Series: TypeAlias = tuple[DailyPoint, ...]


class DisplayMode(str, Enum):
    CUMULATIVE = "Cumulative"
    DAILY = "Daily"


def point_value(point: DailyPoint, mode: DisplayMode) -> float:
    """Return the field of ``point`` that ``mode`` plots on the y-axis."""
    if mode is DisplayMode.CUMULATIVE:
        return point.cumulative
    if mode is DisplayMode.DAILY:
        return point.total
    raise ValueError(f"unsupported display mode: {mode!r}")


def series_total(series: Series) -> float:
    if not series:
        return 0.0
    return series[-1].cumulative
