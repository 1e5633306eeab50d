from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from treeline_plot.scales import ZoomTransform
from treeline_plot.series import DisplayMode, Series


@dataclass(frozen=True)
class SeriesLoaded:
    trees: Series


@dataclass(frozen=True)
class Zoomed:
    transform: ZoomTransform


@dataclass(frozen=True)
class Resized:
    width: float
    height: float


@dataclass(frozen=True)
class DisplayModeChanged:
    option: DisplayMode


@dataclass(frozen=True)
class IngestionFailed:
    reason: str


StoreEvent: TypeAlias = SeriesLoaded | Zoomed | Resized | DisplayModeChanged | IngestionFailed
