from __future__ import annotations

from dataclasses import dataclass, field, replace
import math
from typing import Literal

from treeline_plot.scales import Viewport, ZoomTransform
from treeline_plot.series import DisplayMode, Series

from .events import DisplayModeChanged, IngestionFailed, Resized, SeriesLoaded, StoreEvent, Zoomed

IngestionStatus = Literal["pending", "loaded", "failed"]

DEFAULT_AXIS_HEIGHT = 30.0
PROVISIONAL_WIDTH = 10_000.0
PROVISIONAL_HEIGHT = 300.0


@dataclass(frozen=True)
class AppState:
    trees: Series = ()
    transform: ZoomTransform = field(default_factory=ZoomTransform.identity)
    dimensions: Viewport = field(default_factory=lambda: Viewport(PROVISIONAL_WIDTH, PROVISIONAL_HEIGHT))
    display_mode: DisplayMode = DisplayMode.CUMULATIVE
    axis_height: float = DEFAULT_AXIS_HEIGHT
    ingestion: IngestionStatus = "pending"
    ingestion_error: str | None = None


def initial_state(
    *,
    width: float = PROVISIONAL_WIDTH,
    height: float = PROVISIONAL_HEIGHT,
    axis_height: float = DEFAULT_AXIS_HEIGHT,
) -> AppState:
    if width < 0 or height < 0:
        raise ValueError("width/height must be >= 0")
    return AppState(dimensions=Viewport(float(width), float(height)), axis_height=float(axis_height))


def reduce(state: AppState, event: StoreEvent) -> AppState:
    """Apply one event and return the next state. ``state`` is never modified."""
    if isinstance(event, SeriesLoaded):
        return replace(state, trees=tuple(event.trees), ingestion="loaded", ingestion_error=None)
    if isinstance(event, Zoomed):
        return _zoomed(state, event)
    if isinstance(event, Resized):
        return _resized(state, event)
    if isinstance(event, DisplayModeChanged):
        return replace(state, display_mode=DisplayMode(event.option))
    if isinstance(event, IngestionFailed):
        return replace(state, ingestion="failed", ingestion_error=event.reason)
    raise TypeError(f"unsupported store event: {type(event).__name__}")


def _zoomed(state: AppState, event: Zoomed) -> AppState:
    # Vertical pan is locked: y keeps its current value.
    transform = ZoomTransform(
        x=float(event.transform.x),
        y=state.transform.y,
        k=max(1.0, float(event.transform.k)),
    )
    return replace(state, transform=transform)


def _resized(state: AppState, event: Resized) -> AppState:
    transform = state.transform
    scale = _width_ratio(float(event.width), state.dimensions.width)
    if scale is not None:
        transform = replace(transform, x=transform.x * scale)
    return replace(
        state,
        transform=transform,
        dimensions=Viewport(float(event.width), float(event.height)),
    )


def _width_ratio(new_width: float, old_width: float) -> float | None:
    if old_width == 0:
        return None
    scale = new_width / old_width
    if math.isnan(scale) or math.isinf(scale):
        return None
    return scale
