from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone, tzinfo

import numpy as np

from treeline_plot.axis import AxisTick, day_ticks, month_ticks
from treeline_plot.chart import HoverMarker, hover_marker, project_line
from treeline_plot.hit_test import nearest
from treeline_plot.scales import ChartScales, compute_scales
from treeline_plot.series import DailyPoint, DisplayMode, series_total
from treeline_plot.zoom import pan_by, zoom_at

from .events import DisplayModeChanged, Resized, Zoomed
from .state import AppState
from .store import ChartStore


@dataclass(frozen=True, eq=False)
class ChartFrame:
    """Everything a renderer needs for one paint. ``scales`` is None until data arrives."""

    scales: ChartScales | None
    total: float
    display_mode: DisplayMode
    hovered: DailyPoint | None = None
    marker: HoverMarker | None = None
    day_ticks: tuple[AxisTick, ...] = ()
    month_ticks: tuple[AxisTick, ...] = ()
    line_x: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    line_y: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))

    @property
    def is_empty(self) -> bool:
        return self.scales is None


def build_frame(state: AppState, pointer_x: float | None = None, tz: tzinfo = timezone.utc) -> ChartFrame:
    scales = compute_scales(
        state.trees,
        state.dimensions,
        state.transform,
        state.display_mode,
        state.axis_height,
    )
    total = series_total(state.trees)
    if scales is None:
        return ChartFrame(scales=None, total=total, display_mode=state.display_mode)
    hovered = nearest(state.trees, scales.x, pointer_x)
    line_x, line_y = project_line(state.trees, scales, state.display_mode)
    return ChartFrame(
        scales=scales,
        total=total,
        display_mode=state.display_mode,
        hovered=hovered,
        marker=hover_marker(hovered, scales, state.display_mode) if hovered is not None else None,
        day_ticks=tuple(day_ticks(scales, tz)),
        month_ticks=tuple(month_ticks(scales, state.trees)),
        line_x=line_x,
        line_y=line_y,
    )


class ChartSession:
    """Interaction-thread facade: turns pointer and window input into store events."""

    def __init__(self, store: ChartStore, tz: tzinfo = timezone.utc) -> None:
        self._store = store
        self._tz = tz
        self._pointer_x: float | None = None

    @property
    def store(self) -> ChartStore:
        return self._store

    @property
    def pointer_x(self) -> float | None:
        return self._pointer_x

    def pointer_moved(self, x: float) -> None:
        self._pointer_x = float(x)

    def pointer_left(self) -> None:
        self._pointer_x = None

    def wheel(self, factor: float, anchor_x: float) -> None:
        self._store.process_pending()
        state = self._store.state
        self._store.apply(Zoomed(transform=zoom_at(state.transform, factor, anchor_x, state.dimensions)))

    def drag(self, delta_x: float) -> None:
        self._store.process_pending()
        state = self._store.state
        self._store.apply(Zoomed(transform=pan_by(state.transform, delta_x, state.dimensions)))

    def resize(self, width: float, height: float) -> None:
        self._store.apply(Resized(width=width, height=height))

    def select_mode(self, mode: DisplayMode) -> None:
        self._store.apply(DisplayModeChanged(option=mode))

    def frame(self) -> ChartFrame:
        self._store.process_pending()
        return build_frame(self._store.state, self._pointer_x, self._tz)
