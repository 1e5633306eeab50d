from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from treeline_plot.scales import ChartScales
from treeline_plot.series import DailyPoint, DisplayMode, Series, point_value


@dataclass(frozen=True)
class HoverMarker:
    x: float
    y: float
    label: str


def project_line(series: Series, scales: ChartScales, mode: DisplayMode) -> tuple[np.ndarray, np.ndarray]:
    """Pixel coordinates of the series polyline, y measured from the top edge."""
    ts = np.asarray([point.timestamp for point in series], dtype=np.float64)
    values = np.asarray([point_value(point, mode) for point in series], dtype=np.float64)
    px = scales.x(ts)
    py = scales.plot_height - scales.y(values)
    return px, py


def hover_marker(point: DailyPoint, scales: ChartScales, mode: DisplayMode) -> HoverMarker:
    value = point_value(point, mode)
    return HoverMarker(
        x=float(scales.x(point.timestamp)),
        y=float(scales.plot_height - scales.y(value)),
        label=format_value(value),
    )


def format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")
