from treeline_plot.aggregate import aggregate, day_boundary
from treeline_plot.errors import FeedDecodeError, FeedFetchError, TreelineError
from treeline_plot.hit_test import nearest
from treeline_plot.scales import ChartScales, LinearScale, Viewport, ZoomTransform, compute_scales
from treeline_plot.series import DailyPoint, DisplayMode, RawEvent, Series, point_value, series_total

__all__ = [
    "ChartScales",
    "DailyPoint",
    "DisplayMode",
    "FeedDecodeError",
    "FeedFetchError",
    "LinearScale",
    "RawEvent",
    "Series",
    "TreelineError",
    "Viewport",
    "ZoomTransform",
    "aggregate",
    "compute_scales",
    "day_boundary",
    "nearest",
    "point_value",
    "series_total",
]
