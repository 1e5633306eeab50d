from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
import math

from treeline_plot.aggregate import day_boundary
from treeline_plot.scales import ChartScales, nice_step
from treeline_plot.series import Series

SECONDS_PER_DAY = 86_400.0


@dataclass(frozen=True)
class AxisTick:
    value: datetime
    pixel: int
    label: str


def format_day_ordinal(value: datetime) -> str:
    day = value.day
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_month(value: datetime) -> str:
    return value.strftime("%b %y")


def day_ticks(scales: ChartScales, tz: tzinfo = timezone.utc, count: int = 10) -> list[AxisTick]:
    """Day-boundary ticks across the visible part of the series, roughly ``count`` of them.

    The window is clipped to the series domain; a window that misses the
    series entirely yields no ticks.
    """
    if count <= 0:
        raise ValueError("count must be > 0")
    v0, v1 = sorted(scales.visible_x_domain())
    d0, d1 = sorted(scales.x.domain)
    t0, t1 = max(v0, d0), min(v1, d1)
    if not (math.isfinite(t0) and math.isfinite(t1) and t0 <= t1):
        return []
    step = max(1, int(nice_step((t1 - t0) / SECONDS_PER_DAY, count)))
    try:
        day = day_boundary(datetime.fromtimestamp(t0, tz), tz).date()
        last = datetime.fromtimestamp(t1, tz).date()
    except (OverflowError, ValueError, OSError):
        return []
    ticks: list[AxisTick] = []
    while day <= last:
        if day.toordinal() % step == 0:
            value = datetime.combine(day, time(0, 0), tzinfo=tz)
            ts = value.timestamp()
            if t0 <= ts <= t1:
                ticks.append(AxisTick(value=value, pixel=_pixel(scales, ts), label=format_day_ordinal(value)))
        day += timedelta(days=1)
    return ticks


def month_starts(series: Series) -> list[datetime]:
    months: list[datetime] = []
    for point in series:
        first = point.date.replace(day=1)
        if not months or (months[-1].year, months[-1].month) != (first.year, first.month):
            months.append(first)
    return months


def month_ticks(scales: ChartScales, series: Series) -> list[AxisTick]:
    return [
        AxisTick(value=month, pixel=_pixel(scales, month.timestamp()), label=format_month(month))
        for month in month_starts(series)
    ]


def _pixel(scales: ChartScales, ts: float) -> int:
    px = float(scales.x(ts))
    if not math.isfinite(px):
        return 0
    return int(math.floor(px))
