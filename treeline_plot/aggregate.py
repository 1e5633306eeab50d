from __future__ import annotations

from datetime import datetime, time, timezone, tzinfo
from typing import Iterable

from treeline_plot.series import DailyPoint, RawEvent, Series


def day_boundary(moment: datetime, tz: tzinfo = timezone.utc) -> datetime:
    """Start of the calendar day containing ``moment``, as seen in ``tz``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(tz)
    return datetime.combine(local.date(), time(0, 0), tzinfo=tz)


def aggregate(events: Iterable[RawEvent], tz: tzinfo = timezone.utc) -> Series:
    """Group raw events into one point per day with a running total.

    Events may arrive in any order. The output is ordered by day and every
    point's ``cumulative`` includes all earlier days.
    """
    ordered = sorted(events, key=lambda event: _as_aware(event.created_at))
    grouped: list[DailyPoint] = []
    cumulative_total = 0.0
    for event in ordered:
        value = float(event.value)
        cumulative_total += value
        date = day_boundary(event.created_at, tz)
        if grouped and grouped[-1].date == date:
            tail = grouped[-1]
            grouped[-1] = DailyPoint(date=date, total=tail.total + value, cumulative=cumulative_total)
            continue
        grouped.append(DailyPoint(date=date, total=value, cumulative=cumulative_total))
    return tuple(grouped)


def _as_aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
