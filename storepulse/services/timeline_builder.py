"""Timeline builder: the adaptive time axis shared by every chart series.

History older than one rolling month collapses into monthly buckets, the
trailing month is shown day by day, and the future gets a handful of
strategic points up to the horizon end. Activity dates are injected so that
every event is visible on the axis.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, Sequence

from storepulse.services.dates import (
    add_months,
    date_key,
    day_label,
    iter_days,
    month_label,
    month_start,
)
from storepulse.services.timeline_types import DomainEvent, Granularity, Horizon, TimelinePoint

logger = logging.getLogger(__name__)

FALLBACK_DAYS = 7
# Promotions up to this many days long get a point for every day
SHORT_INTERVAL_DAYS = 7
FUTURE_OFFSETS_DAYS = (1, 7, 14)


class _TimelineAccumulator:
    """Collects points keyed by date; the first insertion of a key wins."""

    def __init__(self) -> None:
        self._points: dict[str, TimelinePoint] = {}

    def add(self, day: date, label: str, granularity: Granularity) -> None:
        key = date_key(day)
        if key in self._points:
            return
        self._points[key] = TimelinePoint(date_key=key, label=label, granularity=granularity)

    def build(self) -> list[TimelinePoint]:
        ordered = sorted(self._points.values(), key=lambda point: point.date_key)
        return [
            TimelinePoint(
                date_key=point.date_key,
                label=point.label,
                granularity=point.granularity,
                index=index,
            )
            for index, point in enumerate(ordered)
        ]


def fallback_timeline(today: date) -> list[TimelinePoint]:
    """Seven trailing daily points ending with "Today"."""
    acc = _TimelineAccumulator()
    for day in iter_days(today - timedelta(days=FALLBACK_DAYS - 1), today):
        acc.add(day, day_label(day, today), Granularity.DAILY)
    return acc.build()


def interval_injection_dates(event: DomainEvent, today: date) -> list[date]:
    """Dates injected for a promotion interval.

    Short intervals contribute every day; long ones only start, midpoint and
    end.
    """
    end = event.effective_end(today)
    duration = (end - event.start).days
    if duration <= SHORT_INTERVAL_DAYS:
        return list(iter_days(event.start, end))
    midpoint = event.start + timedelta(days=duration // 2)
    return [event.start, midpoint, end]


def _event_dates(event: DomainEvent, today: date) -> Iterable[date]:
    if event.is_interval:
        return interval_injection_dates(event, today)
    if event.end is not None and event.end != event.start:
        return (event.start, event.end)
    return (event.start,)


def build_timeline(horizon: Horizon, events: Sequence[DomainEvent]) -> list[TimelinePoint]:
    """Build the sorted, deduplicated timeline for the given horizon."""
    today = horizon.today
    if not events or horizon.earliest > horizon.horizon_end:
        logger.info(f"Using {FALLBACK_DAYS}-day fallback timeline ending {today}")
        return fallback_timeline(today)

    one_month_ago = add_months(today, -1)
    acc = _TimelineAccumulator()

    def add_bucket(day: date) -> None:
        if day > horizon.horizon_end:
            return
        if day < one_month_ago:
            first = month_start(day)
            acc.add(first, month_label(first, today), Granularity.MONTHLY)
        else:
            acc.add(day, day_label(day, today), Granularity.DAILY)

    # Historical months that saw activity
    for event in events:
        for day in (event.start, event.end):
            if day is not None and day < one_month_ago:
                add_bucket(day)

    # Trailing month, one point per day
    daily_start = min(max(horizon.earliest, one_month_ago), today)
    for day in iter_days(daily_start, today):
        acc.add(day, day_label(day, today), Granularity.DAILY)

    # Activity dates not already covered
    for event in events:
        for day in _event_dates(event, today):
            add_bucket(day)

    # Strategic future points
    for offset in FUTURE_OFFSETS_DAYS:
        day = today + timedelta(days=offset)
        if day <= horizon.horizon_end:
            acc.add(day, day_label(day, today), Granularity.DAILY)
    month = month_start(add_months(month_start(today), 1))
    while month <= horizon.horizon_end:
        acc.add(month, month_label(month, today), Granularity.MONTHLY)
        month = add_months(month, 1)
    acc.add(horizon.horizon_end, day_label(horizon.horizon_end, today), Granularity.DAILY)

    timeline = acc.build()
    logger.debug(f"Built timeline with {len(timeline)} points from {len(events)} events")
    return timeline
