"""Series aggregator: per-point values for one series over a shared timeline."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from storepulse.core.config import settings
from storepulse.services.dates import add_months, iter_days, month_end, month_start
from storepulse.services.timeline_types import (
    AggregatedPoint,
    DomainEvent,
    Granularity,
    MetricKind,
    MonthlyMode,
    SeriesDefinition,
    TimelinePoint,
)

logger = logging.getLogger(__name__)

_Bucket = tuple[float, Optional[DomainEvent]]


def truncate_title(title: str, max_length: Optional[int] = None) -> str:
    limit = max_length or settings.POINT_LABEL_MAX_LENGTH
    if len(title) > limit:
        return title[:limit] + "..."
    return title


def _contribution(event: DomainEvent, definition: SeriesDefinition) -> float:
    if definition.metric == MetricKind.COUNT:
        return 1
    raw = event.attributes.get(definition.value_attribute or "value")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0
    return raw if raw > 0 else 0


def _sum_bucket(
    events: Sequence[DomainEvent], definition: SeriesDefinition, include
) -> _Bucket:
    value: float = 0
    first: Optional[DomainEvent] = None
    for event in events:
        if not include(event):
            continue
        amount = _contribution(event, definition)
        value += amount
        if first is None and amount > 0:
            first = event
    return value, first


def _day_bucket(
    day: date, events: Sequence[DomainEvent], definition: SeriesDefinition, today: date
) -> _Bucket:
    return _sum_bucket(events, definition, lambda event: event.is_active_on(day, today))


def _month_snapshot(
    first_day: date, events: Sequence[DomainEvent], definition: SeriesDefinition, today: date
) -> _Bucket:
    # Month-end value; zero there falls back to the best day of the month
    last_day = month_end(first_day)
    value, first = _day_bucket(last_day, events, definition, today)
    if value:
        return value, first

    best: _Bucket = (0, None)
    for day in iter_days(first_day, last_day):
        candidate = _day_bucket(day, events, definition, today)
        if candidate[0] > best[0]:
            best = candidate
    return best


def _month_total(
    first_day: date, events: Sequence[DomainEvent], definition: SeriesDefinition, today: date
) -> _Bucket:
    last_day = month_end(first_day)
    # Days from one month ago onwards have their own daily points
    daily_from = add_months(today, -1)
    if first_day < daily_from <= last_day:
        last_day = daily_from - timedelta(days=1)

    def overlaps(event: DomainEvent) -> bool:
        return event.start <= last_day and event.effective_end(today) >= first_day

    return _sum_bucket(events, definition, overlaps)


def _point_label(definition: SeriesDefinition, drill_down: Optional[DomainEvent], value: float) -> str:
    if not value:
        return ""
    if definition.point_label is not None:
        return definition.point_label(drill_down, value)
    if drill_down is None:
        return ""
    return truncate_title(drill_down.title)


def aggregate_series(
    timeline: Sequence[TimelinePoint],
    events: Sequence[DomainEvent],
    definition: SeriesDefinition,
    today: date,
) -> list[AggregatedPoint]:
    """Compute one AggregatedPoint per timeline point for a series.

    Daily points count (or sum) matching events active on that day. Monthly
    points follow the series' monthly mode. Output is aligned 1:1 with the
    timeline and is a pure function of the inputs.
    """
    matching = [event for event in events if definition.match_predicate(event)]

    points: list[AggregatedPoint] = []
    for point in timeline:
        day = point.day
        if point.granularity == Granularity.MONTHLY:
            if definition.monthly_mode == MonthlyMode.TOTAL:
                value, drill_down = _month_total(month_start(day), matching, definition, today)
            else:
                value, drill_down = _month_snapshot(month_start(day), matching, definition, today)
        else:
            value, drill_down = _day_bucket(day, matching, definition, today)

        if not value:
            drill_down = None
        points.append(
            AggregatedPoint(
                value=value,
                label=point.label,
                date=day,
                point_label=_point_label(definition, drill_down, value),
                drill_down=drill_down,
            )
        )

    logger.debug(f"Aggregated series {definition.key}: {len(matching)} matching events over {len(points)} points")
    return points
