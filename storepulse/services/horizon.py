"""Horizon calculator: the [earliest, horizon_end] window a timeline must cover."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Sequence, Union

from storepulse.services.dates import add_months, to_calendar_date
from storepulse.services.timeline_types import DomainEvent, Horizon

logger = logging.getLogger(__name__)

FALLBACK_WINDOW_DAYS = 7


def resolve_today(now: Union[datetime, date]) -> date:
    today = to_calendar_date(now)
    if today is None:
        raise TypeError(f"now must be a date or datetime, got {type(now).__name__}")
    return today


def compute_horizon(events: Sequence[DomainEvent], now: Union[datetime, date]) -> Horizon:
    """Compute the analysis window for a set of events.

    The upper bound is the furthest future promotion end, capped at one
    calendar month from today. It never lies in the past.
    """
    today = resolve_today(now)
    one_month_from_now = add_months(today, 1)

    if events:
        earliest = min(event.start for event in events)
    else:
        earliest = today - timedelta(days=FALLBACK_WINDOW_DAYS)

    future_ends = [
        event.end
        for event in events
        if event.is_interval and event.end is not None and event.end > today
    ]
    if future_ends:
        horizon_end = min(max(future_ends), one_month_from_now)
    else:
        horizon_end = one_month_from_now

    logger.debug(f"Horizon for {len(events)} events: earliest={earliest} horizon_end={horizon_end}")
    return Horizon(earliest=earliest, horizon_end=horizon_end, today=today)
