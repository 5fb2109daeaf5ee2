"""Shared fixtures for the analytics timeline tests."""

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from storepulse.services.analytics_service import timeline_cache
from storepulse.services.timeline_types import DomainEvent, EntityType

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)
TODAY = date(2026, 10, 17)


def product(event_id: str, day: date, **attributes) -> DomainEvent:
    return DomainEvent(
        entity_type=EntityType.PRODUCT,
        id=event_id,
        start=day,
        attributes={"name": event_id, **attributes},
    )


def promotion(
    event_id: str,
    start: date,
    end: Optional[date],
    deal_type: str = "BOGO",
    title: Optional[str] = None,
) -> DomainEvent:
    return DomainEvent(
        entity_type=EntityType.PROMOTION_INTERVAL,
        id=event_id,
        start=start,
        end=end,
        attributes={"dealType": deal_type, "title": title or event_id},
    )


def views(day: date, count: int) -> DomainEvent:
    return DomainEvent(
        entity_type=EntityType.VIEW_SAMPLE,
        id=f"views-{day.isoformat()}",
        start=day,
        end=day,
        attributes={"date": day.isoformat(), "count": count},
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture(autouse=True)
def clear_timeline_cache():
    timeline_cache.clear()
    yield
    timeline_cache.clear()
