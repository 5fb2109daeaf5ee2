"""Smart insight cards derived from a store's normalized events."""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Optional, Sequence

from storepulse.schemas.analytics import InsightCard
from storepulse.services.dates import MONTH_ABBR
from storepulse.services.series_catalog import deal_type_label
from storepulse.services.summary import average_views_per_product, round_half_up
from storepulse.services.timeline_types import DomainEvent, EntityType

LOW_STOCK_THRESHOLD = 10
# Average views per product above which engagement counts as strong
STRONG_ENGAGEMENT_VIEWS = 10

_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _best_view_day(events: Sequence[DomainEvent]) -> Optional[InsightCard]:
    best_day: Optional[date] = None
    best_views = 0
    for event in events:
        if event.entity_type != EntityType.VIEW_SAMPLE:
            continue
        views = event.attributes.get("count", 0)
        if views > best_views:
            best_views = views
            best_day = event.start
    if best_day is None:
        return None
    day_name = f"{_WEEKDAYS[best_day.weekday()]}, {MONTH_ABBR[best_day.month - 1]} {best_day.day}"
    return InsightCard(
        type="bestDay",
        title="Best Day",
        description=f"{day_name} had {best_views} views",
        icon="trending-up",
        color="#10B981",
    )


def _popular_deal(events: Sequence[DomainEvent]) -> Optional[InsightCard]:
    counts = Counter(
        event.attributes["dealType"]
        for event in events
        if event.entity_type == EntityType.PROMOTION_INTERVAL and event.attributes.get("dealType")
    )
    if not counts:
        return None
    deal_type, total = counts.most_common(1)[0]
    return InsightCard(
        type="popularDeal",
        title="Popular Deal",
        description=f"{deal_type_label(deal_type)} ({total} deals)",
        icon="star",
        color="#F59E0B",
    )


def _engagement(events: Sequence[DomainEvent]) -> Optional[InsightCard]:
    if not any(event.entity_type == EntityType.PRODUCT for event in events):
        return None
    average = average_views_per_product(events)
    if average > STRONG_ENGAGEMENT_VIEWS:
        return InsightCard(
            type="engagement",
            title="Strong Engagement",
            description=f"{round_half_up(average)} avg views per product",
            icon="rocket",
            color="#8B5CF6",
        )
    if average > 0:
        return InsightCard(
            type="engagement",
            title="Growing",
            description="Keep adding quality content!",
            icon="information-circle",
            color="#3B82F6",
        )
    return None


def _stock_alert(events: Sequence[DomainEvent]) -> Optional[InsightCard]:
    low_stock = 0
    for event in events:
        if event.entity_type != EntityType.PRODUCT:
            continue
        stock = event.attributes.get("stock") or 0
        if isinstance(stock, (int, float)) and 0 < stock < LOW_STOCK_THRESHOLD:
            low_stock += 1
    if not low_stock:
        return None
    return InsightCard(
        type="stockAlert",
        title="Stock Alert",
        description=f"{low_stock} product{'s' if low_stock > 1 else ''} running low",
        icon="warning",
        color="#EF4444",
    )


def compute_insights(events: Sequence[DomainEvent], today: date) -> list[InsightCard]:
    """Best view day, popular deal type, engagement and low-stock alert, when applicable.

    Only view samples up to ``today`` are considered for the best day.
    """
    past_events = [event for event in events if event.start <= today or event.entity_type != EntityType.VIEW_SAMPLE]
    cards = [
        _best_view_day(past_events),
        _popular_deal(events),
        _engagement(events),
        _stock_alert(events),
    ]
    return [card for card in cards if card is not None]
