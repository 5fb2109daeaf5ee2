"""Per-metric summary cards shown when a chart series is opened."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from storepulse.schemas.analytics import MetricSummary, SummaryMetric
from storepulse.services.dates import add_months
from storepulse.services.series_catalog import (
    DEAL_TYPES,
    PRODUCTS_KEY,
    VIEWS_KEY,
    promotion_series_key,
)
from storepulse.services.timeline_types import DomainEvent, EntityType


def round_half_up(value: float) -> int:
    """Round a non-negative number to the nearest integer, halves up."""
    return int(value + 0.5)


def _of_type(events: Sequence[DomainEvent], entity_type: EntityType) -> list[DomainEvent]:
    return [event for event in events if event.entity_type == entity_type]


def _view_total(views: Sequence[DomainEvent], attribute: str) -> int:
    return sum(event.attributes.get(attribute, 0) for event in views)


def average_views_per_product(events: Sequence[DomainEvent]) -> float:
    products = _of_type(events, EntityType.PRODUCT)
    if not products:
        return 0.0
    return _view_total(_of_type(events, EntityType.VIEW_SAMPLE), "count") / len(products)


def _deal_type_summary(
    deal_type: str, label: str, color: str, promotions: Sequence[DomainEvent], today: date
) -> MetricSummary:
    active = sum(1 for promotion in promotions if promotion.is_active_on(today, today))
    week_start = today - timedelta(days=7)
    month_start = add_months(today, -1)
    return MetricSummary(
        key=promotion_series_key(deal_type),
        title=f"{label} Promotions",
        icon="ticket",
        color=color,
        metrics=[
            SummaryMetric(label="Total", value=len(promotions)),
            SummaryMetric(label="Active", value=active),
            SummaryMetric(label="Inactive", value=len(promotions) - active),
            SummaryMetric(label="Today", value=sum(1 for p in promotions if p.start >= today)),
            SummaryMetric(label="This Week", value=sum(1 for p in promotions if p.start >= week_start)),
            SummaryMetric(label="This Month", value=sum(1 for p in promotions if p.start >= month_start)),
        ],
    )


def _products_overview(products: Sequence[DomainEvent]) -> MetricSummary:
    active = sum(1 for product in products if product.attributes.get("isActive", True) is not False)
    return MetricSummary(
        key=PRODUCTS_KEY,
        title="Products Overview",
        icon="cube",
        color="#277874",
        metrics=[
            SummaryMetric(label="Total Products", value=len(products)),
            SummaryMetric(label="Active Products", value=active),
            SummaryMetric(label="Inactive Products", value=len(products) - active),
        ],
    )


def _views_overview(
    views: Sequence[DomainEvent], product_count: int, promotion_count: int
) -> MetricSummary:
    total = _view_total(views, "count")
    per_product = round_half_up(total / product_count) if product_count else 0
    per_promotion = round_half_up(total / promotion_count) if promotion_count else 0
    return MetricSummary(
        key=VIEWS_KEY,
        title="Views Overview",
        icon="eye",
        color="#8B5CF6",
        metrics=[
            SummaryMetric(label="Total Views", value=total),
            SummaryMetric(label="Store Views", value=_view_total(views, "storeViews")),
            SummaryMetric(label="Product Views", value=_view_total(views, "productViews")),
            SummaryMetric(label="Avg Views/Product", value=per_product),
            SummaryMetric(label="Avg Views/Promotion", value=per_promotion),
        ],
    )


def compute_summary(events: Sequence[DomainEvent], today: date) -> list[MetricSummary]:
    """Summary cards for every deal type with promotions, then products and views.

    "Today", "This Week" and "This Month" count promotions starting on or
    after today, seven days ago and one month ago respectively; promotions
    scheduled for later are included.
    """
    promotions = _of_type(events, EntityType.PROMOTION_INTERVAL)
    products = _of_type(events, EntityType.PRODUCT)
    views = _of_type(events, EntityType.VIEW_SAMPLE)

    cards: list[MetricSummary] = []
    for deal_type, label, color in DEAL_TYPES:
        of_type = [promotion for promotion in promotions if promotion.attributes.get("dealType") == deal_type]
        if of_type:
            cards.append(_deal_type_summary(deal_type, label, color, of_type, today))
    cards.append(_products_overview(products))
    cards.append(_views_overview(views, len(products), len(promotions)))
    return cards
