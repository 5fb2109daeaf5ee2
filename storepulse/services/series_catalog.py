"""Default chart series for the retailer analytics dashboard."""

from __future__ import annotations

from typing import Iterable, Optional

from storepulse.services.timeline_types import (
    ChartType,
    DomainEvent,
    EntityType,
    MetricKind,
    MonthlyMode,
    SeriesDefinition,
)

# (deal type, display label, line colour)
DEAL_TYPES: list[tuple[str, str, str]] = [
    ("PERCENTAGE_DISCOUNT", "Percentage Discount", "#FF6B6B"),
    ("FIXED_DISCOUNT", "Fixed Amount Discount", "#4ECDC4"),
    ("BOGO", "Buy One Get One (BOGO)", "#FFBE5D"),
    ("BUNDLE", "Bundle Deal", "#95E1D3"),
    ("QUANTITY_DISCOUNT", "Quantity Discount", "#F38181"),
    ("VOUCHER", "Voucher", "#AA96DA"),
]

PRODUCTS_KEY = "products"
VIEWS_KEY = "views"


def promotion_series_key(deal_type: str) -> str:
    return f"promotion-{deal_type}"


def deal_type_label(deal_type: str) -> str:
    for value, label, _ in DEAL_TYPES:
        if value == deal_type:
            return label
    return deal_type


def _deal_type_matcher(deal_type: str):
    def matches(event: DomainEvent) -> bool:
        return event.entity_type == EntityType.PROMOTION_INTERVAL and event.attributes.get("dealType") == deal_type

    return matches


def _is_product(event: DomainEvent) -> bool:
    return event.entity_type == EntityType.PRODUCT


def _is_view_sample(event: DomainEvent) -> bool:
    return event.entity_type == EntityType.VIEW_SAMPLE


def _products_label(drill_down: Optional[DomainEvent], value: float) -> str:
    count = int(value)
    return f"{count} product{'s' if count > 1 else ''}"


def _views_label(drill_down: Optional[DomainEvent], value: float) -> str:
    return f"{int(value)} views"


def default_series() -> list[SeriesDefinition]:
    """Every series the dashboard knows about, in display order."""
    series = [
        SeriesDefinition(
            key=promotion_series_key(deal_type),
            label=label,
            color=color,
            chart_type=ChartType.LINE,
            match_predicate=_deal_type_matcher(deal_type),
        )
        for deal_type, label, color in DEAL_TYPES
    ]
    series.append(
        SeriesDefinition(
            key=PRODUCTS_KEY,
            label="Products Created",
            color="#277874",
            chart_type=ChartType.BAR,
            match_predicate=_is_product,
            monthly_mode=MonthlyMode.TOTAL,
            point_label=_products_label,
        )
    )
    series.append(
        SeriesDefinition(
            key=VIEWS_KEY,
            label="Total Views",
            color="#8B5CF6",
            chart_type=ChartType.BAR,
            match_predicate=_is_view_sample,
            metric=MetricKind.SUM,
            value_attribute="count",
            monthly_mode=MonthlyMode.TOTAL,
            point_label=_views_label,
        )
    )
    return series


def select_series(keys: Optional[Iterable[str]]) -> list[SeriesDefinition]:
    """Definitions for the requested keys in request order; unknown keys are ignored.

    No keys selects the whole catalog.
    """
    catalog = default_series()
    wanted = [key for key in (keys or []) if key]
    if not wanted:
        return catalog

    by_key = {definition.key: definition for definition in catalog}
    selected: list[SeriesDefinition] = []
    for key in wanted:
        definition = by_key.get(key)
        if definition is not None and definition not in selected:
            selected.append(definition)
    return selected
