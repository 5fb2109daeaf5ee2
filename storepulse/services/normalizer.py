"""Event normalizer: raw store records -> DomainEvent list."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from datetime import datetime
from typing import Any, Optional

from storepulse.services.dates import to_calendar_date
from storepulse.services.timeline_types import DomainEvent, EntityType

logger = logging.getLogger(__name__)

# Promotions created before deal types existed only carry a discount "type"
_LEGACY_PERCENTAGE_TYPES = {"percentage", "PERCENTAGE"}


def resolve_deal_type(record: Mapping[str, Any]) -> Optional[str]:
    """Return the promotion's deal type, inferring it for legacy records."""
    deal_type = record.get("dealType")
    if deal_type:
        return str(deal_type)
    legacy_type = record.get("type")
    if legacy_type:
        return "PERCENTAGE_DISCOUNT" if legacy_type in _LEGACY_PERCENTAGE_TYPES else "FIXED_DISCOUNT"
    return None


def _record_id(record: Mapping[str, Any]) -> Optional[str]:
    value = record.get("id")
    if value is None or value == "":
        return None
    return str(value)


def _normalize_product(record: Any) -> Optional[DomainEvent]:
    if not isinstance(record, Mapping):
        logger.warning(f"Dropping product record that is not a mapping: {type(record).__name__}")
        return None
    record_id = _record_id(record)
    created = to_calendar_date(record.get("createdAt"))
    if record_id is None or created is None:
        logger.warning(f"Dropping product record with missing id or bad createdAt: {record.get('id')!r}")
        return None
    return DomainEvent(
        entity_type=EntityType.PRODUCT,
        id=record_id,
        start=created,
        end=None,
        attributes=dict(record),
    )


def _normalize_promotion(record: Any) -> Optional[DomainEvent]:
    if not isinstance(record, Mapping):
        logger.warning(f"Dropping promotion record that is not a mapping: {type(record).__name__}")
        return None
    record_id = _record_id(record)
    if record_id is None or not record.get("startsAt"):
        logger.debug(f"Skipping promotion without id or startsAt: {record.get('id')!r}")
        return None

    start = to_calendar_date(record.get("startsAt"))
    if start is None:
        logger.warning(f"Dropping promotion {record_id}: unparsable startsAt {record.get('startsAt')!r}")
        return None

    end = None
    if record.get("endsAt"):
        end = to_calendar_date(record.get("endsAt"))
        if end is None:
            logger.warning(f"Dropping promotion {record_id}: unparsable endsAt {record.get('endsAt')!r}")
            return None
        if end < start:
            logger.warning(f"Dropping promotion {record_id}: endsAt precedes startsAt")
            return None

    deal_type = resolve_deal_type(record)
    if deal_type is None:
        logger.warning(f"Dropping promotion {record_id}: no dealType or legacy type")
        return None

    attributes = dict(record)
    attributes["dealType"] = deal_type
    return DomainEvent(
        entity_type=EntityType.PROMOTION_INTERVAL,
        id=record_id,
        start=start,
        end=end,
        attributes=attributes,
    )


# Optional per-source breakdown carried through from view sample mappings
_VIEW_BREAKDOWN_KEYS = ("storeViews", "productViews")


def _view_samples(view_samples: Any) -> Iterator[tuple[Any, Any, Mapping[str, Any]]]:
    """Yield (date, count, extra) from a mapping, {date, count} records or (date, count) pairs."""
    if isinstance(view_samples, Mapping):
        for raw_date, raw_count in view_samples.items():
            yield raw_date, raw_count, {}
        return
    if isinstance(view_samples, (str, bytes)) or not isinstance(view_samples, Iterable):
        logger.warning(f"Ignoring view samples of type {type(view_samples).__name__}")
        return
    for sample in view_samples:
        if isinstance(sample, Mapping):
            yield sample.get("date"), sample.get("count"), sample
        elif isinstance(sample, Sequence) and not isinstance(sample, (str, bytes)) and len(sample) == 2:
            yield sample[0], sample[1], {}
        else:
            logger.warning(f"Dropping view sample that is neither a record nor a pair: {sample!r}")


def _non_negative_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return None


def _normalize_views(view_samples: Any) -> list[DomainEvent]:
    events: list[DomainEvent] = []
    for raw_date, raw_count, extra in _view_samples(view_samples):
        day = to_calendar_date(raw_date)
        if day is None:
            logger.warning(f"Dropping view sample with unparsable date {raw_date!r}")
            continue
        count = _non_negative_int(raw_count)
        if count is None:
            logger.warning(f"Dropping view sample for {day}: bad count {raw_count!r}")
            continue
        attributes: dict[str, Any] = {"date": day.isoformat(), "count": count}
        for key in _VIEW_BREAKDOWN_KEYS:
            if key in extra:
                breakdown = _non_negative_int(extra[key])
                if breakdown is not None:
                    attributes[key] = breakdown
        events.append(
            DomainEvent(
                entity_type=EntityType.VIEW_SAMPLE,
                id=f"views-{day.isoformat()}",
                start=day,
                end=day,
                attributes=attributes,
            )
        )
    return events


def normalize_events(
    products: Iterable[Mapping[str, Any]],
    promotions: Iterable[Mapping[str, Any]],
    view_samples: Any,
    now: datetime,
) -> list[DomainEvent]:
    """Convert raw products, promotions and view samples into DomainEvents.

    Output keeps input order: products first, then promotions, then views.
    Bad records are dropped and logged, never raised. ``now`` is accepted so
    every component shares the same call signature; normalization itself
    does not depend on it.
    """
    events: list[DomainEvent] = []
    for record in products or []:
        event = _normalize_product(record)
        if event is not None:
            events.append(event)
    for record in promotions or []:
        event = _normalize_promotion(record)
        if event is not None:
            events.append(event)
    events.extend(_normalize_views(view_samples or []))

    logger.info(f"Normalized {len(events)} events at {now.isoformat()}")
    return events


def normalize_records(records: Iterable[Mapping[str, Any]], now: datetime) -> list[DomainEvent]:
    """Normalize a mixed list of records tagged with ``entityType``.

    Unknown entity types are skipped.
    """
    products: list[Mapping[str, Any]] = []
    promotions: list[Mapping[str, Any]] = []
    views: list[Mapping[str, Any]] = []
    buckets = {
        EntityType.PRODUCT.value: products,
        EntityType.PROMOTION_INTERVAL.value: promotions,
        EntityType.VIEW_SAMPLE.value: views,
        "promotioninterval": promotions,
        "viewsample": views,
    }
    for record in records or []:
        if not isinstance(record, Mapping):
            logger.warning(f"Ignoring record that is not a mapping: {type(record).__name__}")
            continue
        target = buckets.get(str(record.get("entityType", "")).lower())
        if target is None:
            logger.debug(f"Ignoring record with unknown entityType {record.get('entityType')!r}")
            continue
        target.append(record)
    return normalize_events(products, promotions, views, now)
