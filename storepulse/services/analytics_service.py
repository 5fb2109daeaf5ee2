"""Analytics timeline service: wires the timeline components together."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from fastapi.concurrency import run_in_threadpool

from storepulse.core.config import settings
from storepulse.schemas.analytics import InsightCard, MetricSummary
from storepulse.services.chart_exporter import assemble_series, export_chart_data, to_response
from storepulse.services.horizon import compute_horizon, resolve_today
from storepulse.services.insights import compute_insights
from storepulse.services.normalizer import normalize_events
from storepulse.services.series_aggregator import aggregate_series
from storepulse.services.series_catalog import select_series
from storepulse.services.summary import compute_summary
from storepulse.services.timeline_builder import build_timeline
from storepulse.services.timeline_types import AggregatedSeries, DomainEvent, SeriesDefinition

logger = logging.getLogger(__name__)

Now = Union[datetime, date]


def timeline_cache_key(
    events: Sequence[DomainEvent], series_keys: Iterable[str], now: Now
) -> str:
    """Hash of the normalized event set, the requested series and the current day."""
    payload = {
        "today": resolve_today(now).isoformat(),
        "series": list(series_keys),
        "events": [
            [
                event.entity_type.value,
                event.id,
                event.start.isoformat(),
                event.end.isoformat() if event.end else None,
                event.attributes,
            ]
            for event in events
        ],
    }
    encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


class TimelineCache:
    """Small thread-safe LRU for computed timelines."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._entries: OrderedDict[str, list[AggregatedSeries]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def get_or_compute(
        self, key: str, compute: Callable[[], list[AggregatedSeries]]
    ) -> list[AggregatedSeries]:
        if self.max_size <= 0:
            return compute()
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                logger.debug(f"Timeline cache hit: {key[:12]}")
                return list(cached)

        result = compute()
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
        return list(result)


timeline_cache = TimelineCache(settings.ANALYTICS_CACHE_SIZE)


def build_series_from_events(
    events: Sequence[DomainEvent],
    series_defs: Sequence[SeriesDefinition],
    now: Now,
    max_workers: Optional[int] = None,
) -> list[AggregatedSeries]:
    """Horizon -> timeline -> per-series aggregation -> export."""
    horizon = compute_horizon(events, now)
    timeline = build_timeline(horizon, events)

    def aggregate(definition: SeriesDefinition) -> AggregatedSeries:
        points = aggregate_series(timeline, events, definition, horizon.today)
        return assemble_series(definition, points)

    if max_workers and max_workers > 1 and len(series_defs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            series = list(executor.map(aggregate, series_defs))
    else:
        series = [aggregate(definition) for definition in series_defs]

    return export_chart_data(series, order=[definition.key for definition in series_defs])


def build_analytics_timeline(
    products: Iterable[Mapping[str, Any]],
    promotions: Iterable[Mapping[str, Any]],
    view_samples: Any,
    series_defs: Sequence[SeriesDefinition],
    now: Now,
    max_workers: Optional[int] = None,
) -> list[AggregatedSeries]:
    """Build every requested chart series from raw store records.

    A pure function of its inputs and ``now``: the same call always returns
    the same series. All-zero series are omitted.
    """
    events = normalize_events(products, promotions, view_samples, now)
    return build_series_from_events(events, series_defs, now, max_workers=max_workers)


def _store_timeline(
    products: Any,
    promotions: Any,
    views: Any,
    series_defs: Sequence[SeriesDefinition],
    now: Now,
) -> list[AggregatedSeries]:
    events = normalize_events(products, promotions, views, now)
    key = timeline_cache_key(events, [definition.key for definition in series_defs], now)
    return timeline_cache.get_or_compute(
        key,
        lambda: build_series_from_events(
            events, series_defs, now, max_workers=settings.ANALYTICS_MAX_WORKERS
        ),
    )


def _store_insights(products: Any, promotions: Any, views: Any, now: Now) -> list[InsightCard]:
    events = normalize_events(products, promotions, views, now)
    return compute_insights(events, resolve_today(now))


def _store_summary(products: Any, promotions: Any, views: Any, now: Now) -> list[MetricSummary]:
    events = normalize_events(products, promotions, views, now)
    return compute_summary(events, resolve_today(now))


class AnalyticsService:
    """Service for store analytics read operations.

    Records are fetched on the event loop; normalization and aggregation run
    in Starlette's worker threadpool.
    """

    @staticmethod
    async def get_store_timeline(
        repository,
        store_id: str,
        series_keys: Optional[list[str]],
        now: datetime,
    ) -> list[dict[str, Any]]:
        """
        Fetch a store's records and build its chart series.

        Args:
            repository: Source of raw store records
            store_id: Store to analyse
            series_keys: Requested series keys; None or empty means all
            now: Reference instant for "today"

        Returns:
            JSON-ready list of chart series
        """
        products, promotions, views = await repository.fetch_store_records(store_id)
        series_defs = select_series(series_keys)

        series = await run_in_threadpool(_store_timeline, products, promotions, views, series_defs, now)
        logger.info(f"Response for get_store_timeline: store={store_id} series={len(series)}")
        return [item.model_dump(by_alias=True, mode="json") for item in to_response(series)]

    @staticmethod
    async def get_store_insights(repository, store_id: str, now: datetime) -> list[dict[str, Any]]:
        """Fetch a store's records and derive its insight cards."""
        products, promotions, views = await repository.fetch_store_records(store_id)
        cards = await run_in_threadpool(_store_insights, products, promotions, views, now)
        logger.info(f"Response for get_store_insights: store={store_id} insights={len(cards)}")
        return [card.model_dump() for card in cards]

    @staticmethod
    async def get_store_summary(repository, store_id: str, now: datetime) -> list[dict[str, Any]]:
        """Fetch a store's records and build its per-metric summary cards."""
        products, promotions, views = await repository.fetch_store_records(store_id)
        summaries = await run_in_threadpool(_store_summary, products, promotions, views, now)
        logger.info(f"Response for get_store_summary: store={store_id} cards={len(summaries)}")
        return [summary.model_dump() for summary in summaries]
