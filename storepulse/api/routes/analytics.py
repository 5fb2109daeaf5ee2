"""Analytics timeline and insight routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from storepulse.api.deps import AnalyticsRepo, Now
from storepulse.schemas.analytics import SeriesCatalogEntry
from storepulse.services.analytics_service import AnalyticsService
from storepulse.services.series_catalog import default_series
from storepulse.utils.envelopes import api_success
from storepulse.utils.exceptions import ValidationException

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analytics"])


def _require_store_id(store_id: Optional[str]) -> str:
    if store_id is None or not store_id.strip():
        raise ValidationException("storeId is required")
    return store_id.strip()


def _split_keys(series_keys: Optional[str]) -> Optional[list[str]]:
    if not series_keys:
        return None
    return [key.strip() for key in series_keys.split(",") if key.strip()]


@router.get("/analytics/timeline", response_model=dict)
async def get_analytics_timeline(
    repository: AnalyticsRepo,
    now: Now,
    store_id: Optional[str] = Query(None, alias="storeId"),
    series_keys: Optional[str] = Query(None, alias="seriesKeys", description="Comma-separated series keys"),
):
    """Get chart series for a store's analytics timeline."""
    store_id = _require_store_id(store_id)
    logger.info(f"Request for get_analytics_timeline: store={store_id} seriesKeys={series_keys}")

    series = await AnalyticsService.get_store_timeline(repository, store_id, _split_keys(series_keys), now)
    return api_success(series)


@router.get("/analytics/series", response_model=dict)
async def list_analytics_series():
    """List the series that can be requested through seriesKeys."""
    catalog = [
        SeriesCatalogEntry(
            key=definition.key,
            label=definition.label,
            color=definition.color,
            chartType=definition.chart_type.value,
        ).model_dump(by_alias=True)
        for definition in default_series()
    ]
    return api_success(catalog)


@router.get("/analytics/insights", response_model=dict)
async def get_analytics_insights(
    repository: AnalyticsRepo,
    now: Now,
    store_id: Optional[str] = Query(None, alias="storeId"),
):
    """Get smart insight cards for a store."""
    store_id = _require_store_id(store_id)
    insights = await AnalyticsService.get_store_insights(repository, store_id, now)
    return api_success(insights)


@router.get("/analytics/summary", response_model=dict)
async def get_analytics_summary(
    repository: AnalyticsRepo,
    now: Now,
    store_id: Optional[str] = Query(None, alias="storeId"),
):
    """Get per-metric summary cards (deal types, products, views) for a store."""
    store_id = _require_store_id(store_id)
    summary = await AnalyticsService.get_store_summary(repository, store_id, now)
    return api_success(summary)
