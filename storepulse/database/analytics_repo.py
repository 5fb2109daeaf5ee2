"""
Repository layer for store analytics reads.
Returns plain dict records in the shape the event normalizer consumes.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storepulse.models.models import Product, Promotion, Store, StoreViewDaily
from storepulse.utils.exceptions import DatabaseException, NotFoundException, ValidationException

logger = logging.getLogger(__name__)

StoreRecords = tuple[list[dict[str, Any]], list[dict[str, Any]], list[dict[str, Any]]]


def parse_store_id(store_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(store_id)
    except (TypeError, ValueError):
        raise ValidationException("storeId must be a valid UUID", details={"storeId": store_id})


class StoreAnalyticsRepository:
    """Loads the products, promotions and daily views of one store."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_store_records(self, store_id: str) -> StoreRecords:
        """Return (products, promotions, view samples) for a store, oldest first."""
        store_uuid = parse_store_id(store_id)
        try:
            logger.info(f"Request for fetch_store_records: {store_id}")

            store = await self.db.scalar(
                select(Store.id).where(Store.id == store_uuid, Store.deleted_at.is_(None))
            )
            if store is None:
                raise NotFoundException("Store not found", details={"storeId": store_id})

            product_rows = await self.db.scalars(
                select(Product)
                .where(Product.store_id == store_uuid, Product.deleted_at.is_(None))
                .order_by(Product.created_date, Product.id)
            )
            products = [
                {
                    "id": str(product.id),
                    "name": product.name,
                    "title": product.name,
                    "stock": product.stock,
                    "createdAt": product.created_at,
                }
                for product in product_rows
            ]

            promotion_rows = await self.db.scalars(
                select(Promotion)
                .where(Promotion.store_id == store_uuid, Promotion.deleted_at.is_(None))
                .order_by(Promotion.starts_at, Promotion.id)
            )
            promotions = [
                {
                    "id": str(promotion.id),
                    "title": promotion.title,
                    "dealType": promotion.deal_type.value if promotion.deal_type else None,
                    "type": promotion.legacy_type,
                    "startsAt": promotion.starts_at,
                    "endsAt": promotion.ends_at,
                }
                for promotion in promotion_rows
            ]

            view_rows = await self.db.scalars(
                select(StoreViewDaily)
                .where(StoreViewDaily.store_id == store_uuid)
                .order_by(StoreViewDaily.day)
            )
            views = [
                {
                    "date": row.day,
                    "count": int(row.store_views) + int(row.product_views),
                    "storeViews": int(row.store_views),
                    "productViews": int(row.product_views),
                }
                for row in view_rows
            ]

            logger.info(
                f"Response for fetch_store_records: {len(products)} products, "
                f"{len(promotions)} promotions, {len(views)} view days"
            )
            return products, promotions, views

        except SQLAlchemyError as e:
            logger.error("A system failure occurred @fetch_store_records", exc_info=True)
            raise DatabaseException("Failed to load store analytics records", details=str(e))
