from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from storepulse.models.base import Base


class UUIDMixin:
    id: Mapped[uuid.UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid.uuid4)


class AuditMixin:
    """Audit fields that exist in all tables: created_by, created_date, updated_by, updated_date"""
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(PGUUID(as_uuid=True))
    created_date: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(PGUUID(as_uuid=True))
    updated_date: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))


class TimestampMixin(AuditMixin):
    """Map created_at/updated_at to created_date/updated_date"""
    @property
    def created_at(self) -> datetime:
        return self.created_date

    @property
    def updated_at(self) -> Optional[datetime]:
        return self.updated_date


class SoftDeleteMixin:
    deleted_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))


class DealType(str, enum.Enum):
    PERCENTAGE_DISCOUNT = "PERCENTAGE_DISCOUNT"
    FIXED_DISCOUNT = "FIXED_DISCOUNT"
    BOGO = "BOGO"
    BUNDLE = "BUNDLE"
    QUANTITY_DISCOUNT = "QUANTITY_DISCOUNT"
    VOUCHER = "VOUCHER"


class Store(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "tbl_stores"

    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_id: Mapped[Optional[uuid.UUID]] = mapped_column(PGUUID(as_uuid=True))

    products: Mapped[list["Product"]] = relationship("Product", back_populates="store")
    promotions: Mapped[list["Promotion"]] = relationship("Promotion", back_populates="store")


class Product(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "tbl_products"

    store_id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("tbl_stores.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Optional[float]] = mapped_column(Numeric(12, 2))
    stock: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))

    store: Mapped["Store"] = relationship("Store", back_populates="products")


Index("ix_products_store_created", Product.store_id, Product.created_date)


class Promotion(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    __tablename__ = "tbl_promotions"

    store_id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("tbl_stores.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    deal_type: Mapped[Optional[DealType]] = mapped_column(
        Enum(DealType, name="deal_type", native_enum=False)
    )
    # Discount kind used before deal types existed ("percentage" / "fixed")
    legacy_type: Mapped[Optional[str]] = mapped_column(String)
    starts_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))
    ends_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True))

    store: Mapped["Store"] = relationship("Store", back_populates="promotions")


Index("ix_promotions_store_starts", Promotion.store_id, Promotion.starts_at)


class StoreViewDaily(Base):
    __tablename__ = "tbl_store_views_daily"
    __table_args__ = (
        PrimaryKeyConstraint("day", "store_id", name="pk_store_views_daily"),
    )

    day: Mapped[date] = mapped_column(Date, nullable=False)
    store_id: Mapped[uuid.UUID] = mapped_column(
        PGUUID(as_uuid=True), ForeignKey("tbl_stores.id", ondelete="CASCADE"), nullable=False
    )
    store_views: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    product_views: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
