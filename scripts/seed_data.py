"""Seed database with a demo store (products, promotions, daily views)."""

import asyncio
import uuid
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from storepulse.core.config import settings
from storepulse.core.db import ensure_async_url
from storepulse.models.models import DealType, Product, Promotion, Store, StoreViewDaily

DEMO_STORE_ID = uuid.UUID("5d1c7a44-2f5e-4f0b-9a43-0c3f7f0f2a11")


def _at(day: date) -> datetime:
    return datetime.combine(day, time(9, 0), tzinfo=timezone.utc)


async def seed_demo_store(session: AsyncSession, today: date) -> None:
    """Create the demo store with a few months of activity."""
    existing = await session.scalar(select(Store.id).where(Store.id == DEMO_STORE_ID))
    if existing:
        print(f"✓ Demo store already exists: {DEMO_STORE_ID}")
        return

    store = Store(id=DEMO_STORE_ID, name="Demo Corner Shop")
    session.add(store)
    await session.flush()

    products_data = [
        ("Arabica Beans 1kg", 95, 24),
        ("Oat Milk 1L", 70, 8),
        ("Sourdough Loaf", 40, 5),
        ("Ceramic Mug", 21, 40),
        ("Cold Brew Bottle", 3, 12),
        ("Granola Jar", 0, 3),
    ]
    for name, days_ago, stock in products_data:
        session.add(
            Product(
                store_id=store.id,
                name=name,
                stock=stock,
                created_date=_at(today - timedelta(days=days_ago)),
            )
        )

    promotions_data = [
        ("Summer 20% Off", DealType.PERCENTAGE_DISCOUNT, None, -80, -50),
        ("Mug Monday", DealType.FIXED_DISCOUNT, None, -12, -9),
        ("Beans BOGO", DealType.BOGO, None, 0, 10),
        ("Breakfast Bundle", DealType.BUNDLE, None, -5, 40),
        ("Loyalty Voucher", DealType.VOUCHER, None, -3, None),
        ("Old Percentage Deal", None, "percentage", -120, -100),
    ]
    for title, deal_type, legacy_type, start_offset, end_offset in promotions_data:
        session.add(
            Promotion(
                store_id=store.id,
                title=title,
                deal_type=deal_type,
                legacy_type=legacy_type,
                starts_at=_at(today + timedelta(days=start_offset)),
                ends_at=_at(today + timedelta(days=end_offset)) if end_offset is not None else None,
            )
        )

    for days_ago in range(30):
        day = today - timedelta(days=days_ago)
        session.add(
            StoreViewDaily(
                store_id=store.id,
                day=day,
                store_views=20 + (days_ago * 7) % 15,
                product_views=35 + (days_ago * 11) % 25,
            )
        )

    await session.commit()
    print(f"✓ Created demo store: {DEMO_STORE_ID}")


async def main() -> None:
    """Run all seed operations."""
    print("🌱 Seeding database...")

    engine = create_async_engine(ensure_async_url(settings.DATABASE_URL), echo=False)
    async_session = async_sessionmaker(engine, expire_on_commit=False)

    async with async_session() as session:
        await seed_demo_store(session, datetime.now(timezone.utc).date())

    await engine.dispose()

    print("✅ Database seeding completed!")


if __name__ == "__main__":
    asyncio.run(main())
