"""FastAPI dependencies for database sessions, repositories and the clock."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storepulse.core.db import get_db
from storepulse.database.analytics_repo import StoreAnalyticsRepository


def get_now() -> datetime:
    """Reference instant for a request; the only place the wall clock is read."""
    return datetime.now(timezone.utc)


async def get_analytics_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StoreAnalyticsRepository:
    return StoreAnalyticsRepository(db)


# Convenience type aliases
DB = Annotated[AsyncSession, Depends(get_db)]
Now = Annotated[datetime, Depends(get_now)]
AnalyticsRepo = Annotated[StoreAnalyticsRepository, Depends(get_analytics_repository)]
