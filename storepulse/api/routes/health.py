"""Health check endpoints for monitoring."""

from fastapi import APIRouter
from sqlalchemy import text

from storepulse.api.deps import DB
from storepulse.core.config import settings
from storepulse.utils.envelopes import api_success

router = APIRouter(tags=["health"])


async def _database_status(db: DB) -> str:
    try:
        await db.execute(text("SELECT 1"))
        return "healthy"
    except Exception as e:
        return f"unhealthy: {str(e)}"


@router.get("/health", response_model=dict)
async def health_check(db: DB):
    """Health check endpoint for load balancers and monitoring."""
    db_status = await _database_status(db)
    return api_success(
        {
            "status": "ok" if db_status == "healthy" else "degraded",
            "service": settings.APP_NAME,
            "database": db_status,
        }
    )


@router.get("/health/ready", response_model=dict)
async def readiness_check(db: DB):
    """Kubernetes readiness probe."""
    return api_success({"ready": await _database_status(db) == "healthy"})


@router.get("/health/live", response_model=dict)
async def liveness_check():
    """Kubernetes liveness probe."""
    return api_success({"alive": True})
