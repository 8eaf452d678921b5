"""
Health Check Endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from datetime import datetime, timezone
import platform

from slctrips.config import settings
from slctrips.utils.database import get_db
from slctrips.utils.redis import get_redis

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check with configuration presence flags"""
    return {
        "status": "healthy",
        "service": "slctrips-api",
        "message": "API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT,
        "hasSupabaseUrl": bool(settings.SUPABASE_URL),
        "hasSupabaseKey": bool(settings.SUPABASE_ANON_KEY),
        "hasDatabaseUrl": bool(settings.DATABASE_URL),
        "pythonVersion": platform.python_version(),
    }


@router.get("/health/ready")
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    cache=Depends(get_redis),
):
    """
    Readiness check - postgres is required, redis only degrades weather caching
    """
    checks = {
        "postgres": False,
        "redis": False,
    }

    try:
        await db.execute(text("SELECT 1"))
        checks["postgres"] = True
    except Exception as e:
        checks["postgres_error"] = str(e)

    try:
        checks["redis"] = bool(await cache.ping())
    except Exception as e:
        checks["redis_error"] = str(e)

    if not checks["postgres"]:
        status = "unavailable"
    elif not checks["redis"]:
        status = "degraded"
    else:
        status = "ready"

    return {"status": status, "checks": checks}


@router.get("/health/live")
async def liveness_check():
    """Liveness check - is the service running"""
    return {"status": "alive"}
