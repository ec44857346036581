"""
Health checks - for load balancers, Kubernetes, and monitoring.
Challenge: Fast liveness; readiness hinges on the database (the claim lock lives there).
"""

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import text

from app.cache.redis_client import get_redis
from app.config import get_settings
from app.db.session import DbSession

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(session: DbSession):
    """Readiness: database must answer; Redis is reported but optional (cache only)."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Readiness check: database unavailable: %s", e)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="database unavailable")
    try:
        client = await get_redis()
        await client.ping()
        redis_state = "ok"
    except Exception:
        redis_state = "unavailable"
    return {"status": "ready", "checks": {"database": "ok", "redis": redis_state}}
