"""
Health checks - liveness and readiness for load balancers and monitoring.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from swapshop.config import get_settings
from swapshop.db.session import DbSession

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("")
async def health():
    """Liveness: is the process up?"""
    return {"status": "ok", "app": settings.app_name}


@router.get("/ready")
async def ready(session: DbSession):
    """Readiness: the database answers."""
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("readiness check failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "down"})
    return {"status": "ready", "database": "ok"}
