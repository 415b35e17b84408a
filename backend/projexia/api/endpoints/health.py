"""Health check endpoint"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timezone

from projexia.core.database import get_db, check_connection
from projexia.core.logging_config import logger


router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Liveness plus a one-query database check"""
    connected = await check_connection(db)
    if not connected:
        logger.warning("[HealthCheck] Database is not reachable")

    return {
        "status": "Server is running",
        "database": "connected" if connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
