"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.db import get_db

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check.

    Returns 200 if the service is running.
    """
    return {"status": "healthy", "service": "dealership-api"}


@router.get("/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness check with database connectivity.
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        return {
            "status": "not_ready",
            "database": f"error: {str(e)}",
        }

    return {
        "status": "ready",
        "database": "connected",
    }


@router.get("/live")
async def liveness_check():
    """
    Liveness check.

    Returns 200 if the process is alive.
    """
    return {"status": "alive"}
