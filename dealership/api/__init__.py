"""API router aggregation."""

from fastapi import APIRouter

from dealership.api.car_models import router as car_models_router
from dealership.api.commission import router as commission_router
from dealership.api.health import router as health_router

# Main API router (for /api/* endpoints)
api_router = APIRouter(prefix="/api")

api_router.include_router(health_router)
api_router.include_router(car_models_router)
api_router.include_router(commission_router)

__all__ = ["api_router"]
