"""
Database models for the dealership.

All models are exported here for convenient imports:
    from dealership.models import CarModel, Salesman, etc.
"""

from dealership.models.base import Base, Brand, CarClass, TimestampMixin
from dealership.models.car_model import CarModel, CarModelImage
from dealership.models.sales import (
    BONUS_SALES_THRESHOLD,
    CommissionRule,
    SalesRecord,
    Salesman,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "Brand",
    "CarClass",
    # Catalog
    "CarModel",
    "CarModelImage",
    # Sales
    "Salesman",
    "SalesRecord",
    "CommissionRule",
    "BONUS_SALES_THRESHOLD",
]
