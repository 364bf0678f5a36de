"""
Base model with common fields and mixins.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=True,
    )


class Brand(str, Enum):
    """Car manufacturers handled by the dealership."""
    AUDI = "Audi"
    JAGUAR = "Jaguar"
    LAND_ROVER = "Land Rover"
    RENAULT = "Renault"


class CarClass(str, Enum):
    """Car tiers; each tier has its own base commission percentage."""
    A_CLASS = "A-Class"
    B_CLASS = "B-Class"
    C_CLASS = "C-Class"


def enum_values(enum_cls) -> list[str]:
    """Persist enum values ("Land Rover") rather than member names."""
    return [member.value for member in enum_cls]
