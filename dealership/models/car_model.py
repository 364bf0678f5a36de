"""
CarModel and CarModelImage models for the catalog.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealership.models.base import Base, Brand, CarClass, TimestampMixin, enum_values


class CarModel(Base, TimestampMixin):
    """
    A car model in the catalog.

    description and features are stored encrypted; only the view-model layer
    sees plaintext. The model owns its images: deleting a car model removes
    every image row (ON DELETE CASCADE).
    """

    __tablename__ = "car_models"

    id: Mapped[int] = mapped_column(primary_key=True)
    brand: Mapped[Brand] = mapped_column(
        SQLAlchemyEnum(
            Brand,
            values_callable=enum_values,
            native_enum=False,
            length=50,
        ),
        nullable=False,
        index=True,
    )
    car_class: Mapped[CarClass] = mapped_column(
        SQLAlchemyEnum(
            CarClass,
            values_callable=enum_values,
            native_enum=False,
            length=20,
        ),
        nullable=False,
        index=True,
    )
    model_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    model_code: Mapped[str] = mapped_column(
        String(10),
        unique=True,
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Rich text, encrypted at rest",
    )
    features: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Rich text, encrypted at rest",
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    date_of_manufacturing: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        index=True,
    )

    # Relationships
    images: Mapped[List["CarModelImage"]] = relationship(
        "CarModelImage",
        back_populates="car_model",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [CarModelImage.is_default.desc(), CarModelImage.id],
    )

    @property
    def default_image(self) -> Optional["CarModelImage"]:
        for image in self.images:
            if image.is_default:
                return image
        return None

    def __repr__(self) -> str:
        return f"<CarModel(id={self.id}, model_code='{self.model_code}')>"


class CarModelImage(Base, TimestampMixin):
    """Image attached to a car model. At most one image per model is the default."""

    __tablename__ = "car_model_images"

    id: Mapped[int] = mapped_column(primary_key=True)
    car_model_id: Mapped[int] = mapped_column(
        ForeignKey("car_models.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    original_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    mime_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    file_size: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    path: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    is_default: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
    )

    car_model: Mapped["CarModel"] = relationship(
        "CarModel",
        back_populates="images",
    )

    def __repr__(self) -> str:
        return (
            f"<CarModelImage(id={self.id}, car_model_id={self.car_model_id}, "
            f"is_default={self.is_default})>"
        )
