"""
Salesmen, commission rules and per-class sales counts.
"""

from decimal import Decimal
from typing import Dict, List

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dealership.models.base import Base, Brand, CarClass, TimestampMixin, enum_values

# Prior-year sales above this amount earn the A-Class bonus
BONUS_SALES_THRESHOLD = Decimal("500000")


class Salesman(Base, TimestampMixin):
    """A salesman whose sales counts feed the commission report."""

    __tablename__ = "salesmen"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
    )
    previous_year_sales: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        default=Decimal("0"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
    )

    sales: Mapped[List["SalesRecord"]] = relationship(
        "SalesRecord",
        back_populates="salesman",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Salesman(id={self.id}, code='{self.code}')>"


class CommissionRule(Base, TimestampMixin):
    """
    Per-brand commission configuration.

    Reference data: one row per brand, never modified by the application.
    """

    __tablename__ = "commission_rules"

    id: Mapped[int] = mapped_column(primary_key=True)
    brand: Mapped[Brand] = mapped_column(
        SQLAlchemyEnum(
            Brand,
            values_callable=enum_values,
            native_enum=False,
            length=50,
        ),
        unique=True,
        nullable=False,
    )
    fixed_commission: Mapped[Decimal] = mapped_column(
        Numeric(10, 2),
        nullable=False,
    )
    price_threshold: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
    )
    class_a_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
    )
    class_b_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
    )
    class_c_percent: Mapped[Decimal] = mapped_column(
        Numeric(5, 2),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<CommissionRule(brand='{self.brand}')>"


class SalesRecord(Base, TimestampMixin):
    """Units sold by one salesman in one car class, one counter per brand."""

    __tablename__ = "sales_data"
    __table_args__ = (
        UniqueConstraint("salesman_id", "car_class", name="uq_sales_data_salesman_class"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    salesman_id: Mapped[int] = mapped_column(
        ForeignKey("salesmen.id", ondelete="CASCADE"),
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
    audi_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    jaguar_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    land_rover_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    renault_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    salesman: Mapped["Salesman"] = relationship(
        "Salesman",
        back_populates="sales",
    )

    @property
    def unit_counts(self) -> Dict[str, int]:
        """Units sold keyed by brand name."""
        return {
            Brand.AUDI.value: self.audi_count,
            Brand.JAGUAR.value: self.jaguar_count,
            Brand.LAND_ROVER.value: self.land_rover_count,
            Brand.RENAULT.value: self.renault_count,
        }

    def __repr__(self) -> str:
        return f"<SalesRecord(salesman_id={self.salesman_id}, car_class='{self.car_class}')>"
