"""Commission report schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from dealership.models.base import Brand, CarClass
from dealership.schemas.common import CamelModel


class ReportFilters(BaseModel):
    """Filters and ordering accepted by the report and CSV export."""

    salesman_id: Optional[int] = Field(None, ge=1)
    salesman: Optional[str] = Field(None, max_length=255)
    car_class: Optional[CarClass] = None
    brand: Optional[Brand] = None
    sort_by: Optional[str] = Field(None, pattern="^(salesman|brand|total_commission)$")
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")

    @field_validator("sort_order", mode="before")
    @classmethod
    def lower_sort_order(cls, v):
        return v.lower() if isinstance(v, str) else v


class CommissionLineItemView(CamelModel):
    brand: str
    car_class: str
    units_sold: int
    base_percent: float
    bonus_percent: float
    total_percent: float
    fixed_commission: str
    fixed_commission_raw: float
    percent_commission: str
    percent_commission_raw: float
    total_commission: str
    total_commission_raw: float


class SalesmanCommissionView(CamelModel):
    salesman_id: int
    salesman_name: str
    salesman_code: str
    previous_year_sales: str
    previous_year_sales_raw: float
    qualifies_for_bonus: bool
    commissions: List[CommissionLineItemView]
    total_commission: str
    total_commission_raw: float


class CommissionSummaryView(CamelModel):
    total_salesmen: int
    grand_total_commission: str
    grand_total_commission_raw: float


class CommissionReportView(CamelModel):
    """Presentation form of the report: formatted money next to raw numbers."""

    report: List[SalesmanCommissionView]
    summary: CommissionSummaryView


class SalesmanResponse(CamelModel):
    id: int
    name: str
    code: str
    previous_year_sales: float
    is_active: bool

    @classmethod
    def from_salesman(cls, salesman) -> "SalesmanResponse":
        return cls(
            id=salesman.id,
            name=salesman.name,
            code=salesman.code,
            previous_year_sales=float(salesman.previous_year_sales),
            is_active=salesman.is_active,
        )


class CommissionRuleResponse(CamelModel):
    id: int
    brand: Brand
    fixed_commission: float
    price_threshold: float
    class_a_percent: float
    class_b_percent: float
    class_c_percent: float

    @classmethod
    def from_rule(cls, rule) -> "CommissionRuleResponse":
        return cls(
            id=rule.id,
            brand=rule.brand,
            fixed_commission=float(rule.fixed_commission),
            price_threshold=float(rule.price_threshold),
            class_a_percent=float(rule.class_a_percent),
            class_b_percent=float(rule.class_b_percent),
            class_c_percent=float(rule.class_c_percent),
        )

