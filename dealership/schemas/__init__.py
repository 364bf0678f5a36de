"""Pydantic schemas for request/response validation."""

from dealership.schemas.car_model import (
    CarModelCreate,
    CarModelImageResponse,
    CarModelResponse,
    CarModelUpdate,
)
from dealership.schemas.commission import (
    CommissionLineItemView,
    CommissionReportView,
    CommissionRuleResponse,
    CommissionSummaryView,
    ReportFilters,
    SalesmanCommissionView,
    SalesmanResponse,
)
from dealership.schemas.common import (
    ApiResponse,
    CamelModel,
    PaginatedResponse,
    Pagination,
)

__all__ = [
    # Envelope
    "ApiResponse",
    "PaginatedResponse",
    "Pagination",
    "CamelModel",
    # Car models
    "CarModelCreate",
    "CarModelUpdate",
    "CarModelResponse",
    "CarModelImageResponse",
    # Commission
    "ReportFilters",
    "CommissionReportView",
    "SalesmanCommissionView",
    "CommissionLineItemView",
    "CommissionSummaryView",
    "SalesmanResponse",
    "CommissionRuleResponse",
]
