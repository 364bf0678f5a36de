"""Commission report API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.api.dependencies import get_commission_service, validate_input
from dealership.db import get_db
from dealership.schemas import (
    ApiResponse,
    CommissionReportView,
    CommissionRuleResponse,
    ReportFilters,
    SalesmanResponse,
)
from dealership.services import CommissionReportService

router = APIRouter(prefix="/commission", tags=["Commission"])

CSV_FILENAME = "commission_report.csv"


def report_filters(
    salesman_id: Optional[str] = Query(None, alias="salesmanId"),
    salesman: Optional[str] = Query(None),
    car_class: Optional[str] = Query(None, alias="carClass"),
    brand: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
) -> ReportFilters:
    return validate_input(ReportFilters, {
        "salesman_id": salesman_id,
        "salesman": salesman,
        "car_class": car_class,
        "brand": brand,
        "sort_by": sort_by,
        "sort_order": sort_order,
    })


@router.get("/report", response_model=ApiResponse[CommissionReportView])
async def get_commission_report(
    filters: ReportFilters = Depends(report_filters),
    db: AsyncSession = Depends(get_db),
    service: CommissionReportService = Depends(get_commission_service),
):
    """Commission per salesman, brand and car class, with totals."""
    report = await service.get_report(db, filters)
    return ApiResponse[CommissionReportView](
        message="Commission report generated successfully",
        data=report,
    )


@router.get("/export")
async def export_commission_report(
    filters: ReportFilters = Depends(report_filters),
    db: AsyncSession = Depends(get_db),
    service: CommissionReportService = Depends(get_commission_service),
):
    """Same report as CSV: line items, a TOTAL row per salesman and a GRAND TOTAL row."""
    csv_content = await service.export_csv(db, filters)
    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@router.get("/salesmen", response_model=ApiResponse[List[SalesmanResponse]])
async def list_salesmen(
    db: AsyncSession = Depends(get_db),
    service: CommissionReportService = Depends(get_commission_service),
):
    salesmen = await service.list_salesmen(db)
    return ApiResponse[List[SalesmanResponse]](
        message="Salesmen retrieved successfully",
        data=[SalesmanResponse.from_salesman(s) for s in salesmen],
    )


@router.get("/rules", response_model=ApiResponse[List[CommissionRuleResponse]])
async def list_commission_rules(
    db: AsyncSession = Depends(get_db),
    service: CommissionReportService = Depends(get_commission_service),
):
    rules = await service.list_rules(db)
    return ApiResponse[List[CommissionRuleResponse]](
        message="Commission rules retrieved successfully",
        data=[CommissionRuleResponse.from_rule(rule) for rule in rules],
    )
