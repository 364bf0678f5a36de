"""
Commission report service.

Loads commission rules and sales rows, runs the calculator and renders the
result as a view model or as CSV.
"""

import logging
from typing import List, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.errors import translate_storage_error
from dealership.models import CommissionRule, SalesRecord, Salesman
from dealership.schemas.commission import CommissionReportView, ReportFilters
from dealership.services import report_formatter
from dealership.services.commission import CommissionReport, calculate

logger = logging.getLogger(__name__)


class CommissionReportService:
    """Commission report generation and reference-data listings."""

    async def list_rules(self, db: AsyncSession) -> Sequence[CommissionRule]:
        result = await db.execute(select(CommissionRule).order_by(CommissionRule.brand))
        return result.scalars().all()

    async def list_salesmen(self, db: AsyncSession) -> Sequence[Salesman]:
        result = await db.execute(select(Salesman).order_by(Salesman.name))
        return result.scalars().all()

    async def fetch_sales_rows(
        self,
        db: AsyncSession,
        filters: ReportFilters,
    ) -> List[Tuple[Salesman, SalesRecord]]:
        """Sales records joined with their salesman, filtered before grouping."""
        query = (
            select(Salesman, SalesRecord)
            .join(SalesRecord, SalesRecord.salesman_id == Salesman.id)
        )

        if filters.salesman_id:
            query = query.where(Salesman.id == filters.salesman_id)

        if filters.salesman:
            query = query.where(Salesman.name.ilike(f"%{filters.salesman}%"))

        if filters.car_class:
            query = query.where(SalesRecord.car_class == filters.car_class)

        query = query.order_by(Salesman.name, SalesRecord.car_class)

        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def build_report(self, db: AsyncSession, filters: ReportFilters) -> CommissionReport:
        try:
            rules = await self.list_rules(db)
            rows = await self.fetch_sales_rows(db, filters)
        except SQLAlchemyError as exc:
            logger.error(f"Failed to load commission data: {exc}")
            raise translate_storage_error(exc) from exc

        brands = [filters.brand] if filters.brand else None
        report = calculate(
            rules,
            rows,
            brands=brands,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order,
        )
        logger.info(
            f"Commission report built: {report.total_salesmen} salesmen, "
            f"grand total {report.grand_total_commission}"
        )
        return report

    async def get_report(self, db: AsyncSession, filters: ReportFilters) -> CommissionReportView:
        report = await self.build_report(db, filters)
        return report_formatter.to_presentation(report)

    async def export_csv(self, db: AsyncSession, filters: ReportFilters) -> str:
        report = await self.build_report(db, filters)
        return report_formatter.to_csv(report_formatter.to_flat_rows(report))
