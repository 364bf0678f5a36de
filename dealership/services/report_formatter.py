"""
Commission report rendering: presentation view model, flat rows and CSV.

The flat-row layout is the export contract: line items of a salesman, then
the salesman's TOTAL row, and a single GRAND TOTAL row at the end.
"""

import csv
import io
from decimal import Decimal
from typing import Any, Dict, List

from dealership.schemas.commission import (
    CommissionLineItemView,
    CommissionReportView,
    CommissionSummaryView,
    SalesmanCommissionView,
)
from dealership.services.commission import CommissionReport
from dealership.utils.money import format_currency

REPORT_COLUMNS = (
    "Salesman Name",
    "Salesman Code",
    "Previous Year Sales",
    "Qualifies for Bonus",
    "Brand",
    "Car Class",
    "Units Sold",
    "Base Commission %",
    "Bonus %",
    "Total %",
    "Fixed Commission",
    "Percent Commission",
    "Total Commission",
)

TOTAL_MARKER = "TOTAL"
GRAND_TOTAL_MARKER = "GRAND TOTAL"


def to_presentation(report: CommissionReport) -> CommissionReportView:
    """Format every money field while keeping the raw number next to it."""
    salesmen = []
    for salesman in report.report:
        commissions = [
            CommissionLineItemView(
                brand=item.brand,
                car_class=item.car_class,
                units_sold=item.units_sold,
                base_percent=float(item.base_percent),
                bonus_percent=float(item.bonus_percent),
                total_percent=float(item.total_percent),
                fixed_commission=format_currency(item.fixed_commission),
                fixed_commission_raw=float(item.fixed_commission),
                percent_commission=format_currency(item.percent_commission),
                percent_commission_raw=float(item.percent_commission),
                total_commission=format_currency(item.total_commission),
                total_commission_raw=float(item.total_commission),
            )
            for item in salesman.commissions
        ]
        salesmen.append(
            SalesmanCommissionView(
                salesman_id=salesman.salesman_id,
                salesman_name=salesman.salesman_name,
                salesman_code=salesman.salesman_code,
                previous_year_sales=format_currency(salesman.previous_year_sales),
                previous_year_sales_raw=float(salesman.previous_year_sales),
                qualifies_for_bonus=salesman.qualifies_for_bonus,
                commissions=commissions,
                total_commission=format_currency(salesman.total_commission),
                total_commission_raw=float(salesman.total_commission),
            )
        )

    return CommissionReportView(
        report=salesmen,
        summary=CommissionSummaryView(
            total_salesmen=report.total_salesmen,
            grand_total_commission=format_currency(report.grand_total_commission),
            grand_total_commission_raw=float(report.grand_total_commission),
        ),
    )


def _percent(value: Decimal) -> Decimal:
    """8.00 -> 8, 2.50 -> 2.5"""
    return value.normalize()


def _blank_row() -> Dict[str, Any]:
    return {column: "" for column in REPORT_COLUMNS}


def to_flat_rows(report: CommissionReport) -> List[Dict[str, Any]]:
    """One row per line item, a TOTAL row per salesman, then GRAND TOTAL."""
    rows: List[Dict[str, Any]] = []

    for salesman in report.report:
        for item in salesman.commissions:
            rows.append({
                "Salesman Name": salesman.salesman_name,
                "Salesman Code": salesman.salesman_code,
                "Previous Year Sales": salesman.previous_year_sales,
                "Qualifies for Bonus": "Yes" if salesman.qualifies_for_bonus else "No",
                "Brand": item.brand,
                "Car Class": item.car_class,
                "Units Sold": item.units_sold,
                "Base Commission %": _percent(item.base_percent),
                "Bonus %": _percent(item.bonus_percent),
                "Total %": _percent(item.total_percent),
                "Fixed Commission": item.fixed_commission,
                "Percent Commission": item.percent_commission,
                "Total Commission": item.total_commission,
            })

        subtotal = _blank_row()
        subtotal["Salesman Name"] = salesman.salesman_name
        subtotal["Salesman Code"] = salesman.salesman_code
        subtotal["Brand"] = TOTAL_MARKER
        subtotal["Total Commission"] = salesman.total_commission
        rows.append(subtotal)

    grand_total = _blank_row()
    grand_total["Salesman Name"] = GRAND_TOTAL_MARKER
    grand_total["Total Commission"] = report.grand_total_commission
    rows.append(grand_total)

    return rows


def _csv_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    return value


def to_csv(rows: List[Dict[str, Any]]) -> str:
    """Serialize flat rows with a header row in REPORT_COLUMNS order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(REPORT_COLUMNS)
    for row in rows:
        writer.writerow([_csv_value(row[column]) for column in REPORT_COLUMNS])
    return buffer.getvalue()
