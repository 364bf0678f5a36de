"""
Tests for commission report rendering (view model, flat rows, CSV).
"""

import csv
import io
import os
from decimal import Decimal
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from dealership.services.commission import calculate
from dealership.services.report_formatter import (
    GRAND_TOTAL_MARKER,
    REPORT_COLUMNS,
    TOTAL_MARKER,
    to_csv,
    to_flat_rows,
    to_presentation,
)
from dealership.utils.money import format_currency


def _rule(brand, fixed, threshold, a, b, c):
    return SimpleNamespace(
        brand=brand,
        fixed_commission=Decimal(fixed),
        price_threshold=Decimal(threshold),
        class_a_percent=Decimal(a),
        class_b_percent=Decimal(b),
        class_c_percent=Decimal(c),
    )


def _record(car_class, **counts):
    unit_counts = {"Audi": 0, "Jaguar": 0, "Land Rover": 0, "Renault": 0}
    unit_counts.update(counts)
    return SimpleNamespace(car_class=car_class, unit_counts=unit_counts)


RULES = [
    _rule("Audi", "800", "25000", "8", "6", "4"),
    _rule("Jaguar", "750", "35000", "6", "5", "3"),
]

JOHN = SimpleNamespace(id=1, name="John Smith", code="SM001", previous_year_sales=Decimal("490000"))
RICHARD = SimpleNamespace(id=2, name="Richard Porter", code="SM002", previous_year_sales=Decimal("1000000"))


def _report():
    return calculate(RULES, [
        (JOHN, _record("A-Class", Audi=1, Jaguar=3)),
        (JOHN, _record("B-Class", Audi=2)),
        (RICHARD, _record("A-Class", Jaguar=5)),
    ])


class TestFormatCurrency:
    def test_formats_us_dollars(self):
        assert format_currency(Decimal("2800")) == "$2,800.00"
        assert format_currency(Decimal("1234567.891")) == "$1,234,567.89"
        assert format_currency(0) == "$0.00"
        assert format_currency(Decimal("-12.5")) == "-$12.50"


class TestPresentation:
    def test_money_fields_have_formatted_and_raw_values(self):
        view = to_presentation(_report())

        john = view.report[0]
        assert john.previous_year_sales == "$490,000.00"
        assert john.previous_year_sales_raw == 490000.0
        assert john.commissions[0].total_commission == "$2,800.00"
        assert john.commissions[0].total_commission_raw == 2800.0
        assert view.summary.total_salesmen == 2

    def test_raw_values_reformat_to_same_string(self):
        view = to_presentation(_report())

        for salesman in view.report:
            assert format_currency(salesman.total_commission_raw) == salesman.total_commission
            for item in salesman.commissions:
                assert format_currency(item.fixed_commission_raw) == item.fixed_commission
                assert format_currency(item.percent_commission_raw) == item.percent_commission
                assert format_currency(item.total_commission_raw) == item.total_commission
        summary = view.summary
        assert format_currency(summary.grand_total_commission_raw) == summary.grand_total_commission

    def test_serializes_with_camel_case_keys(self):
        data = to_presentation(_report()).model_dump(by_alias=True)

        assert "grandTotalCommissionRaw" in data["summary"]
        assert "qualifiesForBonus" in data["report"][0]
        assert "unitsSold" in data["report"][0]["commissions"][0]


class TestFlatRows:
    def test_row_count(self):
        report = _report()
        rows = to_flat_rows(report)

        assert len(rows) == len(report.line_items) + report.total_salesmen + 1

    def test_subtotal_and_grand_total_rows(self):
        report = _report()
        rows = to_flat_rows(report)

        subtotals = [row for row in rows if row["Brand"] == TOTAL_MARKER]
        assert [row["Salesman Name"] for row in subtotals] == ["John Smith", "Richard Porter"]
        assert subtotals[0]["Total Commission"] == report.report[0].total_commission

        grand_total = rows[-1]
        assert grand_total["Salesman Name"] == GRAND_TOTAL_MARKER
        assert grand_total["Total Commission"] == report.grand_total_commission
        assert grand_total["Brand"] == ""

    def test_line_item_rows_follow_report_order(self):
        rows = to_flat_rows(_report())

        assert [row["Brand"] for row in rows[:4]] == ["Audi", "Jaguar", "Audi", TOTAL_MARKER]
        assert rows[0]["Qualifies for Bonus"] == "No"
        assert rows[4]["Qualifies for Bonus"] == "Yes"

    def test_empty_report_has_grand_total_only(self):
        rows = to_flat_rows(calculate(RULES, []))

        assert len(rows) == 1
        assert rows[0]["Salesman Name"] == GRAND_TOTAL_MARKER


class TestCsv:
    def test_header_and_rows(self):
        rows = to_flat_rows(_report())
        parsed = list(csv.reader(io.StringIO(to_csv(rows))))

        assert parsed[0] == list(REPORT_COLUMNS)
        assert len(parsed) == len(rows) + 1
        assert parsed[1][:2] == ["John Smith", "SM001"]
        assert parsed[1][-1] == "2800.00"
        assert parsed[-1][0] == GRAND_TOTAL_MARKER

    def test_percent_columns_drop_trailing_zeros(self):
        # Numeric(5, 2) columns load as Decimal("8.00")
        stored_rules = [
            _rule("Audi", "800.00", "25000.00", "8.00", "6.00", "4.00"),
            _rule("Jaguar", "750.00", "35000.00", "6.50", "5.00", "3.00"),
        ]
        report = calculate(stored_rules, [
            (JOHN, _record("A-Class", Audi=1, Jaguar=1)),
            (RICHARD, _record("A-Class", Jaguar=1)),
        ])
        parsed = list(csv.reader(io.StringIO(to_csv(to_flat_rows(report)))))
        header = parsed[0]
        percents = [
            header.index("Base Commission %"),
            header.index("Bonus %"),
            header.index("Total %"),
        ]

        assert [parsed[1][i] for i in percents] == ["8", "0", "8"]
        assert [parsed[2][i] for i in percents] == ["6.5", "0", "6.5"]
        assert [parsed[4][i] for i in percents] == ["6.5", "2", "8.5"]

    def test_quotes_values_with_commas(self):
        rows = to_flat_rows(_report())
        rows[0]["Salesman Name"] = "Smith, John"

        parsed = list(csv.reader(io.StringIO(to_csv(rows))))
        assert parsed[1][0] == "Smith, John"
