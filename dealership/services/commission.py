"""
Commission calculation for salesmen.

Rules:
- Every brand has a commission rule: a fixed fee per unit, a price threshold
  and a percentage per car class (A/B/C)
- Percent commission is taken on the brand's price threshold, which stands in
  for the transaction price: threshold x percent / 100 x units
- Fixed commission is the brand's fixed fee x units
- Salesmen whose previous-year sales exceed 500,000 get +2% on A-Class sales

The calculator is pure: it reads rules and sales rows and builds a new report
without touching the database or mutating its inputs.
"""

import unicodedata
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from dealership.errors import RuleNotFound
from dealership.models.base import Brand, CarClass
from dealership.models.sales import BONUS_SALES_THRESHOLD
from dealership.utils.money import to_money

# Extra percentage on A-Class sales for bonus-qualified salesmen
A_CLASS_BONUS_PERCENT = Decimal("2")

# Order in which brand counters are read from a sales record
BRAND_ORDER: Tuple[Brand, ...] = (
    Brand.AUDI,
    Brand.JAGUAR,
    Brand.LAND_ROVER,
    Brand.RENAULT,
)

SORT_SALESMAN = "salesman"
SORT_BRAND = "brand"
SORT_TOTAL_COMMISSION = "total_commission"

ZERO = Decimal("0")


@dataclass(frozen=True)
class CommissionLineItem:
    """Commission earned on one brand within one car class."""

    brand: str
    car_class: str
    units_sold: int
    base_percent: Decimal
    bonus_percent: Decimal
    total_percent: Decimal
    fixed_commission: Decimal
    percent_commission: Decimal
    total_commission: Decimal


@dataclass
class SalesmanCommissionReport:
    salesman_id: int
    salesman_name: str
    salesman_code: str
    previous_year_sales: Decimal
    qualifies_for_bonus: bool
    commissions: List[CommissionLineItem] = field(default_factory=list)
    total_commission: Decimal = ZERO


@dataclass
class CommissionReport:
    report: List[SalesmanCommissionReport]
    total_salesmen: int
    grand_total_commission: Decimal

    @property
    def line_items(self) -> List[CommissionLineItem]:
        return [item for salesman in self.report for item in salesman.commissions]


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _brand_name(value: Any) -> str:
    return value.value if isinstance(value, Brand) else str(value)


def _class_name(value: Any) -> str:
    return value.value if isinstance(value, CarClass) else str(value)


def collation_key(text: str) -> Tuple[str, str]:
    """
    Alphabetical sort key: accents and case only break ties.

    "émile" sorts between "adam" and "frank", and "Bob" next to "bob".
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), text.casefold()


def qualifies_for_bonus(previous_year_sales: Any) -> bool:
    """Strictly more than 500,000 in prior-year sales."""
    return _as_decimal(previous_year_sales) > BONUS_SALES_THRESHOLD


def base_percent_for_class(rule: Any, car_class: Any) -> Decimal:
    """Class percentage from the rule; unknown classes earn 0%."""
    if car_class == CarClass.A_CLASS:
        return _as_decimal(rule.class_a_percent)
    if car_class == CarClass.B_CLASS:
        return _as_decimal(rule.class_b_percent)
    if car_class == CarClass.C_CLASS:
        return _as_decimal(rule.class_c_percent)
    return ZERO


def calculate_line_item(
    rule: Any,
    brand: str,
    car_class: Any,
    units_sold: int,
    bonus_qualified: bool,
) -> CommissionLineItem:
    """Compute the commission for one brand/class count.

    Args:
        rule: Commission rule of the brand
        brand: Brand name
        car_class: Car class of the sales record
        units_sold: Units sold (> 0)
        bonus_qualified: Whether the salesman earns the A-Class bonus

    Returns:
        The line item, money rounded to cents
    """
    base_percent = base_percent_for_class(rule, car_class)
    bonus_percent = (
        A_CLASS_BONUS_PERCENT
        if car_class == CarClass.A_CLASS and bonus_qualified
        else ZERO
    )
    total_percent = base_percent + bonus_percent

    threshold = _as_decimal(rule.price_threshold)
    percent_commission = to_money(threshold * total_percent / 100 * units_sold)
    fixed_commission = to_money(_as_decimal(rule.fixed_commission) * units_sold)

    return CommissionLineItem(
        brand=brand,
        car_class=_class_name(car_class),
        units_sold=units_sold,
        base_percent=base_percent,
        bonus_percent=bonus_percent,
        total_percent=total_percent,
        fixed_commission=fixed_commission,
        percent_commission=percent_commission,
        total_commission=fixed_commission + percent_commission,
    )


def _sort_report(
    report: List[SalesmanCommissionReport],
    sort_by: Optional[str],
    sort_order: str,
) -> List[SalesmanCommissionReport]:
    descending = (sort_order or "desc").lower() != "asc"

    if sort_by == SORT_TOTAL_COMMISSION:
        return sorted(report, key=lambda r: r.total_commission, reverse=descending)

    if sort_by == SORT_SALESMAN:
        return sorted(report, key=lambda r: collation_key(r.salesman_name), reverse=descending)

    if sort_by == SORT_BRAND:
        for salesman in report:
            salesman.commissions.sort(key=lambda item: collation_key(item.brand), reverse=descending)

    return report


def calculate(
    rules: Iterable[Any],
    sales_rows: Sequence[Tuple[Any, Any]],
    brands: Optional[Iterable[Any]] = None,
    sort_by: Optional[str] = None,
    sort_order: str = "desc",
) -> CommissionReport:
    """
    Build the commission report.

    Args:
        rules: Commission rules, one per brand
        sales_rows: (salesman, sales record) pairs, already filtered by
            salesman and car class
        brands: Only read these brands' counters (brand filter)
        sort_by: "salesman", "brand", "total_commission" or None
        sort_order: "asc" or "desc"

    Returns:
        CommissionReport with one entry per salesman that has line items

    Raises:
        RuleNotFound: a brand with sales has no commission rule
    """
    rules_by_brand: Dict[str, Any] = {_brand_name(rule.brand): rule for rule in rules}

    selected = [brand.value for brand in BRAND_ORDER]
    if brands is not None:
        wanted = {_brand_name(brand) for brand in brands}
        selected = [brand for brand in selected if brand in wanted]

    # Group rows by salesman, keeping the first-seen metadata
    groups: Dict[int, SalesmanCommissionReport] = {}
    for salesman, record in sales_rows:
        entry = groups.get(salesman.id)
        if entry is None:
            previous_year_sales = _as_decimal(salesman.previous_year_sales)
            entry = SalesmanCommissionReport(
                salesman_id=salesman.id,
                salesman_name=salesman.name,
                salesman_code=salesman.code,
                previous_year_sales=previous_year_sales,
                qualifies_for_bonus=qualifies_for_bonus(previous_year_sales),
            )
            groups[salesman.id] = entry

        counts = record.unit_counts
        for brand in selected:
            units = counts.get(brand) or 0
            if units <= 0:
                continue

            rule = rules_by_brand.get(brand)
            if rule is None:
                raise RuleNotFound(brand)

            item = calculate_line_item(
                rule, brand, record.car_class, units, entry.qualifies_for_bonus
            )
            entry.commissions.append(item)
            entry.total_commission += item.total_commission

    report = [entry for entry in groups.values() if entry.commissions]
    report = _sort_report(report, sort_by, sort_order)

    return CommissionReport(
        report=report,
        total_salesmen=len(report),
        grand_total_commission=sum((entry.total_commission for entry in report), ZERO),
    )
