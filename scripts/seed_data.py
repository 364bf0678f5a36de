"""
Seed commission reference data and sales counts.

Usage:
    python scripts/seed_data.py

Or with custom DATABASE_URL:
    DATABASE_URL="postgresql://..." python scripts/seed_data.py

This script creates (existing rows are replaced):
- Commission rules for Audi, Jaguar, Land Rover and Renault
- Salesmen John Smith, Richard Porter and Tony Grid
- Their A/B/C-Class sales counts
"""

import asyncio
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.config import settings
from dealership.db import get_db_context
from dealership.models import Brand, CarClass, CommissionRule, SalesRecord, Salesman


# ===== REFERENCE DATA =====

# brand: (fixed commission, price threshold, A %, B %, C %)
COMMISSION_RULES = {
    Brand.AUDI: ("800", "25000", "8", "6", "4"),
    Brand.JAGUAR: ("750", "35000", "6", "5", "3"),
    Brand.LAND_ROVER: ("850", "30000", "7", "5", "4"),
    Brand.RENAULT: ("400", "20000", "5", "3", "2"),
}

SALESMEN = [
    {"name": "John Smith", "code": "SM001", "previous_year_sales": Decimal("490000")},
    {"name": "Richard Porter", "code": "SM002", "previous_year_sales": Decimal("1000000")},
    {"name": "Tony Grid", "code": "SM003", "previous_year_sales": Decimal("650000")},
]

# code: {class: (audi, jaguar, land rover, renault)}
SALES_COUNTS = {
    "SM001": {
        CarClass.A_CLASS: (1, 3, 0, 6),
        CarClass.B_CLASS: (2, 4, 2, 2),
        CarClass.C_CLASS: (3, 6, 1, 1),
    },
    "SM002": {
        CarClass.A_CLASS: (0, 5, 5, 3),
        CarClass.B_CLASS: (0, 4, 2, 2),
        CarClass.C_CLASS: (0, 2, 1, 1),
    },
    "SM003": {
        CarClass.A_CLASS: (4, 2, 1, 6),
        CarClass.B_CLASS: (2, 7, 2, 3),
        CarClass.C_CLASS: (0, 1, 3, 1),
    },
}


async def seed_commission_rules(db: AsyncSession) -> None:
    await db.execute(delete(CommissionRule))
    for brand, (fixed, threshold, class_a, class_b, class_c) in COMMISSION_RULES.items():
        db.add(CommissionRule(
            brand=brand,
            fixed_commission=Decimal(fixed),
            price_threshold=Decimal(threshold),
            class_a_percent=Decimal(class_a),
            class_b_percent=Decimal(class_b),
            class_c_percent=Decimal(class_c),
        ))
    await db.flush()
    print(f"Created {len(COMMISSION_RULES)} commission rules")


async def seed_salesmen(db: AsyncSession) -> None:
    await db.execute(delete(SalesRecord))
    await db.execute(delete(Salesman))

    for data in SALESMEN:
        salesman = Salesman(**data)
        db.add(salesman)
        await db.flush()

        for car_class, (audi, jaguar, land_rover, renault) in SALES_COUNTS[salesman.code].items():
            db.add(SalesRecord(
                salesman_id=salesman.id,
                car_class=car_class,
                audi_count=audi,
                jaguar_count=jaguar,
                land_rover_count=land_rover,
                renault_count=renault,
            ))
        await db.flush()
        print(f"Created salesman {salesman.name} ({salesman.code}) with sales data")


async def seed_all() -> None:
    print("\nConnecting to database...")
    print(f"URL: {settings.database_url[:50]}...")

    async with get_db_context() as db:
        print("\n=== Seeding commission data ===\n")
        await seed_commission_rules(db)
        await seed_salesmen(db)

    print("\nSEED DATA CREATED SUCCESSFULLY!")


if __name__ == "__main__":
    asyncio.run(seed_all())
