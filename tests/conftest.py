"""
Pytest configuration and fixtures.
"""

import io
import os
import tempfile
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENCRYPTION_KEY", "test-encryption-key")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "dealership-test-uploads"))

import pytest
import pytest_asyncio
from fastapi import UploadFile
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.datastructures import Headers

from dealership.models import Base, Brand, CarClass, CommissionRule, SalesRecord, Salesman
from dealership.services import CarModelMapper, CarModelService, CarModelStore, ImageStorage
from dealership.utils.encryption import FieldCipher


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ALLOWED_TYPES = ["image/jpeg", "image/png"]
MAX_FILE_SIZE = 1024


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def image_storage(upload_dir):
    return ImageStorage(
        upload_dir=str(upload_dir),
        url_prefix="/uploads/car-models",
        max_file_size=MAX_FILE_SIZE,
        allowed_types=ALLOWED_TYPES,
    )


@pytest.fixture
def cipher():
    return FieldCipher("test-encryption-key")


@pytest.fixture
def car_model_service(image_storage, cipher):
    return CarModelService(
        store=CarModelStore(),
        images=image_storage,
        mapper=CarModelMapper(cipher),
        max_images_per_upload=3,
    )


def _upload(filename="car.jpg", content_type="image/jpeg", content=b"fake-image-bytes"):
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def make_upload():
    """Factory for in-memory multipart uploads."""
    return _upload


# Commission reference data used across report tests
COMMISSION_RULES = {
    Brand.AUDI: ("800", "25000", "8", "6", "4"),
    Brand.JAGUAR: ("750", "35000", "6", "5", "3"),
    Brand.LAND_ROVER: ("850", "30000", "7", "5", "4"),
    Brand.RENAULT: ("400", "20000", "5", "3", "2"),
}

SALESMEN = [
    ("John Smith", "SM001", "490000", {
        CarClass.A_CLASS: (1, 3, 0, 6),
        CarClass.B_CLASS: (2, 4, 2, 2),
        CarClass.C_CLASS: (3, 6, 1, 1),
    }),
    ("Richard Porter", "SM002", "1000000", {
        CarClass.A_CLASS: (0, 5, 5, 3),
        CarClass.B_CLASS: (0, 4, 2, 2),
        CarClass.C_CLASS: (0, 2, 1, 1),
    }),
    ("Tony Grid", "SM003", "650000", {
        CarClass.A_CLASS: (4, 2, 1, 6),
        CarClass.B_CLASS: (2, 7, 2, 3),
        CarClass.C_CLASS: (0, 1, 3, 1),
    }),
]


@pytest_asyncio.fixture
async def commission_data(db_session):
    """Seed commission rules, salesmen and their sales counts."""
    for brand, (fixed, threshold, class_a, class_b, class_c) in COMMISSION_RULES.items():
        db_session.add(CommissionRule(
            brand=brand,
            fixed_commission=Decimal(fixed),
            price_threshold=Decimal(threshold),
            class_a_percent=Decimal(class_a),
            class_b_percent=Decimal(class_b),
            class_c_percent=Decimal(class_c),
        ))

    salesmen = {}
    for name, code, previous_year_sales, counts in SALESMEN:
        salesman = Salesman(name=name, code=code, previous_year_sales=Decimal(previous_year_sales))
        db_session.add(salesman)
        await db_session.flush()
        for car_class, (audi, jaguar, land_rover, renault) in counts.items():
            db_session.add(SalesRecord(
                salesman_id=salesman.id,
                car_class=car_class,
                audi_count=audi,
                jaguar_count=jaguar,
                land_rover_count=land_rover,
                renault_count=renault,
            ))
        salesmen[code] = salesman

    await db_session.commit()
    return salesmen
