"""
Tests for the car model service.

Covers:
- Image requirements and upload validation
- Model code uniqueness
- Removal of uploaded files when a write fails
- Removal of deleted images' files
- Encrypted description/features
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from sqlalchemy import func, select

from dealership.errors import DuplicateKey, NotFound, StorageError, ValidationError
from dealership.models import CarModel, CarModelImage
from dealership.schemas.car_model import CarModelCreate, CarModelUpdate
from dealership.services.car_model_store import CarModelFilters
from dealership.services.car_models import parse_image_ids


def _create_data(**overrides):
    data = {
        "brand": "Audi",
        "car_class": "A-Class",
        "model_name": "A4 Sedan",
        "model_code": "audia40001",
        "description": "<p>Premium sedan</p>",
        "features": "<ul><li>Quattro</li></ul>",
        "price": "45000.00",
        "date_of_manufacturing": "2024-01-15T00:00:00Z",
    }
    data.update(overrides)
    return CarModelCreate(**data)


async def _count(db, model):
    return await db.scalar(select(func.count()).select_from(model))


def _files(upload_dir):
    return sorted(os.listdir(upload_dir))


# ── Create ─────────────────────────────────────────────────


class TestCreateCarModel:
    @pytest.mark.asyncio
    async def test_creates_with_images(self, db_session, car_model_service, make_upload, upload_dir):
        view = await car_model_service.create_car_model(
            db_session,
            _create_data(),
            [make_upload("front.jpg"), make_upload("side.png", "image/png")],
        )

        assert view.model_code == "AUDIA40001"
        assert view.description == "<p>Premium sedan</p>"
        assert view.features == "<ul><li>Quattro</li></ul>"
        assert len(view.images) == 2
        assert view.images[0].is_default is True
        assert view.images[0].original_name == "front.jpg"
        assert view.default_image == view.images[0].path
        assert view.default_image.startswith("/uploads/car-models/")
        assert len(_files(upload_dir)) == 2

    @pytest.mark.asyncio
    async def test_rich_text_is_encrypted_at_rest(self, db_session, car_model_service, make_upload, cipher):
        view = await car_model_service.create_car_model(
            db_session, _create_data(), [make_upload()]
        )

        row = (await db_session.execute(
            select(CarModel.description, CarModel.features).where(CarModel.id == view.id)
        )).one()
        assert row.description != "<p>Premium sedan</p>"
        assert cipher.decrypt(row.description) == "<p>Premium sedan</p>"
        assert cipher.decrypt(row.features) == "<ul><li>Quattro</li></ul>"

    @pytest.mark.asyncio
    async def test_requires_at_least_one_image(self, db_session, car_model_service, upload_dir):
        with pytest.raises(ValidationError) as exc_info:
            await car_model_service.create_car_model(db_session, _create_data(), [])

        assert exc_info.value.message == "At least one image is required"
        assert exc_info.value.status_code == 400
        assert await _count(db_session, CarModel) == 0
        assert await _count(db_session, CarModelImage) == 0
        assert _files(upload_dir) == []

    @pytest.mark.asyncio
    async def test_rejects_too_many_images(self, db_session, car_model_service, make_upload):
        uploads = [make_upload(f"car{i}.jpg") for i in range(4)]

        with pytest.raises(ValidationError):
            await car_model_service.create_car_model(db_session, _create_data(), uploads)

        assert await _count(db_session, CarModel) == 0

    @pytest.mark.asyncio
    async def test_rejects_unsupported_type_and_removes_written_files(
        self, db_session, car_model_service, make_upload, upload_dir
    ):
        uploads = [make_upload("ok.jpg"), make_upload("notes.txt", "text/plain")]

        with pytest.raises(ValidationError):
            await car_model_service.create_car_model(db_session, _create_data(), uploads)

        assert _files(upload_dir) == []
        assert await _count(db_session, CarModel) == 0

    @pytest.mark.asyncio
    async def test_rejects_oversized_file(self, db_session, car_model_service, make_upload, upload_dir):
        with pytest.raises(ValidationError):
            await car_model_service.create_car_model(
                db_session, _create_data(), [make_upload(content=b"x" * 2048)]
            )

        assert _files(upload_dir) == []

    @pytest.mark.asyncio
    async def test_duplicate_code_writes_nothing(self, db_session, car_model_service, make_upload, upload_dir):
        await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])

        with pytest.raises(DuplicateKey) as exc_info:
            await car_model_service.create_car_model(
                db_session, _create_data(model_code="AUDIA40001"), [make_upload()]
            )

        assert exc_info.value.message == "Model code already exists"
        assert exc_info.value.status_code == 409
        assert len(_files(upload_dir)) == 1
        assert await _count(db_session, CarModel) == 1

    @pytest.mark.asyncio
    async def test_failed_transaction_removes_uploaded_files(
        self, db_session, car_model_service, make_upload, upload_dir, monkeypatch
    ):
        async def failing_create(db, entity, images):
            raise StorageError()

        monkeypatch.setattr(car_model_service.store, "create_with_images", failing_create)

        with pytest.raises(StorageError):
            await car_model_service.create_car_model(
                db_session, _create_data(), [make_upload("a.jpg"), make_upload("b.jpg")]
            )

        assert _files(upload_dir) == []


# ── Read ───────────────────────────────────────────────────


class TestReadCarModels:
    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session, car_model_service):
        with pytest.raises(NotFound) as exc_info:
            await car_model_service.get_car_model(db_session, 999)

        assert exc_info.value.message == "Car model not found"

    @pytest.mark.asyncio
    async def test_list_returns_views_and_pagination(self, db_session, car_model_service, make_upload):
        for i in range(3):
            await car_model_service.create_car_model(
                db_session, _create_data(model_code=f"AUDIA4000{i}"), [make_upload()]
            )

        items, pagination = await car_model_service.list_car_models(
            db_session, CarModelFilters(), page=1, limit=2
        )

        assert len(items) == 2
        assert items[0].description == "<p>Premium sedan</p>"
        assert pagination.total_items == 3
        assert pagination.total_pages == 2
        assert pagination.has_next_page is True
        assert pagination.has_prev_page is False

    @pytest.mark.asyncio
    async def test_unencrypted_value_is_returned_as_stored(self, db_session, car_model_service, make_upload):
        view = await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])
        car_model = await db_session.get(CarModel, view.id)
        car_model.description = "legacy plain text"
        await db_session.commit()

        fetched = await car_model_service.get_car_model(db_session, view.id)

        assert fetched.description == "legacy plain text"


# ── Update ─────────────────────────────────────────────────


class TestUpdateCarModel:
    @pytest.mark.asyncio
    async def test_missing_car_model(self, db_session, car_model_service):
        with pytest.raises(NotFound):
            await car_model_service.update_car_model(db_session, 999, CarModelUpdate(model_name="X"))

    @pytest.mark.asyncio
    async def test_partial_update_encrypts_changed_text(self, db_session, car_model_service, make_upload, cipher):
        created = await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])

        updated = await car_model_service.update_car_model(
            db_session, created.id, CarModelUpdate(features="<p>New</p>", sort_order=5)
        )

        assert updated.features == "<p>New</p>"
        assert updated.description == "<p>Premium sedan</p>"
        assert updated.sort_order == 5
        stored = await db_session.scalar(select(CarModel.features).where(CarModel.id == created.id))
        assert cipher.decrypt(stored) == "<p>New</p>"

    @pytest.mark.asyncio
    async def test_deleted_images_files_are_removed(
        self, db_session, car_model_service, make_upload, upload_dir
    ):
        created = await car_model_service.create_car_model(
            db_session, _create_data(), [make_upload("a.jpg"), make_upload("b.jpg")]
        )
        removed = created.images[1]

        updated = await car_model_service.update_car_model(
            db_session,
            created.id,
            CarModelUpdate(),
            uploads=[make_upload("c.jpg")],
            delete_image_ids=[removed.id],
        )

        assert [image.original_name for image in updated.images] == ["a.jpg", "c.jpg"]
        assert removed.filename not in _files(upload_dir)
        assert len(_files(upload_dir)) == 2

    @pytest.mark.asyncio
    async def test_code_taken_by_another_model(self, db_session, car_model_service, make_upload):
        await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])
        other = await car_model_service.create_car_model(
            db_session, _create_data(model_code="AUDIA40002"), [make_upload()]
        )

        with pytest.raises(DuplicateKey):
            await car_model_service.update_car_model(
                db_session, other.id, CarModelUpdate(model_code="audia40001")
            )

    @pytest.mark.asyncio
    async def test_keeping_own_code_is_allowed(self, db_session, car_model_service, make_upload):
        created = await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])

        updated = await car_model_service.update_car_model(
            db_session, created.id, CarModelUpdate(model_code="AUDIA40001", model_name="A4")
        )

        assert updated.model_name == "A4"

    @pytest.mark.asyncio
    async def test_failed_update_removes_new_files(
        self, db_session, car_model_service, make_upload, upload_dir, monkeypatch
    ):
        created = await car_model_service.create_car_model(db_session, _create_data(), [make_upload()])
        before = _files(upload_dir)

        async def failing_update(*args, **kwargs):
            raise StorageError()

        monkeypatch.setattr(car_model_service.store, "update_with_images", failing_update)

        with pytest.raises(StorageError):
            await car_model_service.update_car_model(
                db_session, created.id, CarModelUpdate(), uploads=[make_upload("new.jpg")]
            )

        assert _files(upload_dir) == before


# ── Delete and default image ───────────────────────────────


class TestDeleteAndDefaultImage:
    @pytest.mark.asyncio
    async def test_delete_removes_rows_and_files(
        self, db_session, car_model_service, make_upload, upload_dir
    ):
        created = await car_model_service.create_car_model(
            db_session, _create_data(), [make_upload("a.jpg"), make_upload("b.jpg")]
        )

        await car_model_service.delete_car_model(db_session, created.id)

        assert _files(upload_dir) == []
        assert await _count(db_session, CarModel) == 0
        assert await _count(db_session, CarModelImage) == 0

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, db_session, car_model_service):
        with pytest.raises(NotFound):
            await car_model_service.delete_car_model(db_session, 999)

    @pytest.mark.asyncio
    async def test_set_default_image(self, db_session, car_model_service, make_upload):
        created = await car_model_service.create_car_model(
            db_session, _create_data(), [make_upload("a.jpg"), make_upload("b.jpg")]
        )
        second = created.images[1]

        view = await car_model_service.set_default_image(db_session, created.id, second.id)

        assert [image.id for image in view.images if image.is_default] == [second.id]
        assert view.default_image == second.path


# ── deleteImageIds parsing ─────────────────────────────────


class TestParseImageIds:
    @pytest.mark.parametrize("raw, expected", [
        (None, []),
        ("", []),
        ("[1, 2, 3]", [1, 2, 3]),
        ("[]", []),
        ("4,5", [4, 5]),
        (" 6 , 7 ", [6, 7]),
    ])
    def test_valid_values(self, raw, expected):
        assert parse_image_ids(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "[1, \"x\"]", "{\"id\": 1}", "[1,"])
    def test_invalid_values(self, raw):
        with pytest.raises(ValidationError):
            parse_image_ids(raw)
