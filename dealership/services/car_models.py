"""
Car model catalog service.

Business rules around the car model aggregate:
- a car model is created with at least one image
- model codes are unique (upper-case)
- image files written for a failed write are removed again
- image files of deleted images are removed once the change is committed
"""

import json
import logging
from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.errors import DuplicateKey, NotFound, ValidationError
from dealership.schemas.car_model import CarModelCreate, CarModelResponse, CarModelUpdate
from dealership.schemas.common import Pagination
from dealership.services.car_model_mapper import CarModelMapper
from dealership.services.car_model_store import CarModelFilters, CarModelStore
from dealership.services.file_storage import ImageStorage

logger = logging.getLogger(__name__)


def parse_image_ids(raw: Optional[str]) -> List[int]:
    """
    Parse deleteImageIds sent as a JSON array ("[1, 2]") or a comma list ("1,2").

    Raises:
        ValidationError: the value is not a list of integers
    """
    if raw is None or not raw.strip():
        return []

    raw = raw.strip()
    try:
        if raw.startswith("["):
            values = json.loads(raw)
            if not isinstance(values, list):
                raise ValueError(raw)
        else:
            values = [part for part in raw.split(",") if part.strip()]
        return [int(value) for value in values]
    except (ValueError, TypeError):
        raise ValidationError(
            "Invalid deleteImageIds",
            errors=[{"field": "deleteImageIds", "message": "Must be a list of image ids"}],
        )


class CarModelService:
    def __init__(
        self,
        store: CarModelStore,
        images: ImageStorage,
        mapper: CarModelMapper,
        max_images_per_upload: int = 10,
    ):
        self.store = store
        self.images = images
        self.mapper = mapper
        self.max_images_per_upload = max_images_per_upload

    def _check_upload_count(self, uploads: Sequence[UploadFile]) -> None:
        if len(uploads) > self.max_images_per_upload:
            raise ValidationError(
                f"Maximum {self.max_images_per_upload} images allowed per request",
                errors=[{"field": "images", "message": "Too many files"}],
            )

    async def list_car_models(
        self,
        db: AsyncSession,
        filters: CarModelFilters,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[CarModelResponse], Pagination]:
        car_models, total = await self.store.find_all_with_images(
            db, filters, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit
        )
        items = [self.mapper.to_view_model(car_model) for car_model in car_models]
        return items, Pagination.build(page, limit, total)

    async def get_car_model(self, db: AsyncSession, car_model_id: int) -> CarModelResponse:
        car_model = await self.store.find_by_id_with_images(db, car_model_id)
        if not car_model:
            raise NotFound("Car model not found")
        return self.mapper.to_view_model(car_model)

    async def create_car_model(
        self,
        db: AsyncSession,
        data: CarModelCreate,
        uploads: Sequence[UploadFile],
    ) -> CarModelResponse:
        """
        Create a car model with its images in one transaction.

        Raises:
            ValidationError: no images, too many images or an invalid file
            DuplicateKey: the model code is already used
        """
        if not uploads:
            raise ValidationError(
                "At least one image is required",
                errors=[{"field": "images", "message": "At least one image is required"}],
            )
        self._check_upload_count(uploads)

        if await self.store.find_by_model_code(db, data.model_code):
            raise DuplicateKey("Model code already exists")

        stored = await self.images.store_all(uploads)
        try:
            car_model = await self.store.create_with_images(db, self.mapper.to_entity(data), stored)
        except Exception:
            removed = self.images.delete_all(image.filename for image in stored)
            logger.error(
                f"Car model {data.model_code} was not created, removed {removed} uploaded file(s)"
            )
            raise

        logger.info(f"Car model created: {car_model.id} ({car_model.model_code})")
        return self.mapper.to_view_model(car_model)

    async def update_car_model(
        self,
        db: AsyncSession,
        car_model_id: int,
        data: CarModelUpdate,
        uploads: Sequence[UploadFile] = (),
        delete_image_ids: Sequence[int] = (),
    ) -> CarModelResponse:
        """
        Partially update a car model, removing and adding images.

        Raises:
            NotFound: no such car model
            DuplicateKey: the new model code belongs to another car model
        """
        existing = await self.store.find_by_id(db, car_model_id)
        if not existing:
            raise NotFound("Car model not found")

        if data.model_code and data.model_code != existing.model_code:
            other = await self.store.find_by_model_code(db, data.model_code)
            if other and other.id != car_model_id:
                raise DuplicateKey("Model code already exists")

        self._check_upload_count(uploads)

        removed_files = [
            image.filename
            for image in await self.store.find_images(db, car_model_id, delete_image_ids)
        ]

        stored = await self.images.store_all(uploads)
        try:
            car_model = await self.store.update_with_images(
                db,
                car_model_id,
                self.mapper.to_update_entity(data),
                images=stored,
                delete_image_ids=delete_image_ids,
            )
        except Exception:
            self.images.delete_all(image.filename for image in stored)
            logger.error(f"Car model {car_model_id} was not updated")
            raise

        self.images.delete_all(removed_files)

        logger.info(
            f"Car model updated: {car_model_id} "
            f"(+{len(stored)} image(s), -{len(removed_files)} image(s))"
        )
        return self.mapper.to_view_model(car_model)

    async def delete_car_model(self, db: AsyncSession, car_model_id: int) -> None:
        existing = await self.store.find_by_id(db, car_model_id)
        if not existing:
            raise NotFound("Car model not found")

        filenames = await self.store.delete_with_images(db, car_model_id)
        self.images.delete_all(filenames)

        logger.info(f"Car model deleted: {car_model_id}")

    async def set_default_image(
        self,
        db: AsyncSession,
        car_model_id: int,
        image_id: int,
    ) -> CarModelResponse:
        existing = await self.store.find_by_id(db, car_model_id)
        if not existing:
            raise NotFound("Car model not found")

        await self.store.set_default_image(db, car_model_id, image_id)

        logger.info(f"Car model {car_model_id}: default image set to {image_id}")
        return await self.get_car_model(db, car_model_id)
