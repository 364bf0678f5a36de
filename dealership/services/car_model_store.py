"""
Car model aggregate store.

A car model and its images are written together: every write runs in one
database transaction and either commits completely or not at all.

Default image rules:
- On create the first image is the default
- On update a new image becomes the default only if the car model has no
  images left once the requested deletions are applied
- set_default_image clears every default before setting the new one, so two
  defaults are never committed

The store does not touch image files. Files written before a failed
transaction, and files of deleted images, are cleaned up by the caller.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from dealership.errors import NotFound, translate_storage_error
from dealership.models import Brand, CarClass, CarModel, CarModelImage
from dealership.services.file_storage import StoredImage

logger = logging.getLogger(__name__)

# Columns the list endpoint may sort by; anything else falls back to created_at
SORTABLE_COLUMNS = {
    "date_of_manufacturing": CarModel.date_of_manufacturing,
    "sort_order": CarModel.sort_order,
    "created_at": CarModel.created_at,
    "price": CarModel.price,
    "model_name": CarModel.model_name,
}
DEFAULT_SORT_COLUMN = "created_at"


@dataclass
class CarModelFilters:
    search: Optional[str] = None
    brand: Optional[Brand] = None
    car_class: Optional[CarClass] = None
    is_active: Optional[bool] = None


class CarModelStore:
    """Reads and writes the car model + images aggregate."""

    @asynccontextmanager
    async def _transaction(self, db: AsyncSession) -> AsyncGenerator[None, None]:
        """Commit on success; roll back and translate database failures."""
        try:
            yield
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            logger.error(f"Car model transaction failed: {exc}")
            raise translate_storage_error(exc) from exc
        except Exception:
            await db.rollback()
            raise

    @staticmethod
    def _image_row(image: StoredImage, is_default: bool, car_model_id: Optional[int] = None) -> CarModelImage:
        row = CarModelImage(
            filename=image.filename,
            original_name=image.original_name,
            mime_type=image.mime_type,
            file_size=image.size,
            path=image.path,
            is_default=is_default,
        )
        if car_model_id is not None:
            row.car_model_id = car_model_id
        return row

    async def find_by_id(self, db: AsyncSession, car_model_id: int) -> Optional[CarModel]:
        return await db.get(CarModel, car_model_id)

    async def find_by_model_code(self, db: AsyncSession, model_code: str) -> Optional[CarModel]:
        result = await db.execute(
            select(CarModel).where(CarModel.model_code == model_code.upper())
        )
        return result.scalar_one_or_none()

    async def find_by_id_with_images(self, db: AsyncSession, car_model_id: int) -> Optional[CarModel]:
        """Car model with its images, default image first."""
        result = await db.execute(
            select(CarModel)
            .options(selectinload(CarModel.images))
            .where(CarModel.id == car_model_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_images(
        self,
        db: AsyncSession,
        car_model_id: int,
        image_ids: Sequence[int],
    ) -> Sequence[CarModelImage]:
        """Images with the given ids that belong to the car model."""
        if not image_ids:
            return []
        result = await db.execute(
            select(CarModelImage).where(
                CarModelImage.id.in_(image_ids),
                CarModelImage.car_model_id == car_model_id,
            )
        )
        return result.scalars().all()

    async def find_all_with_images(
        self,
        db: AsyncSession,
        filters: CarModelFilters,
        sort_by: str = DEFAULT_SORT_COLUMN,
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[CarModel], int]:
        """
        Search, filter, sort and paginate car models.

        Returns:
            (car models of the requested page, total matching car models)
        """
        query = select(CarModel)

        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    CarModel.model_name.ilike(pattern),
                    CarModel.model_code.ilike(pattern),
                )
            )

        if filters.brand:
            query = query.where(CarModel.brand == filters.brand)

        if filters.car_class:
            query = query.where(CarModel.car_class == filters.car_class)

        if filters.is_active is not None:
            query = query.where(CarModel.is_active == filters.is_active)

        # Count total
        count_query = select(func.count()).select_from(query.subquery())
        total = await db.scalar(count_query)

        # Apply sorting and pagination
        column = SORTABLE_COLUMNS.get(sort_by, SORTABLE_COLUMNS[DEFAULT_SORT_COLUMN])
        ordering = column.asc() if (sort_order or "").lower() == "asc" else column.desc()
        query = (
            query.options(selectinload(CarModel.images))
            .order_by(ordering, CarModel.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )

        result = await db.execute(query)
        return list(result.scalars().all()), total or 0

    async def create_with_images(
        self,
        db: AsyncSession,
        entity: Dict[str, Any],
        images: Sequence[StoredImage],
    ) -> CarModel:
        """Insert the car model and one image row per file; the first file is the default."""
        car_model = CarModel(
            **entity,
            images=[
                self._image_row(image, is_default=index == 0)
                for index, image in enumerate(images)
            ],
        )
        async with self._transaction(db):
            db.add(car_model)
            await db.flush()

        return await self.find_by_id_with_images(db, car_model.id)

    async def update_with_images(
        self,
        db: AsyncSession,
        car_model_id: int,
        changes: Dict[str, Any],
        images: Sequence[StoredImage] = (),
        delete_image_ids: Sequence[int] = (),
    ) -> Optional[CarModel]:
        """
        Apply a partial update, delete images and append new ones.

        Only images owned by this car model are deleted, whatever ids are passed.
        A deleted default image is not replaced by another one.
        """
        async with self._transaction(db):
            await db.execute(
                update(CarModel)
                .where(CarModel.id == car_model_id)
                .values(**changes, updated_at=func.now())
            )

            if delete_image_ids:
                await db.execute(
                    delete(CarModelImage).where(
                        CarModelImage.id.in_(delete_image_ids),
                        CarModelImage.car_model_id == car_model_id,
                    )
                )

            if images:
                remaining = await db.scalar(
                    select(func.count())
                    .select_from(CarModelImage)
                    .where(CarModelImage.car_model_id == car_model_id)
                )
                has_images = (remaining or 0) > 0
                db.add_all([
                    self._image_row(
                        image,
                        is_default=not has_images and index == 0,
                        car_model_id=car_model_id,
                    )
                    for index, image in enumerate(images)
                ])
                await db.flush()

        return await self.find_by_id_with_images(db, car_model_id)

    async def set_default_image(self, db: AsyncSession, car_model_id: int, image_id: int) -> bool:
        """
        Make one image the default.

        Raises:
            NotFound: the image does not belong to the car model (nothing changes)
        """
        async with self._transaction(db):
            await db.execute(
                update(CarModelImage)
                .where(CarModelImage.car_model_id == car_model_id)
                .values(is_default=False)
            )
            result = await db.execute(
                update(CarModelImage)
                .where(
                    CarModelImage.id == image_id,
                    CarModelImage.car_model_id == car_model_id,
                )
                .values(is_default=True)
            )
            if result.rowcount == 0:
                raise NotFound("Image not found for this car model")

        return True

    async def delete_with_images(self, db: AsyncSession, car_model_id: int) -> List[str]:
        """Delete the image rows and the car model; return the image filenames."""
        async with self._transaction(db):
            result = await db.execute(
                select(CarModelImage.filename)
                .where(CarModelImage.car_model_id == car_model_id)
                .order_by(CarModelImage.id)
            )
            filenames = list(result.scalars().all())

            await db.execute(
                delete(CarModelImage).where(CarModelImage.car_model_id == car_model_id)
            )
            await db.execute(
                delete(CarModel).where(CarModel.id == car_model_id)
            )

        return filenames
