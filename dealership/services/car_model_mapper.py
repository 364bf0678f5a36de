"""
Conversions between car model schemas, entity dicts and response views.

description and features are encrypted on the way in and decrypted on the
way out. A value that cannot be decrypted is returned as stored.
"""

from typing import Any, Dict, Optional

from dealership.models import CarModel
from dealership.schemas.car_model import (
    CarModelCreate,
    CarModelImageResponse,
    CarModelResponse,
    CarModelUpdate,
)
from dealership.utils.encryption import FieldCipher

ENCRYPTED_FIELDS = ("description", "features")


class CarModelMapper:
    def __init__(self, cipher: FieldCipher):
        self.cipher = cipher

    def _reveal(self, stored: Optional[str]) -> Optional[str]:
        if not stored:
            return stored
        plaintext = self.cipher.decrypt(stored)
        return plaintext if plaintext is not None else stored

    def to_entity(self, data: CarModelCreate) -> Dict[str, Any]:
        entity = data.model_dump()
        for field in ENCRYPTED_FIELDS:
            entity[field] = self.cipher.encrypt(entity[field])
        return entity

    def to_update_entity(self, data: CarModelUpdate) -> Dict[str, Any]:
        """Only the fields the client sent."""
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field in ENCRYPTED_FIELDS:
            if field in changes:
                changes[field] = self.cipher.encrypt(changes[field])
        return changes

    def to_view_model(self, car_model: CarModel) -> CarModelResponse:
        images = [
            CarModelImageResponse(
                id=image.id,
                filename=image.filename,
                original_name=image.original_name,
                path=image.path,
                is_default=image.is_default,
            )
            for image in car_model.images
        ]

        default = car_model.default_image
        if default is not None:
            default_path = default.path
        elif car_model.images:
            default_path = car_model.images[0].path
        else:
            default_path = None

        return CarModelResponse(
            id=car_model.id,
            brand=car_model.brand,
            car_class=car_model.car_class,
            model_name=car_model.model_name,
            model_code=car_model.model_code,
            description=self._reveal(car_model.description),
            features=self._reveal(car_model.features),
            price=float(car_model.price),
            date_of_manufacturing=car_model.date_of_manufacturing,
            is_active=car_model.is_active,
            sort_order=car_model.sort_order,
            images=images,
            default_image=default_path,
            created_at=car_model.created_at,
            updated_at=car_model.updated_at,
        )
