"""Business logic services."""

from dataclasses import dataclass

from dealership.config import Settings
from dealership.services.car_model_mapper import CarModelMapper
from dealership.services.car_model_store import CarModelFilters, CarModelStore
from dealership.services.car_models import CarModelService
from dealership.services.commission_report import CommissionReportService
from dealership.services.file_storage import ImageStorage, StoredImage
from dealership.utils.encryption import FieldCipher


@dataclass
class Services:
    """Services shared by every request, built once per application."""

    car_models: CarModelService
    commission: CommissionReportService


def build_services(settings: Settings) -> Services:
    images = ImageStorage(
        upload_dir=settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_file_size=settings.max_image_size,
        allowed_types=settings.allowed_image_types,
    )
    car_models = CarModelService(
        store=CarModelStore(),
        images=images,
        mapper=CarModelMapper(FieldCipher(settings.encryption_key)),
        max_images_per_upload=settings.max_images_per_upload,
    )
    return Services(
        car_models=car_models,
        commission=CommissionReportService(),
    )


__all__ = [
    "Services",
    "build_services",
    "CarModelService",
    "CarModelStore",
    "CarModelFilters",
    "CarModelMapper",
    "CommissionReportService",
    "ImageStorage",
    "StoredImage",
]
