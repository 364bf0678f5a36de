"""Car model catalog API endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from dealership.api.dependencies import get_car_model_service, validate_input
from dealership.db import get_db
from dealership.models import Brand, CarClass
from dealership.schemas import (
    ApiResponse,
    CarModelCreate,
    CarModelResponse,
    CarModelUpdate,
    PaginatedResponse,
)
from dealership.services import CarModelFilters, CarModelService
from dealership.services.car_models import parse_image_ids

router = APIRouter(prefix="/car-models", tags=["Car Models"])


@router.get("", response_model=PaginatedResponse[List[CarModelResponse]])
async def list_car_models(
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
    search: Optional[str] = Query(None),
    brand: Optional[Brand] = Query(None),
    car_class: Optional[CarClass] = Query(None, alias="carClass"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    sort_by: str = Query("created_at", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc|ASC|DESC)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """List car models with search, filters, sorting and pagination."""
    filters = CarModelFilters(
        search=search,
        brand=brand,
        car_class=car_class,
        is_active=is_active,
    )
    items, pagination = await service.list_car_models(
        db, filters, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit
    )
    return PaginatedResponse[List[CarModelResponse]](
        message="Car models retrieved successfully",
        data=items,
        pagination=pagination,
    )


@router.get("/{car_model_id}", response_model=ApiResponse[CarModelResponse])
async def get_car_model(
    car_model_id: int,
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
):
    """Get a car model with its images."""
    car_model = await service.get_car_model(db, car_model_id)
    return ApiResponse[CarModelResponse](
        message="Car model retrieved successfully",
        data=car_model,
    )


@router.post(
    "",
    response_model=ApiResponse[CarModelResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_car_model(
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
    brand: str = Form(...),
    car_class: str = Form(...),
    model_name: str = Form(...),
    model_code: str = Form(...),
    description: str = Form(...),
    features: str = Form(...),
    price: str = Form(...),
    date_of_manufacturing: str = Form(...),
    is_active: Optional[str] = Form(None),
    sort_order: Optional[str] = Form(None),
    images: List[UploadFile] = File(...),
):
    """Create a car model from a multipart form with 1 to 10 images."""
    data = validate_input(CarModelCreate, {
        "brand": brand,
        "car_class": car_class,
        "model_name": model_name,
        "model_code": model_code,
        "description": description,
        "features": features,
        "price": price,
        "date_of_manufacturing": date_of_manufacturing,
        "is_active": is_active,
        "sort_order": sort_order,
    })
    uploads = [image for image in images if image.filename]
    car_model = await service.create_car_model(db, data, uploads)
    return ApiResponse[CarModelResponse](
        message="Car model created successfully",
        data=car_model,
    )


@router.put("/{car_model_id}", response_model=ApiResponse[CarModelResponse])
async def update_car_model(
    car_model_id: int,
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
    brand: Optional[str] = Form(None),
    car_class: Optional[str] = Form(None),
    model_name: Optional[str] = Form(None),
    model_code: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    date_of_manufacturing: Optional[str] = Form(None),
    is_active: Optional[str] = Form(None),
    sort_order: Optional[str] = Form(None),
    delete_image_ids: Optional[str] = Form(None, alias="deleteImageIds"),
    images: Optional[List[UploadFile]] = File(None),
):
    """
    Partially update a car model.

    deleteImageIds is a JSON array or a comma separated list of image ids.
    """
    data = validate_input(CarModelUpdate, {
        "brand": brand,
        "car_class": car_class,
        "model_name": model_name,
        "model_code": model_code,
        "description": description,
        "features": features,
        "price": price,
        "date_of_manufacturing": date_of_manufacturing,
        "is_active": is_active,
        "sort_order": sort_order,
    })
    uploads = [image for image in images or [] if image.filename]
    car_model = await service.update_car_model(
        db,
        car_model_id,
        data,
        uploads=uploads,
        delete_image_ids=parse_image_ids(delete_image_ids),
    )
    return ApiResponse[CarModelResponse](
        message="Car model updated successfully",
        data=car_model,
    )


@router.delete("/{car_model_id}", response_model=ApiResponse[None])
async def delete_car_model(
    car_model_id: int,
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
):
    """Delete a car model, its image rows and its image files."""
    await service.delete_car_model(db, car_model_id)
    return ApiResponse[None](message="Car model deleted successfully")


@router.patch(
    "/{car_model_id}/default-image/{image_id}",
    response_model=ApiResponse[CarModelResponse],
)
async def set_default_image(
    car_model_id: int,
    image_id: int,
    db: AsyncSession = Depends(get_db),
    service: CarModelService = Depends(get_car_model_service),
):
    """Make one of the car model's images the default."""
    car_model = await service.set_default_image(db, car_model_id, image_id)
    return ApiResponse[CarModelResponse](
        message="Default image updated successfully",
        data=car_model,
    )
