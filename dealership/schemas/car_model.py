"""Car model schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dealership.models.base import Brand, CarClass
from dealership.schemas.common import CamelModel

MODEL_CODE_PATTERN = r"^[A-Za-z0-9]{10}$"


class CarModelCreate(BaseModel):
    """Fields required to create a car model (multipart form fields)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    brand: Brand
    car_class: CarClass
    model_name: str = Field(..., min_length=1, max_length=255)
    model_code: str = Field(..., pattern=MODEL_CODE_PATTERN)
    description: str = Field(..., min_length=1)
    features: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    date_of_manufacturing: datetime
    is_active: bool = True
    sort_order: int = Field(default=0, ge=0)

    @field_validator("model_code")
    @classmethod
    def upper_case_code(cls, v: str) -> str:
        return v.upper()


class CarModelUpdate(BaseModel):
    """Partial update; omitted fields are left untouched."""

    model_config = ConfigDict(str_strip_whitespace=True)

    brand: Optional[Brand] = None
    car_class: Optional[CarClass] = None
    model_name: Optional[str] = Field(None, min_length=1, max_length=255)
    model_code: Optional[str] = Field(None, pattern=MODEL_CODE_PATTERN)
    description: Optional[str] = Field(None, min_length=1)
    features: Optional[str] = Field(None, min_length=1)
    price: Optional[Decimal] = Field(None, ge=0)
    date_of_manufacturing: Optional[datetime] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)

    @field_validator("model_code")
    @classmethod
    def upper_case_code(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v is not None else v


class CarModelImageResponse(CamelModel):
    id: int
    filename: str
    original_name: str
    path: str
    is_default: bool


class CarModelResponse(CamelModel):
    """Car model with decrypted rich-text fields and its images."""

    id: int
    brand: Brand
    car_class: CarClass
    model_name: str
    model_code: str
    description: Optional[str]
    features: Optional[str]
    price: float
    date_of_manufacturing: datetime
    is_active: bool
    sort_order: int
    images: List[CarModelImageResponse] = []
    default_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
