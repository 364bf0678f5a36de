"""
FastAPI dependencies for the API routers.
"""

from typing import Any, Dict, Type, TypeVar

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dealership.services import CarModelService, CommissionReportService, Services

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_services(request: Request) -> Services:
    """Services built by create_app()."""
    return request.app.state.services


def get_car_model_service(services: Services = Depends(get_services)) -> CarModelService:
    return services.car_models


def get_commission_service(services: Services = Depends(get_services)) -> CommissionReportService:
    return services.commission


def validate_input(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Build a schema from form or query values.

    Unset values (None) are dropped so schema defaults apply. Failures are
    reported like any other request validation error.
    """
    try:
        return model.model_validate({k: v for k, v in data.items() if v is not None})
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())
