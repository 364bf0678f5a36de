"""
Dealership API

Main FastAPI application with:
- Car model catalog with image uploads
- Salesman commission reports (JSON and CSV)
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from dealership.api import api_router
from dealership.api.errors import register_exception_handlers
from dealership.config import Settings, settings
from dealership.db import engine
from dealership.middleware import RequestLoggingMiddleware
from dealership.services import build_services

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Shutdown disposes the database engine.
    """
    logger.info("Starting Dealership API...")

    yield

    logger.info("Shutting down Dealership API...")
    await engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and the services shared by every request."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Dealership API",
        description="Car model catalog and salesman commission reports",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not app_settings.is_production else None,
        redoc_url="/redoc" if not app_settings.is_production else None,
    )

    app.state.services = build_services(app_settings)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Uploaded images are served from the public path stored on image rows
    os.makedirs(app_settings.upload_dir, exist_ok=True)
    app.mount(
        app_settings.upload_url_prefix,
        StaticFiles(directory=app_settings.upload_dir),
        name="uploads",
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "dealership.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
