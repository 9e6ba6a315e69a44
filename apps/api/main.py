"""Transaction Import API: FastAPI entry point.

Serves the import engine over HTTP for the presentation layer.
"""

import structlog
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.api.core.config import settings
from apps.api.core.errors import register_error_handlers
from apps.api.domains.imports.router import router as imports_router
from apps.api.routers import health
from packages.transaction_import.logging_config import setup_service_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup/shutdown hooks."""
    setup_service_logging(settings.log_level, json_output=settings.is_production)
    logger.info("app_starting", version=settings.APP_VERSION)
    yield
    logger.info("app_stopping")


app = FastAPI(
    title="Transaction Import API",
    description="Turns bank and finance app CSV exports into normalized transactions.",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(imports_router, prefix="/api/v1")
app.include_router(health.router, prefix="/api/v1")
