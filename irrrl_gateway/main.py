"""
IRRRL Gateway - Main Application Entry Point

Decision engine service for VA Interest Rate Reduction Refinance Loans:
Net Tangible Benefit, eligibility verification and the application
status workflow.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.responses import RedirectResponse

from irrrl_gateway import __version__
from irrrl_gateway.core.config import settings
from irrrl_gateway.core.logging import setup_logging
from irrrl_gateway.core.metrics import get_metrics, get_metrics_content_type
from irrrl_gateway.infrastructure.database import db_manager
from irrrl_gateway.presentation.api import api_router
from irrrl_gateway.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, open the database pool and ensure tables exist."""
    setup_logging()
    db_manager.init()
    await db_manager.create_all()

    logger = structlog.get_logger(__name__)
    logger.info("application_started", app=settings.app_name, version=__version__)

    yield

    await db_manager.close()
    logger.info("application_stopped")


app = FastAPI(
    title="IRRRL Gateway",
    description="VA IRRRL decision engine: NTB, eligibility and workflow",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")
