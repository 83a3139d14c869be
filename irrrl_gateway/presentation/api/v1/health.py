"""Health check endpoint for service monitoring."""

from fastapi import APIRouter
from pydantic import BaseModel

from irrrl_gateway import __version__
from irrrl_gateway.core.config import settings

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    service: str
    version: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(service=settings.app_name, version=__version__)
