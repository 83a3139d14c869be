from fastapi import APIRouter

from .applications import applications_router
from .health import health_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(applications_router, tags=["Applications"])
