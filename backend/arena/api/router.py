"""Main API router — combines all endpoint routers."""

from fastapi import APIRouter

from arena.api.applications import router as applications_router
from arena.api.health import router as health_router
from arena.api.validation import router as validation_router

api_router = APIRouter()

# Health check
api_router.include_router(health_router, tags=["Health"])

# Application submission, options, live field validation
api_router.include_router(applications_router, tags=["Applications"])

# Standalone email / name checks
api_router.include_router(validation_router, tags=["Validation"])
