"""API router package for endpoint composition."""

from .batch import api_create_batch_router
from .health import api_create_health_router
from .jobs import api_create_jobs_router

__all__ = ["api_create_batch_router", "api_create_health_router", "api_create_jobs_router"]
