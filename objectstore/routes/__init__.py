"""API routes package."""

from objectstore.routes.buckets import router as buckets_router
from objectstore.routes.health import router as health_router
from objectstore.routes.objects import router as objects_router

__all__ = ["buckets_router", "health_router", "objects_router"]
