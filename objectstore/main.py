"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from objectstore.core.config import settings
from objectstore.core.logging import setup_logging
from objectstore.routes import buckets_router, health_router, objects_router
from objectstore.routes.utils import error_detail, status_for
from objectstore.storage.contracts import StorageError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging on startup; the storage client is built on first use."""
    setup_logging(settings.LOG_LEVEL)
    logger.info(
        "Object storage at %s:%s (secure=%s), default bucket %s",
        settings.MINIO_ENDPOINT,
        settings.MINIO_PORT,
        settings.MINIO_SECURE,
        settings.MINIO_BUCKET_NAME,
    )
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Map storage failures raised outside the facade (e.g. client setup)."""
    logger.error("%s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_for(exc), content={"detail": error_detail(exc)})


# Register routers
app.include_router(health_router)
app.include_router(buckets_router)
app.include_router(objects_router)
