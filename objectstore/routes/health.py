"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from objectstore.deps import get_storage_service_or_error
from objectstore.storage.contracts import StorageError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Liveness check."""
    return {"status": "ok"}


@router.get("/health/ready")
def readiness_check(service=Depends(get_storage_service_or_error)):
    """Readiness check - checks the default bucket is reachable."""
    all_ok = False
    if isinstance(service, StorageError):
        checks = {"storage": f"error: {service.message}"}
    elif service.default_bucket is None:
        checks = {"storage": "not configured"}
    else:
        bucket = service.default_bucket
        result = service.bucket_exists(bucket)
        if not result.ok:
            checks = {"storage": f"error: {result.error.message}"}
        elif not result.value:
            checks = {"storage": f"bucket {bucket} missing"}
        else:
            checks = {"storage": "ok"}
            all_ok = True

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
    )
