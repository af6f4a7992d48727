"""Shared dependencies for FastAPI routes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from objectstore.storage.contracts import StorageError

if TYPE_CHECKING:
    from objectstore.storage.service import StorageService

logger = logging.getLogger(__name__)

_service: "StorageService | None" = None


def get_storage_service() -> "StorageService":
    """Get or lazily initialize the process-wide storage service.

    Lazy initialization avoids failures at import time when MinIO is unavailable.
    A failed build is not cached; the next call tries again.
    """
    global _service
    if _service is None:
        from objectstore.core.config import settings
        from objectstore.storage.factory import build_storage
        from objectstore.storage.service import StorageService

        _service = StorageService(build_storage(settings), default_bucket=settings.MINIO_BUCKET_NAME)
    return _service


def get_storage_service_or_error() -> "StorageService | StorageError":
    """Like ``get_storage_service`` but returns the build failure instead of raising."""
    try:
        return get_storage_service()
    except StorageError as exc:
        logger.warning("Storage service unavailable: %s", exc)
        return exc


def reset_storage_service() -> None:
    """Drop the cached service so the next call rebuilds it."""
    global _service
    _service = None


__all__ = ["get_storage_service", "get_storage_service_or_error", "reset_storage_service"]
