"""Factory for building the shared client and storage from settings."""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from minio import Minio

from objectstore.core.config import Settings
from objectstore.storage.minio_impl import MinioStorage

logger = logging.getLogger(__name__)


def _normalize_endpoint(endpoint: str, secure: bool) -> tuple[str, bool]:
    """Strip an optional scheme, port and path from the endpoint.

    The port always comes from ``MINIO_PORT``.

    Returns:
        Tuple of (host, secure_flag). An explicit ``https://`` scheme forces
        ``secure`` on, ``http://`` forces it off.
    """
    if "://" not in endpoint:
        return urlparse(f"//{endpoint}").hostname or "", secure
    parsed = urlparse(endpoint)
    return parsed.hostname or "", parsed.scheme == "https"


def build_client(settings: Settings) -> Minio:
    """Construct the MinIO client bound to the configured endpoint."""
    host, secure = _normalize_endpoint(settings.MINIO_ENDPOINT, settings.MINIO_SECURE)
    return Minio(
        f"{host}:{settings.MINIO_PORT}",
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=secure,
    )


def endpoint_url(settings: Settings) -> str:
    """Base URL objects are addressed under, e.g. ``http://localhost:9000``."""
    host, secure = _normalize_endpoint(settings.MINIO_ENDPOINT, settings.MINIO_SECURE)
    scheme = "https" if secure else "http"
    return f"{scheme}://{host}:{settings.MINIO_PORT}"


def build_storage(settings: Settings, *, ensure_default_bucket: bool = True) -> MinioStorage:
    """Build MinioStorage from settings and make sure the default bucket exists."""
    storage = MinioStorage(build_client(settings), endpoint_url(settings))

    if ensure_default_bucket:
        bucket = settings.MINIO_BUCKET_NAME
        if not storage.bucket_exists(bucket):
            storage.make_bucket(bucket)
            logger.info("Created default bucket %s", bucket)

    return storage


__all__ = ["build_client", "build_storage", "endpoint_url"]
