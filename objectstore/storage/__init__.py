"""Storage package: object storage adapter and facade."""

from objectstore.storage.contracts import (
    BucketInfo,
    ErrorKind,
    ObjectInfo,
    ObjectStorage,
    StorageError,
    StorageResult,
)
from objectstore.storage.minio_impl import MinioStorage
from objectstore.storage.service import ExpiryUnit, StorageService

__all__ = [
    "BucketInfo",
    "ErrorKind",
    "ExpiryUnit",
    "MinioStorage",
    "ObjectInfo",
    "ObjectStorage",
    "StorageError",
    "StorageResult",
    "StorageService",
]
