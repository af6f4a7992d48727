"""API schemas."""

from objectstore.schemas.api import (
    BucketListResponse,
    BucketResponse,
    DeleteObjectsRequest,
    DeleteObjectsResponse,
    ObjectListResponse,
    ObjectResponse,
    UrlResponse,
)

__all__ = [
    "BucketListResponse",
    "BucketResponse",
    "DeleteObjectsRequest",
    "DeleteObjectsResponse",
    "ObjectListResponse",
    "ObjectResponse",
    "UrlResponse",
]
