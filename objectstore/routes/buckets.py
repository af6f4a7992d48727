"""Bucket endpoints."""

import logging

from fastapi import APIRouter, Depends, Response

from objectstore.deps import get_storage_service
from objectstore.routes.utils import unwrap_or_raise
from objectstore.schemas.api import BucketListResponse, BucketResponse
from objectstore.storage.service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/buckets", tags=["buckets"])


@router.get("", response_model=BucketListResponse)
def list_buckets(service: StorageService = Depends(get_storage_service)):
    """List all buckets."""
    buckets = unwrap_or_raise(service.list_buckets())
    return BucketListResponse(items=[BucketResponse.model_validate(b) for b in buckets])


@router.head("/{bucket}")
def bucket_exists(bucket: str, service: StorageService = Depends(get_storage_service)):
    """200 when the bucket exists, 404 otherwise."""
    exists = unwrap_or_raise(service.bucket_exists(bucket))
    return Response(status_code=200 if exists else 404)


@router.put("/{bucket}")
def create_bucket(bucket: str, service: StorageService = Depends(get_storage_service)):
    """Create a bucket. 201 if created, 200 if it already existed."""
    created = unwrap_or_raise(service.make_bucket(bucket))
    return Response(status_code=201 if created else 200)


@router.delete("/{bucket}")
def remove_bucket(bucket: str, service: StorageService = Depends(get_storage_service)):
    """Remove an empty bucket. 409 when it still holds objects."""
    removed = unwrap_or_raise(service.remove_bucket(bucket))
    if not removed:
        logger.info("Bucket %s not removed: not empty", bucket)
        return Response(status_code=409)
    return Response(status_code=204)
