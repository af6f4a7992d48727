"""API request and response models for bucket and object endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BucketResponse(BaseModel):
    """Single bucket descriptor."""

    name: str
    creation_date: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BucketListResponse(BaseModel):
    items: list[BucketResponse]


class ObjectResponse(BaseModel):
    """Object metadata."""

    bucket: str
    key: str
    size: int
    content_type: Optional[str] = None
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ObjectListResponse(BaseModel):
    bucket: str
    items: list[ObjectResponse]


class UrlResponse(BaseModel):
    """A presigned or direct object URL."""

    url: str
    method: str = "GET"
    expires_in: Optional[int] = None


class DeleteObjectsRequest(BaseModel):
    keys: list[str] = Field(min_length=1)


class DeleteObjectsResponse(BaseModel):
    """Keys that could not be deleted; empty when all succeeded."""

    failed: list[str]
