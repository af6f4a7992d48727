"""Object endpoints: listing, upload, download, removal and URLs."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from objectstore.deps import get_storage_service
from objectstore.routes.utils import unwrap_or_raise
from objectstore.schemas.api import (
    DeleteObjectsRequest,
    DeleteObjectsResponse,
    ObjectListResponse,
    ObjectResponse,
    UrlResponse,
)
from objectstore.storage.contracts import ErrorKind
from objectstore.storage.service import (
    MAX_EXPIRY_SECONDS,
    ExpiryUnit,
    StorageService,
    content_disposition,
    iter_chunks,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/buckets/{bucket}", tags=["objects"])


@router.get("/objects", response_model=ObjectListResponse)
def list_objects(bucket: str, service: StorageService = Depends(get_storage_service)):
    """List every object in the bucket."""
    objects = unwrap_or_raise(service.list_objects(bucket))
    return ObjectListResponse(
        bucket=bucket, items=[ObjectResponse.model_validate(obj) for obj in objects]
    )


@router.put("/objects/{key:path}", status_code=201)
def upload_object(
    bucket: str,
    key: str,
    file: UploadFile,
    service: StorageService = Depends(get_storage_service),
):
    """Upload a multipart form file under ``key``."""
    length = file.size if file.size is not None else -1
    stored = unwrap_or_raise(
        service.upload_stream(bucket, key, file.file, content_type=file.content_type, length=length)
    )
    if not stored:
        return JSONResponse(status_code=422, content={"detail": "stored object is empty"})
    return {"bucket": bucket, "key": key}


@router.get("/objects/{key:path}")
def download_object(
    bucket: str,
    key: str,
    filename: Optional[str] = None,
    offset: int = Query(0, ge=0),
    length: Optional[int] = Query(None, ge=1),
    service: StorageService = Depends(get_storage_service),
):
    """Stream an object as an attachment, optionally a byte range of it."""
    stream = unwrap_or_raise(service.get_object_range(bucket, key, offset, length))
    headers = {"Content-Disposition": content_disposition(filename or key.rsplit("/", 1)[-1])}
    if stream is None:
        return Response(content=b"", media_type="application/octet-stream", headers=headers)
    return StreamingResponse(
        iter_chunks(stream), media_type="application/octet-stream", headers=headers
    )


@router.delete("/objects/{key:path}", status_code=204)
def remove_object(bucket: str, key: str, service: StorageService = Depends(get_storage_service)):
    unwrap_or_raise(service.remove_object(bucket, key))
    return Response(status_code=204)


@router.post("/delete", response_model=DeleteObjectsResponse)
def remove_objects(
    bucket: str,
    body: DeleteObjectsRequest,
    service: StorageService = Depends(get_storage_service),
):
    """Batch delete. Responds 207 with the failed keys on partial failure."""
    result = service.remove_objects(bucket, body.keys)
    if result.kind is ErrorKind.PARTIAL_FAILURE:
        return JSONResponse(status_code=207, content={"failed": result.value})
    return DeleteObjectsResponse(failed=unwrap_or_raise(result))


@router.get("/stat/{key:path}", response_model=ObjectResponse)
def stat_object(bucket: str, key: str, service: StorageService = Depends(get_storage_service)):
    return ObjectResponse.model_validate(unwrap_or_raise(service.stat_object(bucket, key)))


@router.get("/presign/{key:path}", response_model=UrlResponse)
def presign_object(
    bucket: str,
    key: str,
    method: Literal["GET", "PUT"] = "GET",
    expires: int = MAX_EXPIRY_SECONDS,
    unit: ExpiryUnit = ExpiryUnit.SECONDS,
    service: StorageService = Depends(get_storage_service),
):
    """Presigned URL for downloading (GET) or uploading (PUT) one object."""
    ttl_seconds = expires * unit.seconds
    if method == "GET":
        url = unwrap_or_raise(service.presigned_get_url(bucket, key, ttl_seconds))
    else:
        url = unwrap_or_raise(service.presigned_put_url(bucket, key, expires, unit))
    return UrlResponse(url=url, method=method, expires_in=ttl_seconds)


@router.get("/url/{key:path}", response_model=UrlResponse)
def object_url(bucket: str, key: str, service: StorageService = Depends(get_storage_service)):
    """Direct, non-expiring object URL."""
    return UrlResponse(url=unwrap_or_raise(service.object_url(bucket, key)))
