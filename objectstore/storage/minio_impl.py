"""MinIO-backed implementation of the storage adapter."""

from __future__ import annotations

from datetime import timedelta
from typing import BinaryIO, Iterable
from urllib.parse import quote

from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import InvalidResponseError, S3Error, ServerError
from urllib3.exceptions import HTTPError

from objectstore.storage.contracts import (
    BucketInfo,
    ErrorKind,
    ObjectInfo,
    ObjectStorage,
    StorageError,
)

# Part size used when the upload length is unknown (length=-1).
UNKNOWN_LENGTH_PART_SIZE = 10 * 1024 * 1024

_NOT_FOUND_CODES = {"NoSuchBucket", "NoSuchKey", "NoSuchObject", "ResourceNotFound"}
_AUTH_CODES = {
    "AccessDenied",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "InvalidToken",
}
_INVALID_CODES = {
    "InvalidBucketName",
    "InvalidObjectName",
    "KeyTooLongError",
    "InvalidArgument",
    "InvalidRange",
}


def _classify(exc: Exception) -> ErrorKind:
    if isinstance(exc, S3Error):
        if exc.code in _NOT_FOUND_CODES:
            return ErrorKind.NOT_FOUND
        if exc.code in _AUTH_CODES:
            return ErrorKind.AUTHENTICATION
        if exc.code in _INVALID_CODES:
            return ErrorKind.INVALID_ARGUMENT
        return ErrorKind.SERVER
    if isinstance(exc, (ServerError, InvalidResponseError)):
        return ErrorKind.SERVER
    if isinstance(exc, (HTTPError, OSError)):
        return ErrorKind.CONNECTIVITY
    if isinstance(exc, ValueError):
        return ErrorKind.INVALID_ARGUMENT
    return ErrorKind.UNKNOWN


def _wrap_error(op: str, bucket: str | None, key: str | None, exc: Exception) -> StorageError:
    return StorageError(op=op, bucket=bucket, key=key, message=str(exc), kind=_classify(exc))


class MinioStorage(ObjectStorage):
    """Object storage adapter backed by the MinIO SDK.

    Each method performs exactly one SDK call and converts any exception it
    raises into a ``StorageError``.
    """

    def __init__(self, client: Minio, endpoint_url: str):
        self._client = client
        self._endpoint_url = endpoint_url.rstrip("/")

    @property
    def client(self) -> Minio:
        return self._client

    # -------
    # Buckets
    # -------
    def bucket_exists(self, bucket: str) -> bool:
        try:
            return self._client.bucket_exists(bucket_name=bucket)
        except Exception as exc:
            raise _wrap_error("bucket_exists", bucket, None, exc) from exc

    def make_bucket(self, bucket: str) -> None:
        try:
            self._client.make_bucket(bucket_name=bucket)
        except Exception as exc:
            raise _wrap_error("make_bucket", bucket, None, exc) from exc

    def list_buckets(self) -> list[BucketInfo]:
        try:
            buckets = self._client.list_buckets()
        except Exception as exc:
            raise _wrap_error("list_buckets", None, None, exc) from exc
        return [BucketInfo(name=b.name, creation_date=b.creation_date) for b in buckets]

    def remove_bucket(self, bucket: str) -> None:
        try:
            self._client.remove_bucket(bucket_name=bucket)
        except Exception as exc:
            raise _wrap_error("remove_bucket", bucket, None, exc) from exc

    # -------
    # Objects
    # -------
    def list_objects(self, bucket: str) -> list[ObjectInfo]:
        # The SDK pages lazily, so errors surface while iterating.
        try:
            return [
                ObjectInfo(
                    bucket=bucket,
                    key=obj.object_name,
                    size=obj.size or 0,
                    content_type=obj.content_type,
                    etag=obj.etag,
                    last_modified=obj.last_modified,
                )
                for obj in self._client.list_objects(bucket_name=bucket, recursive=True)
                if not obj.is_dir
            ]
        except Exception as exc:
            raise _wrap_error("list_objects", bucket, None, exc) from exc

    def fput_object(
        self, bucket: str, key: str, file_path: str, *, content_type: str | None = None
    ) -> None:
        kwargs = {"content_type": content_type} if content_type else {}
        try:
            self._client.fput_object(
                bucket_name=bucket, object_name=key, file_path=file_path, **kwargs
            )
        except Exception as exc:
            raise _wrap_error("fput_object", bucket, key, exc) from exc

    def put_stream(
        self,
        bucket: str,
        key: str,
        stream: BinaryIO,
        *,
        length: int = -1,
        content_type: str | None = None,
    ) -> None:
        part_size = UNKNOWN_LENGTH_PART_SIZE if length < 0 else 0
        try:
            self._client.put_object(
                bucket_name=bucket,
                object_name=key,
                data=stream,
                length=length,
                content_type=content_type or "application/octet-stream",
                part_size=part_size,
            )
        except Exception as exc:
            raise _wrap_error("put_object", bucket, key, exc) from exc

    def open_object(
        self, bucket: str, key: str, *, offset: int = 0, length: int | None = None
    ) -> BinaryIO:
        """Open a read stream; the caller must close it and release its connection."""
        try:
            # length=0 tells the SDK to read to the end of the object
            return self._client.get_object(
                bucket_name=bucket, object_name=key, offset=offset, length=length or 0
            )
        except Exception as exc:
            raise _wrap_error("get_object", bucket, key, exc) from exc

    def fget_object(self, bucket: str, key: str, file_path: str) -> None:
        try:
            self._client.fget_object(bucket_name=bucket, object_name=key, file_path=file_path)
        except Exception as exc:
            raise _wrap_error("fget_object", bucket, key, exc) from exc

    def stat_object(self, bucket: str, key: str) -> ObjectInfo:
        try:
            stat = self._client.stat_object(bucket_name=bucket, object_name=key)
        except Exception as exc:
            raise _wrap_error("stat_object", bucket, key, exc) from exc
        return ObjectInfo(
            bucket=bucket,
            key=key,
            size=stat.size or 0,
            content_type=stat.content_type,
            etag=stat.etag,
            last_modified=stat.last_modified,
        )

    def remove_object(self, bucket: str, key: str) -> None:
        try:
            self._client.remove_object(bucket_name=bucket, object_name=key)
        except Exception as exc:
            raise _wrap_error("remove_object", bucket, key, exc) from exc

    def remove_objects(self, bucket: str, keys: Iterable[str]) -> list[str]:
        """Batch delete; returns the names the server refused to delete."""
        delete_list = [DeleteObject(key) for key in keys]
        try:
            # Deletion happens while the result iterator is consumed.
            errors = self._client.remove_objects(bucket_name=bucket, delete_object_list=delete_list)
            return [error.name for error in errors]
        except Exception as exc:
            raise _wrap_error("remove_objects", bucket, None, exc) from exc

    # ----
    # URLs
    # ----
    def presign(self, method: str, bucket: str, key: str, ttl_seconds: int) -> str:
        try:
            return self._client.get_presigned_url(
                method=method,
                bucket_name=bucket,
                object_name=key,
                expires=timedelta(seconds=ttl_seconds),
            )
        except Exception as exc:
            raise _wrap_error(f"presign_{method.lower()}", bucket, key, exc) from exc

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self._endpoint_url}/{quote(bucket)}/{quote(key)}"


__all__ = ["MinioStorage", "UNKNOWN_LENGTH_PART_SIZE"]
