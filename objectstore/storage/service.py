"""Storage facade: guarded object-storage operations.

Every operation checks a precondition against the remote store, delegates a
single call to the adapter and maps the outcome to a ``StorageResult``.
Remote failures are logged and returned, never raised.

Existence checks and the actions that follow them are not atomic: two
callers creating the same bucket may both pass the check. Concurrent callers
get whatever consistency the remote store provides.
"""

from __future__ import annotations

import inspect
import logging
from enum import Enum
from typing import BinaryIO, Iterable, Iterator
from urllib.parse import quote

from objectstore.storage.contracts import (
    BucketInfo,
    ErrorKind,
    ObjectInfo,
    ObjectStorage,
    ResponseSink,
    StorageError,
    StorageResult,
)

logger = logging.getLogger(__name__)

MIN_EXPIRY_SECONDS = 1
MAX_EXPIRY_SECONDS = 7 * 24 * 3600
CHUNK_SIZE = 1024


class ExpiryUnit(str, Enum):
    """Time unit for presigned URL expiry values."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self]


_UNIT_SECONDS = {
    ExpiryUnit.SECONDS: 1,
    ExpiryUnit.MINUTES: 60,
    ExpiryUnit.HOURS: 3600,
    ExpiryUnit.DAYS: 86400,
}


def content_disposition(filename: str) -> str:
    """Build an ``attachment`` Content-Disposition value for any filename."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def close_stream(stream: BinaryIO) -> None:
    """Close a read stream and hand its connection back to the pool."""
    stream.close()
    release = getattr(stream, "release_conn", None)
    if release is not None:
        release()


def iter_chunks(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield ``stream`` in fixed-size chunks, always closing it.

    A read failure is logged and ends the iteration; bytes already yielded
    stay with the consumer.
    """
    try:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            yield chunk
    except Exception as exc:
        logger.error("Streaming aborted after read failure: %s", exc, exc_info=True)
    finally:
        close_stream(stream)


def _check_expiry(op: str, bucket: str, key: str, ttl_seconds: int) -> StorageError | None:
    if MIN_EXPIRY_SECONDS <= ttl_seconds <= MAX_EXPIRY_SECONDS:
        return None
    return StorageError(
        op=op,
        bucket=bucket,
        key=key,
        message=f"expires must be in range of {MIN_EXPIRY_SECONDS} to {MAX_EXPIRY_SECONDS}",
        kind=ErrorKind.INVALID_ARGUMENT,
    )


class StorageService:
    """Stateless facade over an ``ObjectStorage`` adapter."""

    def __init__(self, storage: ObjectStorage, default_bucket: str | None = None):
        self._storage = storage
        self.default_bucket = default_bucket

    @property
    def storage(self) -> ObjectStorage:
        return self._storage

    # -------
    # Helpers
    # -------
    @staticmethod
    def _fail(error: StorageError, empty):
        logger.warning("%s", error)
        return StorageResult.failure(error, empty)

    def _require_bucket(self, op: str, bucket: str, key: str | None = None) -> StorageError | None:
        """Return an error when the bucket is missing or cannot be queried."""
        try:
            if self._storage.bucket_exists(bucket):
                return None
        except StorageError as exc:
            return exc
        return StorageError(
            op=op, bucket=bucket, key=key, message="bucket does not exist", kind=ErrorKind.NOT_FOUND
        )

    def _readable_stat(self, op: str, bucket: str, key: str) -> tuple[ObjectInfo | None, StorageError | None]:
        error = self._require_bucket(op, bucket, key)
        if error is not None:
            return None, error
        try:
            return self._storage.stat_object(bucket, key), None
        except StorageError as exc:
            return None, exc

    def _uploaded(self, bucket: str, key: str) -> StorageResult[bool]:
        try:
            stat = self._storage.stat_object(bucket, key)
        except StorageError as exc:
            return self._fail(exc, False)
        return StorageResult.success(stat.size > 0)

    # -------
    # Buckets
    # -------
    def bucket_exists(self, bucket: str) -> StorageResult[bool]:
        try:
            return StorageResult.success(self._storage.bucket_exists(bucket))
        except StorageError as exc:
            return self._fail(exc, False)

    def make_bucket(self, bucket: str) -> StorageResult[bool]:
        """Create ``bucket``; ``False`` when it already existed."""
        try:
            if self._storage.bucket_exists(bucket):
                return StorageResult.success(False)
            self._storage.make_bucket(bucket)
        except StorageError as exc:
            return self._fail(exc, False)
        logger.info("Created bucket %s", bucket)
        return StorageResult.success(True)

    def list_buckets(self) -> StorageResult[list[BucketInfo]]:
        try:
            return StorageResult.success(self._storage.list_buckets())
        except StorageError as exc:
            return self._fail(exc, [])

    def list_bucket_names(self) -> StorageResult[list[str]]:
        result = self.list_buckets()
        return StorageResult(value=[b.name for b in result.value], error=result.error)

    def remove_bucket(self, bucket: str) -> StorageResult[bool]:
        """Remove ``bucket`` only if it holds no object with content.

        A bucket containing any non-empty object is left untouched and
        ``False`` is returned.
        """
        error = self._require_bucket("remove_bucket", bucket)
        if error is not None:
            return self._fail(error, False)
        try:
            if any(obj.size > 0 for obj in self._storage.list_objects(bucket)):
                logger.info("Refusing to remove non-empty bucket %s", bucket)
                return StorageResult.success(False)
            self._storage.remove_bucket(bucket)
            still_there = self._storage.bucket_exists(bucket)
        except StorageError as exc:
            return self._fail(exc, False)
        if not still_there:
            logger.info("Removed bucket %s", bucket)
        return StorageResult.success(not still_there)

    # -------
    # Listing
    # -------
    def list_objects(self, bucket: str) -> StorageResult[list[ObjectInfo]]:
        error = self._require_bucket("list_objects", bucket)
        if error is not None:
            return self._fail(error, [])
        try:
            return StorageResult.success(list(self._storage.list_objects(bucket)))
        except StorageError as exc:
            return self._fail(exc, [])

    def list_object_names(self, bucket: str) -> StorageResult[list[str]]:
        result = self.list_objects(bucket)
        return StorageResult(value=[obj.key for obj in result.value], error=result.error)

    # -------
    # Uploads
    # -------
    def upload_file(
        self, bucket: str, key: str, file_path: str, content_type: str | None = None
    ) -> StorageResult[bool]:
        """Upload a local file; ``True`` once the stored object has content."""
        error = self._require_bucket("upload_file", bucket, key)
        if error is not None:
            return self._fail(error, False)
        try:
            self._storage.fput_object(bucket, key, file_path, content_type=content_type)
        except StorageError as exc:
            return self._fail(exc, False)
        return self._uploaded(bucket, key)

    def upload_stream(
        self,
        bucket: str,
        key: str,
        stream: BinaryIO,
        content_type: str | None = None,
        length: int = -1,
    ) -> StorageResult[bool]:
        """Upload from a readable stream. ``length=-1`` means unknown size."""
        error = self._require_bucket("upload_stream", bucket, key)
        if error is not None:
            return self._fail(error, False)
        try:
            self._storage.put_stream(bucket, key, stream, length=length, content_type=content_type)
        except StorageError as exc:
            return self._fail(exc, False)
        return self._uploaded(bucket, key)

    # ---------
    # Downloads
    # ---------
    def get_object(self, bucket: str, key: str) -> StorageResult[BinaryIO | None]:
        """Open a read stream. ``None`` for an empty object.

        The caller owns the stream; pass it to ``close_stream`` when done.
        """
        return self.get_object_range(bucket, key, 0, None)

    def get_object_range(
        self, bucket: str, key: str, offset: int, length: int | None = None
    ) -> StorageResult[BinaryIO | None]:
        """Open a read stream starting at ``offset`` for ``length`` bytes.

        ``length=None`` reads to the end of the object.
        """
        if offset < 0 or (length is not None and length < 1):
            return self._fail(
                StorageError(
                    op="get_object",
                    bucket=bucket,
                    key=key,
                    message=f"invalid range offset={offset} length={length}",
                    kind=ErrorKind.INVALID_ARGUMENT,
                ),
                None,
            )
        stat, error = self._readable_stat("get_object", bucket, key)
        if error is not None:
            return self._fail(error, None)
        if stat.size <= 0:
            return StorageResult.success(None)
        try:
            return StorageResult.success(
                self._storage.open_object(bucket, key, offset=offset, length=length)
            )
        except StorageError as exc:
            return self._fail(exc, None)

    def download_file(self, bucket: str, key: str, file_path: str) -> StorageResult[bool]:
        stat, error = self._readable_stat("download_file", bucket, key)
        if error is not None:
            return self._fail(error, False)
        if stat.size <= 0:
            return StorageResult.success(False)
        try:
            self._storage.fget_object(bucket, key, file_path)
        except StorageError as exc:
            return self._fail(exc, False)
        return StorageResult.success(True)

    def stream_to_response(
        self,
        bucket: str,
        key: str,
        sink: ResponseSink,
        filename: str | None = None,
        chunk_size: int = CHUNK_SIZE,
    ) -> StorageResult[int]:
        """Copy an object into an HTTP response sink.

        Sets ``Content-Disposition`` to ``filename`` (or the key's basename)
        and returns the number of bytes written. Nothing is raised: a failure
        after the first write leaves a partial body in the sink. Read
        failures are handled by ``iter_chunks``.
        """
        try:
            stream = self._storage.open_object(bucket, key)
        except StorageError as exc:
            logger.error("Download of %s/%s failed: %s", bucket, key, exc)
            return StorageResult.failure(exc, 0)

        chunks = iter_chunks(stream, chunk_size)
        written = 0
        try:
            sink.set_header("Content-Disposition", content_disposition(filename or key.rsplit("/", 1)[-1]))
            for chunk in chunks:
                sink.write(chunk)
                written += len(chunk)
        except Exception as exc:
            logger.error("Download of %s/%s aborted after %d bytes", bucket, key, written, exc_info=True)
            error = StorageError(
                op="stream_to_response",
                bucket=bucket,
                key=key,
                message=str(exc),
                kind=ErrorKind.CONNECTIVITY,
            )
            return StorageResult(value=written, error=error)
        finally:
            # An unstarted generator skips its own cleanup on close().
            if inspect.getgeneratorstate(chunks) == inspect.GEN_CREATED:
                close_stream(stream)
            chunks.close()
        return StorageResult.success(written)

    # --------
    # Removals
    # --------
    def remove_object(self, bucket: str, key: str) -> StorageResult[bool]:
        error = self._require_bucket("remove_object", bucket, key)
        if error is not None:
            return self._fail(error, False)
        try:
            self._storage.remove_object(bucket, key)
        except StorageError as exc:
            return self._fail(exc, False)
        return StorageResult.success(True)

    def remove_objects(self, bucket: str, keys: Iterable[str]) -> StorageResult[list[str]]:
        """Delete several objects and return the keys that were not deleted.

        Keys that do not exist are reported as failed; the rest are removed
        in one batch call.
        """
        error = self._require_bucket("remove_objects", bucket)
        if error is not None:
            return self._fail(error, [])

        present: list[str] = []
        failed: list[str] = []
        try:
            for key in dict.fromkeys(keys):
                try:
                    self._storage.stat_object(bucket, key)
                except StorageError as exc:
                    if exc.kind is not ErrorKind.NOT_FOUND:
                        raise
                    failed.append(key)
                else:
                    present.append(key)
            if present:
                failed.extend(self._storage.remove_objects(bucket, present))
        except StorageError as exc:
            return self._fail(exc, [])

        if not failed:
            return StorageResult.success([])
        error = StorageError(
            op="remove_objects",
            bucket=bucket,
            key=None,
            message=f"{len(failed)} object(s) not deleted: {', '.join(failed)}",
            kind=ErrorKind.PARTIAL_FAILURE,
        )
        logger.warning("%s", error)
        return StorageResult(value=failed, error=error)

    # ----
    # URLs
    # ----
    def presigned_get_url(
        self, bucket: str, key: str, expires: int = MAX_EXPIRY_SECONDS
    ) -> StorageResult[str]:
        """Presigned GET URL valid for ``expires`` seconds (1 to 7 days)."""
        error = _check_expiry("presign_get", bucket, key, expires)
        if error is None:
            error = self._require_bucket("presign_get", bucket, key)
        if error is not None:
            return self._fail(error, "")
        try:
            return StorageResult.success(self._storage.presign("GET", bucket, key, expires))
        except StorageError as exc:
            return self._fail(exc, "")

    def presigned_put_url(
        self,
        bucket: str,
        key: str,
        expires: int = 7,
        unit: ExpiryUnit = ExpiryUnit.DAYS,
    ) -> StorageResult[str]:
        """Presigned PUT URL valid for ``expires`` ``unit``s (1 second to 7 days)."""
        ttl_seconds = expires * ExpiryUnit(unit).seconds
        error = _check_expiry("presign_put", bucket, key, ttl_seconds)
        if error is None:
            error = self._require_bucket("presign_put", bucket, key)
        if error is not None:
            return self._fail(error, "")
        try:
            return StorageResult.success(self._storage.presign("PUT", bucket, key, ttl_seconds))
        except StorageError as exc:
            return self._fail(exc, "")

    def object_url(self, bucket: str, key: str) -> StorageResult[str]:
        """Direct, non-expiring URL of an object."""
        error = self._require_bucket("object_url", bucket, key)
        if error is not None:
            return self._fail(error, "")
        return StorageResult.success(self._storage.object_url(bucket, key))

    # --------
    # Metadata
    # --------
    def stat_object(self, bucket: str, key: str) -> StorageResult[ObjectInfo | None]:
        stat, error = self._readable_stat("stat_object", bucket, key)
        if error is not None:
            return self._fail(error, None)
        return StorageResult.success(stat)


__all__ = [
    "CHUNK_SIZE",
    "MAX_EXPIRY_SECONDS",
    "ExpiryUnit",
    "StorageService",
    "close_stream",
    "content_disposition",
    "iter_chunks",
]
