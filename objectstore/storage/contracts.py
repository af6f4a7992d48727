"""Storage interfaces, value types and error types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO, Generic, Iterable, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Coarse classification of a storage failure."""

    CONNECTIVITY = "connectivity"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    PARTIAL_FAILURE = "partial_failure"
    SERVER = "server"
    UNKNOWN = "unknown"


class StorageError(Exception):
    """Wraps underlying storage exceptions with operation context."""

    def __init__(
        self,
        op: str,
        bucket: str | None,
        key: str | None,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
    ):
        self.op = op
        self.bucket = bucket
        self.key = key
        self.message = message
        self.kind = kind
        super().__init__(self.__str__())

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        bucket_repr = self.bucket or "<unknown>"
        key_repr = self.key or "<unknown>"
        return (
            f"{self.op} failed for bucket={bucket_repr} key={key_repr} "
            f"[{self.kind.value}]: {self.message}"
        )


@dataclass(frozen=True, slots=True)
class StorageResult(Generic[T]):
    """Outcome of a facade operation.

    ``value`` always holds something usable: on failure it is the operation's
    empty value (``False``, ``[]``, ``""`` or ``None``) and ``error`` says why.
    """

    value: T
    error: StorageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> T:
        """Return the value, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T) -> "StorageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StorageError, empty: T) -> "StorageResult[T]":
        return cls(value=empty, error=error)


@dataclass(frozen=True, slots=True)
class BucketInfo:
    """Bucket descriptor as reported by the server."""

    name: str
    creation_date: datetime | None = None


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    """Object metadata from a stat or listing."""

    bucket: str
    key: str
    size: int
    content_type: str | None = None
    etag: str | None = None
    last_modified: datetime | None = None


@runtime_checkable
class ObjectStorage(Protocol):
    """Contract for the adapter the facade delegates to.

    Implementations raise ``StorageError`` for every remote failure.
    """

    def bucket_exists(self, bucket: str) -> bool:
        ...

    def make_bucket(self, bucket: str) -> None:
        ...

    def list_buckets(self) -> list[BucketInfo]:
        ...

    def remove_bucket(self, bucket: str) -> None:
        ...

    def list_objects(self, bucket: str) -> Iterable[ObjectInfo]:
        ...

    def fput_object(
        self, bucket: str, key: str, file_path: str, *, content_type: str | None = None
    ) -> None:
        ...

    def put_stream(
        self,
        bucket: str,
        key: str,
        stream: BinaryIO,
        *,
        length: int = -1,
        content_type: str | None = None,
    ) -> None:
        ...

    def open_object(
        self, bucket: str, key: str, *, offset: int = 0, length: int | None = None
    ) -> BinaryIO:
        ...

    def fget_object(self, bucket: str, key: str, file_path: str) -> None:
        ...

    def stat_object(self, bucket: str, key: str) -> ObjectInfo:
        ...

    def remove_object(self, bucket: str, key: str) -> None:
        ...

    def remove_objects(self, bucket: str, keys: Iterable[str]) -> list[str]:
        ...

    def presign(self, method: str, bucket: str, key: str, ttl_seconds: int) -> str:
        ...

    def object_url(self, bucket: str, key: str) -> str:
        ...


class ResponseSink(Protocol):
    """Minimal HTTP response surface used for streaming downloads."""

    def set_header(self, name: str, value: str) -> None:
        ...

    def write(self, chunk: bytes) -> object:
        ...


__all__ = [
    "ErrorKind",
    "StorageError",
    "StorageResult",
    "BucketInfo",
    "ObjectInfo",
    "ObjectStorage",
    "ResponseSink",
]
