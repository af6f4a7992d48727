"""Helpers for turning storage results into HTTP responses."""

from fastapi import HTTPException

from objectstore.storage.contracts import ErrorKind, StorageError, StorageResult

_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.AUTHENTICATION: 403,
    ErrorKind.CONNECTIVITY: 503,
}


def status_for(error: StorageError) -> int:
    return _STATUS_BY_KIND.get(error.kind, 502)


def error_detail(error: StorageError) -> dict[str, str]:
    return {"kind": error.kind.value, "message": error.message}


def unwrap_or_raise(result: StorageResult):
    """Return the result value or raise an ``HTTPException`` for its error kind."""
    if result.ok:
        return result.value
    raise HTTPException(status_code=status_for(result.error), detail=error_detail(result.error))
