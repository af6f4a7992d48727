"""Pytest configuration and fixtures."""

import io
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from objectstore.deps import get_storage_service
from objectstore.main import app
from objectstore.storage.contracts import BucketInfo, ErrorKind, ObjectInfo, StorageError
from objectstore.storage.service import StorageService


class InMemoryStorage:
    """In-memory stand-in for MinioStorage with S3-like semantics."""

    def __init__(self):
        self.buckets: dict[str, dict[str, tuple[bytes, str | None]]] = {}
        self.calls: list[str] = []

    def _bucket(self, op, bucket, key=None):
        if bucket not in self.buckets:
            raise StorageError(op, bucket, key, "The specified bucket does not exist", ErrorKind.NOT_FOUND)
        return self.buckets[bucket]

    def _object(self, op, bucket, key):
        objects = self._bucket(op, bucket, key)
        if key not in objects:
            raise StorageError(op, bucket, key, "The specified key does not exist", ErrorKind.NOT_FOUND)
        return objects[key]

    def bucket_exists(self, bucket):
        self.calls.append("bucket_exists")
        return bucket in self.buckets

    def make_bucket(self, bucket):
        self.calls.append("make_bucket")
        if bucket in self.buckets:
            raise StorageError("make_bucket", bucket, None, "BucketAlreadyOwnedByYou", ErrorKind.SERVER)
        self.buckets[bucket] = {}

    def list_buckets(self):
        self.calls.append("list_buckets")
        return [BucketInfo(name=name, creation_date=datetime(2024, 1, 1, tzinfo=timezone.utc)) for name in self.buckets]

    def remove_bucket(self, bucket):
        self.calls.append("remove_bucket")
        if self._bucket("remove_bucket", bucket):
            raise StorageError("remove_bucket", bucket, None, "BucketNotEmpty", ErrorKind.SERVER)
        del self.buckets[bucket]

    def list_objects(self, bucket):
        self.calls.append("list_objects")
        return [
            ObjectInfo(bucket=bucket, key=key, size=len(data), content_type=ctype)
            for key, (data, ctype) in sorted(self._bucket("list_objects", bucket).items())
        ]

    def fput_object(self, bucket, key, file_path, *, content_type=None):
        self.calls.append("fput_object")
        objects = self._bucket("fput_object", bucket, key)
        with open(file_path, "rb") as fh:
            objects[key] = (fh.read(), content_type or "application/octet-stream")

    def put_stream(self, bucket, key, stream, *, length=-1, content_type=None):
        self.calls.append("put_stream")
        objects = self._bucket("put_object", bucket, key)
        data = stream.read() if length < 0 else stream.read(length)
        objects[key] = (data, content_type or "application/octet-stream")

    def open_object(self, bucket, key, *, offset=0, length=None):
        self.calls.append("open_object")
        data, _ = self._object("get_object", bucket, key)
        end = None if length is None else offset + length
        return io.BytesIO(data[offset:end])

    def fget_object(self, bucket, key, file_path):
        self.calls.append("fget_object")
        data, _ = self._object("fget_object", bucket, key)
        with open(file_path, "wb") as fh:
            fh.write(data)

    def stat_object(self, bucket, key):
        self.calls.append("stat_object")
        data, ctype = self._object("stat_object", bucket, key)
        return ObjectInfo(bucket=bucket, key=key, size=len(data), content_type=ctype)

    def remove_object(self, bucket, key):
        self.calls.append("remove_object")
        self._bucket("remove_object", bucket, key).pop(key, None)

    def remove_objects(self, bucket, keys):
        self.calls.append("remove_objects")
        objects = self._bucket("remove_objects", bucket)
        for key in keys:
            objects.pop(key, None)
        return []

    def presign(self, method, bucket, key, ttl_seconds):
        self.calls.append("presign")
        return f"http://minio.test/{bucket}/{key}?X-Amz-Expires={ttl_seconds}&method={method}"

    def object_url(self, bucket, key):
        return f"http://minio.test/{bucket}/{key}"


@pytest.fixture
def fake_storage():
    """Create an empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def service(fake_storage):
    """Create a storage service over the in-memory backend."""
    return StorageService(fake_storage, default_bucket="default")


@pytest.fixture
def api_client(service):
    """TestClient with the storage service dependency overridden."""
    app.dependency_overrides[get_storage_service] = lambda: service
    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
