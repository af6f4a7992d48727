"""Tests for connection settings validation."""

import pytest
from pydantic import ValidationError

from objectstore.core.config import Settings


def test_defaults():
    settings = Settings()

    assert settings.MINIO_PORT == 9000
    assert settings.MINIO_SECURE is False
    assert settings.MINIO_BUCKET_NAME


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("MINIO_ENDPOINT", "storage.internal")
    monkeypatch.setenv("MINIO_PORT", "9443")
    monkeypatch.setenv("MINIO_SECURE", "true")
    monkeypatch.setenv("minio_bucket_name", "media")

    settings = Settings()

    assert settings.MINIO_ENDPOINT == "storage.internal"
    assert settings.MINIO_PORT == 9443
    assert settings.MINIO_SECURE is True
    assert settings.MINIO_BUCKET_NAME == "media"


@pytest.mark.parametrize("port", [-1, 65536, 100000])
def test_invalid_port_fails_fast(port):
    with pytest.raises(ValidationError):
        Settings(MINIO_PORT=port)


@pytest.mark.parametrize("port", [0, 65535])
def test_port_bounds_are_inclusive(port):
    assert Settings(MINIO_PORT=port).MINIO_PORT == port


@pytest.mark.parametrize("field", ["MINIO_ACCESS_KEY", "MINIO_SECRET_KEY"])
@pytest.mark.parametrize("value", ["", "has space", "tab\tkey"])
def test_malformed_credentials_fail_fast(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_blank_endpoint_rejected():
    with pytest.raises(ValidationError):
        Settings(MINIO_ENDPOINT="   ")
