"""Application configuration."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # MinIO / S3 connection
    MINIO_ENDPOINT: str = "localhost"
    MINIO_PORT: int = Field(default=9000, ge=0, le=65535)
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_SECURE: bool = False
    MINIO_BUCKET_NAME: str = "default"

    # Application
    APP_NAME: str = "Object Storage Facade"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("MINIO_ENDPOINT")
    @classmethod
    def _endpoint_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("endpoint must not be empty")
        return value

    @field_validator("MINIO_ACCESS_KEY", "MINIO_SECRET_KEY")
    @classmethod
    def _credential_well_formed(cls, value: str) -> str:
        if not value:
            raise ValueError("credential must not be empty")
        if any(ch.isspace() for ch in value):
            raise ValueError("credential must not contain whitespace")
        return value


# Global settings instance
settings = Settings()
