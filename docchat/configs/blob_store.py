"""
Blob store configuration.

Selects between the local filesystem store (dev) and S3 (prod) for
materialized document payloads.

Dependencies: pydantic_settings
System role: Blob store configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BlobStoreSettings(BaseSettings):
    """Settings for document blob storage."""

    model_config = SettingsConfigDict(
        env_prefix="BLOB_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="local",
        description="Blob store type: 'local' for filesystem, 's3' for production",
    )
    local_root: str = Field(
        default="./uploads",
        description="Root directory for the local blob store",
    )
    bucket: str = Field(
        default="docchat-dev-documents",
        description="S3 bucket for document storage",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    key_prefix: str = Field(
        default="documents",
        description="Key prefix under which merged documents are published",
    )
