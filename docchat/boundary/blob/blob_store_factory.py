"""
Blob store factory for selecting between local filesystem (dev) and S3 (prod).

Depends on BLOB_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: docchat.boundary.blob, docchat.configs
System role: Blob store instantiation and selection
"""

import logging

from docchat.boundary.blob.base import BlobStore
from docchat.boundary.blob.local_blob_store import LocalBlobStore
from docchat.boundary.blob.s3_blob_store import S3BlobStore
from docchat.configs import BlobStoreSettings, get_settings

logger = logging.getLogger(__name__)


def get_blob_store(settings: BlobStoreSettings | None = None) -> BlobStore:
    """
    Factory function to get blob store based on configuration.

    Args:
        settings: Optional blob store settings (defaults to global settings)

    Returns:
        LocalBlobStore or S3BlobStore: Configured blob store instance

    Raises:
        ValueError: If store_type is invalid or S3 is selected without a bucket
    """
    settings = settings or get_settings().blob_store
    store_type = settings.store_type.lower()

    if store_type == "local":
        logger.info(
            f"{__name__}:get_blob_store - Creating local blob store at {settings.local_root}"
        )
        return LocalBlobStore(settings.local_root)

    elif store_type == "s3":
        if not settings.bucket:
            raise ValueError("BLOB_STORE_BUCKET must be set when store_type is 's3'")
        logger.info(f"{__name__}:get_blob_store - Creating S3 blob store ({settings.bucket})")
        return S3BlobStore(bucket=settings.bucket, region=settings.region)

    else:
        raise ValueError(
            f"Invalid BLOB_STORE_STORE_TYPE: {store_type}. "
            f"Must be 'local' (dev) or 's3' (production)."
        )
