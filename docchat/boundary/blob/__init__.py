"""
Blob store adapters.

Exports: BlobStore, LocalBlobStore, S3BlobStore, get_blob_store
"""

from docchat.boundary.blob.base import BlobStore
from docchat.boundary.blob.blob_store_factory import get_blob_store
from docchat.boundary.blob.local_blob_store import LocalBlobStore
from docchat.boundary.blob.s3_blob_store import S3BlobStore

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "S3BlobStore",
    "get_blob_store",
]
