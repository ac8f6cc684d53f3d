"""
S3-backed blob store.

Stores raw documents as S3 objects. Missing keys surface as
NotFoundError; other client errors are wrapped in BlobStoreError.

Dependencies: boto3
System role: Production implementation of BlobStore
"""

import logging
from pathlib import Path

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import ClientError

from docchat.boundary.blob.base import BlobStore
from docchat.core.exceptions import BlobStoreError, NotFoundError

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "")


class S3BlobStore(BlobStore):
    """Blob store over a single S3 bucket."""

    def __init__(self, bucket: str, region: str = "ap-southeast-2", client=None) -> None:
        """
        Initialize S3 blob store.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            client: Optional pre-built boto3 S3 client
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    def put(self, key: str, data: bytes) -> None:
        try:
            self._s3_client.put_object(Bucket=self._bucket, Key=key, Body=data)
        except ClientError as e:
            raise BlobStoreError(
                f"S3 put_object failed: {e}", key=key, operation="put"
            ) from e
        logger.info(f"{__name__}:put - Uploaded s3://{self._bucket}/{key}")

    def put_file(self, key: str, path: Path) -> None:
        try:
            self._s3_client.upload_file(str(path), self._bucket, key)
        except (ClientError, S3UploadFailedError) as e:
            raise BlobStoreError(
                f"S3 upload_file failed: {e}", key=key, operation="put"
            ) from e
        logger.info(f"{__name__}:put_file - Uploaded {path} to s3://{self._bucket}/{key}")

    def get(self, key: str) -> bytes:
        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                raise NotFoundError("blob", key) from e
            raise BlobStoreError(
                f"S3 get_object failed: {e}", key=key, operation="get"
            ) from e

    def delete(self, key: str) -> bool:
        try:
            self._s3_client.delete_object(Bucket=self._bucket, Key=key)
            return True
        except ClientError as e:
            logger.warning(f"{__name__}:delete - Failed to delete s3://{self._bucket}/{key}: {e}")
            return False

    def exists(self, key: str) -> bool:
        """
        Check if an object exists in S3.

        Args:
            key: S3 object key to check

        Returns:
            bool: True if object exists, False otherwise
        """
        try:
            self._s3_client.head_object(Bucket=self._bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise BlobStoreError(
                f"S3 head_object failed: {e}", key=key, operation="exists"
            ) from e
