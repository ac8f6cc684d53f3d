"""
Test suite for get_blob_store().

System role: Verification of blob store selection
"""

from unittest.mock import patch

import pytest

from docchat.boundary.blob import LocalBlobStore, S3BlobStore, get_blob_store
from docchat.configs import BlobStoreSettings


class TestGetBlobStore:
    """Test suite for get_blob_store()."""

    def test_get_blob_store_should_return_local_store(self, tmp_path) -> None:
        """Test local type builds a filesystem store."""
        # Arrange
        settings = BlobStoreSettings(store_type="local", local_root=str(tmp_path / "blobs"))

        # Act & Assert
        assert isinstance(get_blob_store(settings), LocalBlobStore)

    def test_get_blob_store_should_return_s3_store(self) -> None:
        """Test s3 type builds an S3 store."""
        # Arrange
        settings = BlobStoreSettings(store_type="S3", bucket="docs", region="eu-west-1")

        # Act
        with patch("docchat.boundary.blob.s3_blob_store.boto3") as mock_boto3:
            store = get_blob_store(settings)

        # Assert
        assert isinstance(store, S3BlobStore)
        mock_boto3.client.assert_called_once_with("s3", region_name="eu-west-1")

    def test_get_blob_store_should_require_bucket_for_s3(self) -> None:
        """Test s3 without a bucket is a configuration error."""
        # Arrange
        settings = BlobStoreSettings(store_type="s3", bucket="")

        # Act & Assert
        with pytest.raises(ValueError):
            get_blob_store(settings)

    def test_get_blob_store_should_reject_unknown_type(self) -> None:
        """Test unknown store types are refused."""
        # Act & Assert
        with pytest.raises(ValueError):
            get_blob_store(BlobStoreSettings(store_type="ftp"))
