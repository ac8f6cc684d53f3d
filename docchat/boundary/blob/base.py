"""
Blob store interface.

Opaque put/get/delete of byte payloads by key. Deletion is cleanup and
never escalates: implementations log and swallow failures.

Dependencies: abc (stdlib)
System role: Contract for raw document storage backends
"""

from abc import ABC, abstractmethod
from pathlib import Path


class BlobStore(ABC):
    """Abstract byte store keyed by slash-separated strings."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """
        Store bytes under key, replacing any existing blob.

        Raises:
            BlobStoreError: If the write fails
        """

    @abstractmethod
    def put_file(self, key: str, path: Path) -> None:
        """
        Store the contents of a local file under key.

        Raises:
            BlobStoreError: If the upload fails
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """
        Read the blob stored under key.

        Raises:
            NotFoundError: If no blob exists for key
            BlobStoreError: If the read fails for another reason
        """

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Delete the blob under key.

        Returns:
            bool: True if the blob was removed, False if missing or on error
        """

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Return True when a blob is stored under key."""
