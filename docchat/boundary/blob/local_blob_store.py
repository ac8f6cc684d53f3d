"""
Filesystem-backed blob store.

Stores blobs as files beneath a root directory. Used for local
development and tests.

Dependencies: pathlib, shutil (stdlib)
System role: Local implementation of BlobStore
"""

import logging
import os
import shutil
import tempfile
from pathlib import Path

from docchat.boundary.blob.base import BlobStore
from docchat.core.exceptions import BlobStoreError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """Blob store rooted at a local directory."""

    def __init__(self, root: str | Path) -> None:
        """
        Initialize local blob store.

        Args:
            root: Directory holding all blobs (created if missing)
        """
        self._root = Path(root).resolve()
        self._root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root not in path.parents:
            raise InvalidInputError(f"Blob key escapes store root: {key}", "key")
        return path

    def put(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".blob_")
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp, path)
        except OSError as e:
            raise BlobStoreError(
                f"Failed to write blob: {e}", key=key, operation="put"
            ) from e
        logger.debug(f"{__name__}:put - Stored {len(data)} bytes at {key}")

    def put_file(self, key: str, path: Path) -> None:
        target = self._path_for(key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=".blob_")
            with os.fdopen(fd, "wb") as out, open(path, "rb") as src:
                shutil.copyfileobj(src, out)
            os.replace(tmp, target)
        except OSError as e:
            raise BlobStoreError(
                f"Failed to copy file into blob store: {e}", key=key, operation="put"
            ) from e
        logger.debug(f"{__name__}:put_file - Stored {path} at {key}")

    def get(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError("blob", key) from e
        except OSError as e:
            raise BlobStoreError(
                f"Failed to read blob: {e}", key=key, operation="get"
            ) from e

    def delete(self, key: str) -> bool:
        try:
            self._path_for(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except (OSError, InvalidInputError) as e:
            logger.warning(f"{__name__}:delete - Failed to delete blob {key}: {e}")
            return False

    def exists(self, key: str) -> bool:
        return self._path_for(key).is_file()
