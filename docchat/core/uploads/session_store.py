"""
Upload session manager.

Tracks in-flight multi-part uploads on the local filesystem. Each session
is a directory under the configured temp dir holding metadata.json and one
file per received part (part_0, part_1, ...). The directory name is derived
from (filename, owner, start time) so retries and out-of-order parts of the
same logical upload converge on one session.

Completion is polled: callers use is_complete / get_progress. Abandoned
sessions are reclaimed by reap_stale.

Dependencies: pathlib, shutil, threading (stdlib), pydantic
System role: Part staging for resumable uploads
"""

import json
import logging
import os
import re
import shutil
import tempfile
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from pydantic import ValidationError

from docchat.configs import UploadSettings, get_settings
from docchat.core.exceptions import (
    AccessDeniedError,
    InvalidChunkIndexError,
    InvalidInputError,
    NotFoundError,
    UnsupportedMediaTypeError,
    UploadError,
)
from docchat.core.uploads.sizing import plan_upload
from docchat.models.upload import PartMetadata, UploadPlan, UploadProgress

logger = logging.getLogger(__name__)

METADATA_FILE = "metadata.json"
PART_PREFIX = "part_"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_SESSION_ID = re.compile(r"[A-Za-z0-9._-]+")


def sanitize(value: str) -> str:
    """Replace every character outside [A-Za-z0-9.-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", value)


def derive_session_id(owner_id: str, filename: str, started_at: int) -> str:
    """
    Deterministic session directory name for one logical upload.

    Args:
        owner_id: Owner identity
        filename: Original filename
        started_at: Upload start time in epoch milliseconds

    Returns:
        str: "{filename}_{owner}_{started_at}" with both names sanitized
    """
    return f"{sanitize(filename)}_{sanitize(owner_id)}_{started_at}"


class UploadSessionManager:
    """
    Filesystem-backed store of upload sessions and their parts.

    Part writes are independent and atomic per index (temp file plus
    os.replace), so concurrent StorePart calls need no locking. Merge
    coordination state (per-session locks and the merging set) is held
    in-process and consulted by the reaper.
    """

    def __init__(self, settings: UploadSettings | None = None) -> None:
        """
        Initialize session manager.

        Args:
            settings: Upload settings (defaults to global settings)
        """
        self._settings = settings or get_settings().uploads
        self._root = Path(self._settings.temp_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        self._state_lock = threading.Lock()
        self._merge_locks: dict[str, threading.Lock] = {}
        self._merging: set[str] = set()

    @property
    def settings(self) -> UploadSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._root

    def _session_dir(self, session_id: str) -> Path:
        if not _SESSION_ID.fullmatch(session_id) or session_id in (".", ".."):
            raise InvalidInputError(f"Malformed upload session id: {session_id!r}", "session_id")
        return self._root / session_id

    def _check_media_type(self, media_type: str) -> None:
        if media_type not in self._settings.allowed_media_types:
            raise UnsupportedMediaTypeError(media_type)

    def initialize_upload(
        self,
        owner_id: str,
        filename: str,
        size: int,
        media_type: str,
        now: float | None = None,
    ) -> UploadPlan:
        """
        Start an upload: choose part size/count and create the session.

        Args:
            owner_id: Owner identity
            filename: Original filename
            size: Declared total size in bytes
            media_type: Declared media type
            now: Start time in epoch seconds (defaults to current time)

        Returns:
            UploadPlan: session id, part size, part count and start time

        Raises:
            InvalidInputError: If size is out of range or a name is missing
            UnsupportedMediaTypeError: If media_type is not allowed
        """
        if not owner_id:
            raise InvalidInputError("Owner is required", "owner_id")
        if not filename:
            raise InvalidInputError("Filename is required", "filename")
        self._check_media_type(media_type)
        part_size, total_parts = plan_upload(size, self._settings)

        started_at = int((time.time() if now is None else now) * 1000)
        metadata = PartMetadata(
            owner_id=owner_id,
            filename=filename,
            file_size=size,
            media_type=media_type,
            part_size=part_size,
            total_parts=total_parts,
            started_at=started_at,
        )
        session_id = derive_session_id(owner_id, filename, started_at)
        session_dir = self._session_dir(session_id)
        session_dir.mkdir(parents=True, exist_ok=True)
        self._ensure_metadata(session_dir, metadata)

        logger.info(
            f"{__name__}:initialize_upload - Session {session_id}: "
            f"{size} bytes in {total_parts} part(s) of {part_size}"
        )
        return UploadPlan(
            session_id=session_id,
            part_size=part_size,
            total_parts=total_parts,
            started_at=started_at,
        )

    def store_part(
        self,
        index: int,
        data: bytes,
        metadata: PartMetadata,
        session_id: str | None = None,
    ) -> str:
        """
        Persist one part, overwriting any earlier part at the same index.

        Args:
            index: Zero-based part index
            data: Part payload
            metadata: Declared upload shape (identical for every part)
            session_id: Optional session id; must match the one derived from metadata

        Returns:
            str: Session id the part was stored under

        Raises:
            UnsupportedMediaTypeError: If the media type is not allowed
            InvalidInputError: If the declared shape is inconsistent or the part is oversized
            InvalidChunkIndexError: If index is outside [0, total_parts)
        """
        self._check_media_type(metadata.media_type)
        if metadata.total_parts <= 0 or metadata.part_size <= 0:
            raise InvalidInputError(
                "Part size and part count must be positive",
                "total_parts",
                {"total_parts": metadata.total_parts, "part_size": metadata.part_size},
            )
        expected = plan_upload(metadata.file_size, self._settings)
        if expected != (metadata.part_size, metadata.total_parts):
            raise InvalidInputError(
                "Declared part size/count do not match the size policy",
                "part_size",
                {
                    "declared": [metadata.part_size, metadata.total_parts],
                    "expected": list(expected),
                },
            )

        derived = derive_session_id(metadata.owner_id, metadata.filename, metadata.started_at)
        if session_id is not None and session_id != derived:
            raise InvalidInputError(
                "Session id does not match part metadata",
                "session_id",
                {"session_id": session_id, "derived": derived},
            )
        if not 0 <= index < metadata.total_parts:
            raise InvalidChunkIndexError(index, metadata.total_parts, derived)
        if not data:
            raise InvalidInputError("Part payload is empty", "data", {"index": index})
        if len(data) > metadata.part_size:
            raise InvalidInputError(
                f"Part {index} is larger than the part size",
                "data",
                {"index": index, "size": len(data), "part_size": metadata.part_size},
            )

        session_dir = self._session_dir(derived)
        session_dir.mkdir(parents=True, exist_ok=True)
        self._ensure_metadata(session_dir, metadata)
        self._atomic_write(session_dir, f"{PART_PREFIX}{index}", data)

        logger.debug(
            f"{__name__}:store_part - Stored part {index + 1}/{metadata.total_parts} "
            f"({len(data)} bytes) for {derived}"
        )
        return derived

    def _ensure_metadata(self, session_dir: Path, metadata: PartMetadata) -> None:
        """Write metadata.json on first sight; afterwards it must match."""
        path = session_dir / METADATA_FILE
        if path.exists():
            stored = self._read_metadata(path, session_dir.name)
            if stored != metadata:
                raise InvalidInputError(
                    "Part metadata does not match the upload session",
                    "metadata",
                    {"session_id": session_dir.name},
                )
            return
        self._atomic_write(session_dir, METADATA_FILE, metadata.model_dump_json().encode("utf-8"))

    @staticmethod
    def _atomic_write(directory: Path, name: str, data: bytes) -> None:
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=f".{name}.")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(tmp, directory / name)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    @staticmethod
    def _read_metadata(path: Path, session_id: str) -> PartMetadata:
        try:
            return PartMetadata.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except FileNotFoundError as e:
            raise NotFoundError("upload session", session_id) from e
        except (ValueError, ValidationError) as e:
            raise UploadError(f"Corrupt upload metadata: {e}", session_id) from e

    def get_metadata(self, session_id: str) -> PartMetadata:
        """
        Load a session's declared shape.

        Raises:
            NotFoundError: If the session does not exist
        """
        session_dir = self._session_dir(session_id)
        return self._read_metadata(session_dir / METADATA_FILE, session_id)

    def _received(self, session_dir: Path, total_parts: int) -> set[int]:
        received = set()
        try:
            entries = list(session_dir.iterdir())
        except FileNotFoundError:
            return received
        for entry in entries:
            suffix = entry.name[len(PART_PREFIX):]
            if entry.name.startswith(PART_PREFIX) and suffix.isdigit():
                index = int(suffix)
                if index < total_parts:
                    received.add(index)
        return received

    def missing_parts(self, session_id: str) -> list[int]:
        """
        Indices in [0, total_parts) with no stored part.

        Raises:
            NotFoundError: If the session does not exist
        """
        metadata = self.get_metadata(session_id)
        received = self._received(self._session_dir(session_id), metadata.total_parts)
        return [i for i in range(metadata.total_parts) if i not in received]

    def is_complete(self, session_id: str) -> bool:
        """True iff every index in [0, total_parts) has a stored part; False for unknown sessions."""
        try:
            return not self.missing_parts(session_id)
        except NotFoundError:
            return False

    def get_progress(self, session_id: str) -> UploadProgress:
        """
        Report received parts for a session.

        Raises:
            NotFoundError: If the session does not exist
        """
        metadata = self.get_metadata(session_id)
        uploaded = len(self._received(self._session_dir(session_id), metadata.total_parts))
        total = metadata.total_parts
        return UploadProgress(
            session_id=session_id,
            uploaded=uploaded,
            total=total,
            percentage=round(uploaded / total * 100),
            is_complete=uploaded == total,
        )

    def authorize(self, session_id: str, owner_id: str) -> PartMetadata:
        """
        Check that a session exists and belongs to owner_id.

        Raises:
            NotFoundError: If the session does not exist
            AccessDeniedError: If the session belongs to another owner
        """
        metadata = self.get_metadata(session_id)
        if metadata.owner_id != owner_id:
            raise AccessDeniedError("upload session", session_id)
        return metadata

    def part_paths(self, session_id: str) -> list[Path]:
        """Paths of all parts in index order (existence is not checked)."""
        metadata = self.get_metadata(session_id)
        session_dir = self._session_dir(session_id)
        return [session_dir / f"{PART_PREFIX}{i}" for i in range(metadata.total_parts)]

    def cancel(self, session_id: str) -> None:
        """Remove a session's parts and metadata. Never raises."""
        try:
            session_dir = self._session_dir(session_id)
        except InvalidInputError:
            logger.warning(f"{__name__}:cancel - Ignoring malformed session id {session_id!r}")
            return
        shutil.rmtree(session_dir, ignore_errors=True)
        with self._state_lock:
            if session_id not in self._merging:
                self._merge_locks.pop(session_id, None)
        logger.info(f"{__name__}:cancel - Removed upload session {session_id}")

    def merge_lock(self, session_id: str) -> threading.Lock:
        """Per-session lock serializing merges within this process."""
        with self._state_lock:
            return self._merge_locks.setdefault(session_id, threading.Lock())

    @contextmanager
    def merging(self, session_id: str) -> Iterator[None]:
        """Mark a session as merging so the reaper leaves it alone."""
        with self._state_lock:
            self._merging.add(session_id)
        try:
            yield
        finally:
            with self._state_lock:
                self._merging.discard(session_id)

    def is_merging(self, session_id: str) -> bool:
        with self._state_lock:
            return session_id in self._merging

    def reap_stale(self, now: float | None = None) -> list[str]:
        """
        Remove sessions untouched for longer than the retention window.

        Sessions modified within the grace window and sessions currently
        merging are skipped regardless of retention.

        Args:
            now: Current time in epoch seconds (defaults to current time)

        Returns:
            list[str]: Session ids that were removed
        """
        now = time.time() if now is None else now
        retention = self._settings.retention_seconds
        grace = self._settings.reap_grace_seconds
        removed = []

        try:
            entries = list(self._root.iterdir())
        except FileNotFoundError:
            return removed

        for entry in entries:
            if not entry.is_dir() or self.is_merging(entry.name):
                continue
            try:
                age = now - entry.stat().st_mtime
            except FileNotFoundError:
                continue
            if age < grace or age <= retention:
                continue
            shutil.rmtree(entry, ignore_errors=True)
            with self._state_lock:
                if entry.name not in self._merging:
                    self._merge_locks.pop(entry.name, None)
            removed.append(entry.name)

        if removed:
            logger.info(f"{__name__}:reap_stale - Removed {len(removed)} stale upload session(s)")
        return removed
