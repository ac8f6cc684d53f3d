"""
Merge and materialization of upload parts.

Concatenates a session's parts strictly in index order into one
destination file. Merge only reads parts; deleting them is the caller's
job once the merged document has been processed.

Dependencies: shutil (stdlib)
System role: Part concatenation for completed uploads
"""

import logging
import shutil
from pathlib import Path

from docchat.core.exceptions import (
    IncompleteUploadError,
    InvalidInputError,
    NotFoundError,
    UploadError,
)
from docchat.core.uploads.session_store import UploadSessionManager

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 1024 * 1024


def merge_parts(
    manager: UploadSessionManager,
    session_id: str,
    destination: str | Path,
) -> int:
    """
    Concatenate all parts of a complete session into destination.

    At most one merge per session runs at a time in this process; a second
    caller fails fast instead of waiting. On a mid-merge failure the
    destination is left partial, so callers should write to a temporary
    path and publish only after success.

    Args:
        manager: Session manager holding the parts
        session_id: Session to merge
        destination: Output file path (overwritten)

    Returns:
        int: Number of bytes written

    Raises:
        NotFoundError: If the session does not exist
        IncompleteUploadError: If any part index is missing
        InvalidInputError: If a merge of this session is already running
        UploadError: If the merged size differs from the declared size or I/O fails
    """
    lock = manager.merge_lock(session_id)
    if not lock.acquire(blocking=False):
        raise InvalidInputError(
            f"Upload {session_id} is already merging",
            "session_id",
            {"session_id": session_id},
        )
    try:
        with manager.merging(session_id):
            metadata = manager.get_metadata(session_id)
            missing = manager.missing_parts(session_id)
            if missing:
                raise IncompleteUploadError(session_id, missing)

            destination = Path(destination)
            written = 0
            try:
                with open(destination, "wb") as out:
                    for part_path in manager.part_paths(session_id):
                        with open(part_path, "rb") as part:
                            shutil.copyfileobj(part, out, COPY_BUFFER_SIZE)
                        written = out.tell()
            except OSError as e:
                # A part may have vanished after the completeness check (cancel or reap)
                try:
                    missing = manager.missing_parts(session_id)
                except NotFoundError:
                    missing = list(range(metadata.total_parts))
                if missing:
                    raise IncompleteUploadError(session_id, missing) from e
                raise UploadError(f"Failed to merge parts: {e}", session_id) from e

            if written != metadata.file_size:
                raise UploadError(
                    "Merged size does not match the declared file size",
                    session_id,
                    {"declared": metadata.file_size, "merged": written},
                )

            logger.info(
                f"{__name__}:merge_parts - Merged {metadata.total_parts} part(s) "
                f"({written} bytes) for {session_id}"
            )
            return written
    finally:
        lock.release()
