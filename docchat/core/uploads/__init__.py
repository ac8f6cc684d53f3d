"""
Resumable multi-part uploads.

Exports: UploadSessionManager, merge_parts, UploadReaper, sizing helpers
"""

from docchat.core.uploads.merge import merge_parts
from docchat.core.uploads.reaper import UploadReaper
from docchat.core.uploads.session_store import (
    UploadSessionManager,
    derive_session_id,
    sanitize,
)
from docchat.core.uploads.sizing import (
    calculate_part_size,
    calculate_total_parts,
    plan_upload,
)

__all__ = [
    "UploadSessionManager",
    "UploadReaper",
    "merge_parts",
    "derive_session_id",
    "sanitize",
    "calculate_part_size",
    "calculate_total_parts",
    "plan_upload",
]
