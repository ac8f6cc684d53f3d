"""
Test suite for UploadSessionManager.

Covers session derivation, part storage validation, completeness and
progress accounting, ownership checks, cancellation and stale reaping.
Uses a tiny part size so payloads stay small.

System role: Verification of resumable upload staging
"""

import json
import os
import time

import pytest

from docchat.configs import PartSizeTier, UploadSettings
from docchat.configs.uploads import PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE
from docchat.core.exceptions import (
    AccessDeniedError,
    InvalidChunkIndexError,
    InvalidInputError,
    NotFoundError,
    UnsupportedMediaTypeError,
)
from docchat.core.uploads.session_store import (
    METADATA_FILE,
    UploadSessionManager,
    derive_session_id,
    sanitize,
)
from docchat.models.upload import PartMetadata

PAYLOAD = b"0123456789"  # 10 bytes -> 3 parts of 4


@pytest.fixture
def settings(tmp_path) -> UploadSettings:
    """Settings with 4-byte parts for every file size."""
    return UploadSettings(
        temp_dir=str(tmp_path / "uploads"),
        max_file_size=1024,
        retention_hours=1,
        reap_grace_seconds=60,
        part_size_tiers=[PartSizeTier(min_file_size=0, part_size=4)],
    )


@pytest.fixture
def manager(settings: UploadSettings) -> UploadSessionManager:
    """Session manager over a temporary directory."""
    return UploadSessionManager(settings)


@pytest.fixture
def metadata() -> PartMetadata:
    """Declared shape of a 10-byte text upload."""
    return PartMetadata(
        owner_id="alice",
        filename="notes.txt",
        file_size=len(PAYLOAD),
        media_type=TEXT_MEDIA_TYPE,
        part_size=4,
        total_parts=3,
        started_at=1700000000000,
    )


def parts_of(data: bytes, part_size: int = 4) -> list[bytes]:
    return [data[i : i + part_size] for i in range(0, len(data), part_size)]


class TestSessionDerivation:
    """Test suite for sanitize() and derive_session_id()."""

    def test_sanitize_should_replace_unsafe_characters(self) -> None:
        """Test characters outside [A-Za-z0-9.-] become underscores."""
        # Act & Assert
        assert sanitize("my report (v2)/final.pdf") == "my_report__v2__final.pdf"

    def test_derive_session_id_should_be_deterministic(self) -> None:
        """Test the same inputs always name the same session."""
        # Act
        first = derive_session_id("bob@example.com", "a b.pdf", 42)
        second = derive_session_id("bob@example.com", "a b.pdf", 42)

        # Assert
        assert first == second == "a_b.pdf_bob_example.com_42"


class TestInitializeUpload:
    """Test suite for UploadSessionManager.initialize_upload()."""

    def test_initialize_upload_should_plan_parts_and_create_session(
        self, manager: UploadSessionManager
    ) -> None:
        """Test initialization returns the plan and writes metadata."""
        # Act
        plan = manager.initialize_upload("alice", "notes.txt", 10, TEXT_MEDIA_TYPE, now=1700000000.5)

        # Assert
        assert plan.part_size == 4
        assert plan.total_parts == 3
        assert plan.started_at == 1700000000500
        assert plan.session_id == "notes.txt_alice_1700000000500"
        assert (manager.root / plan.session_id / METADATA_FILE).is_file()
        progress = manager.get_progress(plan.session_id)
        assert progress.uploaded == 0
        assert progress.percentage == 0

    def test_initialize_upload_should_reject_unsupported_media_type(
        self, manager: UploadSessionManager
    ) -> None:
        """Test media types outside the allowed set are refused."""
        # Act & Assert
        with pytest.raises(UnsupportedMediaTypeError):
            manager.initialize_upload("alice", "x.exe", 10, "application/x-msdownload")

    @pytest.mark.parametrize("size", [0, 2048])
    def test_initialize_upload_should_reject_out_of_range_size(
        self, manager: UploadSessionManager, size: int
    ) -> None:
        """Test empty and oversized uploads are refused."""
        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.initialize_upload("alice", "notes.txt", size, TEXT_MEDIA_TYPE)


class TestStorePart:
    """Test suite for UploadSessionManager.store_part()."""

    def test_store_part_should_accept_parts_in_any_order(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test out-of-order parts converge on one complete session."""
        # Arrange
        chunks = parts_of(PAYLOAD)

        # Act
        session_ids = {manager.store_part(i, chunks[i], metadata) for i in (2, 0, 1)}

        # Assert
        assert len(session_ids) == 1
        session_id = session_ids.pop()
        assert manager.is_complete(session_id)
        assert manager.missing_parts(session_id) == []

    def test_store_part_should_report_missing_until_every_index_arrives(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test completeness requires every index, not just a count."""
        # Arrange
        chunks = parts_of(PAYLOAD)

        # Act
        session_id = manager.store_part(2, chunks[2], metadata)
        manager.store_part(1, chunks[1], metadata)

        # Assert
        assert not manager.is_complete(session_id)
        assert manager.missing_parts(session_id) == [0]
        progress = manager.get_progress(session_id)
        assert (progress.uploaded, progress.total, progress.percentage) == (2, 3, 67)

    def test_store_part_should_overwrite_retried_part(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test storing the same index twice keeps the latest bytes."""
        # Act
        session_id = manager.store_part(0, b"aaaa", metadata)
        manager.store_part(0, b"bbbb", metadata)

        # Assert
        assert (manager.root / session_id / "part_0").read_bytes() == b"bbbb"
        assert manager.get_progress(session_id).uploaded == 1

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_store_part_should_reject_out_of_range_index(
        self, manager: UploadSessionManager, metadata: PartMetadata, index: int
    ) -> None:
        """Test indices outside [0, total_parts) are refused."""
        # Act & Assert
        with pytest.raises(InvalidChunkIndexError):
            manager.store_part(index, b"abcd", metadata)

    def test_store_part_should_reject_oversized_part(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test a part larger than part_size is refused."""
        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.store_part(0, b"abcde", metadata)

    def test_store_part_should_reject_empty_part(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test an empty payload is refused."""
        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.store_part(0, b"", metadata)

    def test_store_part_should_reject_plan_inconsistent_with_policy(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test declared part size/count must match the tier policy."""
        # Arrange
        forged = metadata.model_copy(update={"part_size": 10, "total_parts": 1})

        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.store_part(0, PAYLOAD, forged)

    def test_store_part_should_reject_mismatched_session_id(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test an echoed session id must match the derived one."""
        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.store_part(0, b"abcd", metadata, session_id="other_session_1")

    def test_store_part_should_keep_metadata_immutable(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test a later part cannot change the declared media type."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)
        changed = metadata.model_copy(update={"media_type": PDF_MEDIA_TYPE})

        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.store_part(1, b"efgh", changed)
        assert manager.get_metadata(session_id).media_type == TEXT_MEDIA_TYPE

    def test_store_part_should_leave_no_temp_files(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test atomic writes clean up their temporary files."""
        # Act
        session_id = manager.store_part(0, b"abcd", metadata)

        # Assert
        names = sorted(p.name for p in (manager.root / session_id).iterdir())
        assert names == [METADATA_FILE, "part_0"]


class TestSessionQueries:
    """Test suite for metadata, progress and authorization queries."""

    def test_is_complete_should_be_false_for_unknown_session(
        self, manager: UploadSessionManager
    ) -> None:
        """Test an unknown session is simply not complete."""
        # Act & Assert
        assert manager.is_complete("missing_session_1") is False

    def test_get_progress_should_raise_for_unknown_session(
        self, manager: UploadSessionManager
    ) -> None:
        """Test progress of an unknown session is NotFound."""
        # Act & Assert
        with pytest.raises(NotFoundError):
            manager.get_progress("missing_session_1")

    def test_get_metadata_should_reject_path_traversal(
        self, manager: UploadSessionManager
    ) -> None:
        """Test session ids cannot name paths outside the staging directory."""
        # Act & Assert
        with pytest.raises(InvalidInputError):
            manager.get_metadata("../etc")

    def test_authorize_should_check_owner(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test only the owner passes authorization."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)

        # Act & Assert
        assert manager.authorize(session_id, "alice") == metadata
        with pytest.raises(AccessDeniedError):
            manager.authorize(session_id, "mallory")
        with pytest.raises(NotFoundError):
            manager.authorize("missing_session_1", "alice")


class TestCancel:
    """Test suite for UploadSessionManager.cancel()."""

    def test_cancel_should_remove_session(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test cancel deletes parts and metadata."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)

        # Act
        manager.cancel(session_id)

        # Assert
        assert not (manager.root / session_id).exists()
        assert manager.is_complete(session_id) is False

    def test_cancel_should_never_raise(self, manager: UploadSessionManager) -> None:
        """Test cancelling unknown or malformed sessions is a no-op."""
        # Act
        manager.cancel("missing_session_1")
        manager.cancel("..")

        # Assert
        assert list(manager.root.iterdir()) == []


class TestReapStale:
    """Test suite for UploadSessionManager.reap_stale()."""

    def _age(self, manager: UploadSessionManager, session_id: str, seconds: float) -> None:
        past = time.time() - seconds
        os.utime(manager.root / session_id, (past, past))

    def test_reap_stale_should_remove_sessions_past_retention(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test sessions older than the retention window are removed."""
        # Arrange
        stale_id = manager.store_part(0, b"abcd", metadata)
        fresh = metadata.model_copy(update={"started_at": metadata.started_at + 1})
        fresh_id = manager.store_part(0, b"abcd", fresh)
        self._age(manager, stale_id, 2 * 3600)

        # Act
        removed = manager.reap_stale()

        # Assert
        assert removed == [stale_id]
        assert not (manager.root / stale_id).exists()
        assert (manager.root / fresh_id).exists()

    def test_reap_stale_should_skip_merging_sessions(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test a session being merged is never reaped."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)
        self._age(manager, session_id, 2 * 3600)

        # Act
        with manager.merging(session_id):
            removed = manager.reap_stale()

        # Assert
        assert removed == []
        assert (manager.root / session_id).exists()

    def test_reap_stale_should_release_merge_lock(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test reaping a session drops its merge lock."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)
        first_lock = manager.merge_lock(session_id)
        self._age(manager, session_id, 2 * 3600)

        # Act
        removed = manager.reap_stale()

        # Assert
        assert removed == [session_id]
        assert session_id not in manager._merge_locks
        assert manager.merge_lock(session_id) is not first_lock

    def test_reap_stale_should_honor_grace_window(
        self, tmp_path, metadata: PartMetadata
    ) -> None:
        """Test recently modified sessions survive even with zero retention."""
        # Arrange
        manager = UploadSessionManager(
            UploadSettings(
                temp_dir=str(tmp_path / "uploads"),
                max_file_size=1024,
                retention_hours=0,
                reap_grace_seconds=60,
                part_size_tiers=[PartSizeTier(min_file_size=0, part_size=4)],
            )
        )
        session_id = manager.store_part(0, b"abcd", metadata)

        # Act
        removed = manager.reap_stale()

        # Assert
        assert removed == []
        assert manager.get_progress(session_id).uploaded == 1

    def test_metadata_file_should_hold_declared_shape(
        self, manager: UploadSessionManager, metadata: PartMetadata
    ) -> None:
        """Test metadata.json round-trips the declared shape."""
        # Arrange
        session_id = manager.store_part(0, b"abcd", metadata)

        # Act
        stored = json.loads((manager.root / session_id / METADATA_FILE).read_text())

        # Assert
        assert stored["owner_id"] == "alice"
        assert stored["total_parts"] == 3
