"""
Upload service orchestrator.

Drives the resumable upload protocol end to end: session initialization,
part receipt, progress, cancellation and completion. Completion merges the
parts into a temporary file, publishes it to the blob store, ingests it
and only then discards the parts, so a failed completion can be retried.

Dependencies: docchat.core.uploads, docchat.boundary.blob, docchat.application.services.document_service
System role: Upload completion and materialization orchestration
"""

import asyncio
import logging
import shutil
import tempfile
import uuid
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.application.services.document_service import DocumentService
from docchat.boundary.blob import BlobStore, get_blob_store
from docchat.configs import Settings, get_settings
from docchat.core.exceptions import AccessDeniedError, InvalidInputError
from docchat.core.uploads.merge import merge_parts
from docchat.core.uploads.session_store import (
    UploadSessionManager,
    derive_session_id,
    sanitize,
)
from docchat.models.document import DocumentInfo
from docchat.models.upload import PartMetadata, PartReceipt, UploadPlan, UploadProgress
from docchat.observability import (
    clear_correlation_id,
    log_exception_with_context,
    log_with_context,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

MERGED_FILE = "merged"

# Sessions with a completion in flight in this process
_completing: set[str] = set()


class UploadService:
    """
    Upload service orchestrator.

    Wraps the filesystem session manager with owner checks and runs its
    blocking I/O in worker threads.
    """

    def __init__(
        self,
        db: AsyncSession,
        manager: UploadSessionManager | None = None,
        blob_store: BlobStore | None = None,
        document_service: DocumentService | None = None,
        settings: Settings | None = None,
    ) -> None:
        """
        Initialize upload service.

        Args:
            db: AsyncSession used for document ingestion
            manager: Session manager (created from settings if None)
            blob_store: Blob store for merged documents (configured store if None)
            document_service: Service ingesting merged documents (created if None)
            settings: Application settings (global settings if None)
        """
        self.db = db
        self._settings = settings or get_settings()
        self.manager = manager or UploadSessionManager(self._settings.uploads)
        self.blob_store = blob_store or get_blob_store(self._settings.blob_store)
        self.document_service = document_service or DocumentService(
            db, blob_store=self.blob_store
        )

    async def initialize_upload(
        self,
        owner_id: str,
        filename: str,
        size: int,
        media_type: str,
    ) -> UploadPlan:
        """
        Start a multi-part upload.

        Raises:
            InvalidInputError: Size out of range or missing names
            UnsupportedMediaTypeError: Media type not allowed
        """
        plan = await asyncio.to_thread(
            self.manager.initialize_upload, owner_id, filename, size, media_type
        )
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:initialize_upload - Upload session {plan.session_id} started",
            owner_id=owner_id,
            session_id=plan.session_id,
            size=size,
            total_parts=plan.total_parts,
        )
        return plan

    async def receive_part(
        self,
        owner_id: str,
        index: int,
        data: bytes,
        metadata: PartMetadata,
        session_id: str | None = None,
    ) -> PartReceipt:
        """
        Store one part and report progress.

        Args:
            owner_id: Caller identity; must match metadata.owner_id
            index: Zero-based part index
            data: Part payload
            metadata: Declared upload shape
            session_id: Optional session id echoed by the client

        Returns:
            PartReceipt: Session id, progress and completion flag

        Raises:
            AccessDeniedError: Metadata names another owner
            InvalidInputError: Inconsistent metadata or oversized/empty part
            InvalidChunkIndexError: Index outside [0, total_parts)
        """
        if metadata.owner_id != owner_id:
            raise AccessDeniedError(
                "upload session",
                session_id
                or derive_session_id(metadata.owner_id, metadata.filename, metadata.started_at),
            )

        stored_id = await asyncio.to_thread(
            self.manager.store_part, index, data, metadata, session_id
        )
        progress = await asyncio.to_thread(self.manager.get_progress, stored_id)
        return PartReceipt(
            session_id=stored_id,
            index=index,
            progress=progress,
            completed=progress.is_complete,
        )

    async def get_progress(self, owner_id: str, session_id: str) -> UploadProgress:
        """
        Report received parts of an owned session.

        Raises:
            NotFoundError: Unknown session
            AccessDeniedError: Session owned by someone else
        """
        await asyncio.to_thread(self.manager.authorize, session_id, owner_id)
        return await asyncio.to_thread(self.manager.get_progress, session_id)

    async def cancel(self, owner_id: str, session_id: str) -> None:
        """
        Abandon an owned session and discard its parts.

        Raises:
            NotFoundError: Unknown session
            AccessDeniedError: Session owned by someone else
            InvalidInputError: The session is being completed
        """
        await asyncio.to_thread(self.manager.authorize, session_id, owner_id)
        if session_id in _completing or self.manager.is_merging(session_id):
            raise InvalidInputError(
                f"Upload {session_id} is being completed",
                "session_id",
                {"session_id": session_id},
            )
        await asyncio.to_thread(self.manager.cancel, session_id)

    def _storage_key(self, owner_id: str, filename: str) -> str:
        prefix = self._settings.blob_store.key_prefix.strip("/")
        suffix = Path(filename).suffix.lower()
        return f"{prefix}/{sanitize(owner_id)}/{uuid.uuid4().hex}{suffix}"

    async def complete_upload(self, owner_id: str, session_id: str) -> DocumentInfo:
        """
        Merge, publish and ingest a complete upload.

        Steps:
        1. Check ownership; refuse a second concurrent completion
        2. Merge parts in index order into a temporary file
        3. Publish the merged file to the blob store
        4. Ingest (extract, segment, embed, persist)
        5. Discard the parts

        On failure the published blob is removed, the parts are kept so the
        client can retry, and the error propagates.

        Args:
            owner_id: Caller identity
            session_id: Upload session id

        Returns:
            DocumentInfo: Persisted document

        Raises:
            NotFoundError: Unknown session
            AccessDeniedError: Session owned by someone else
            InvalidInputError: A completion of this session is already running
            IncompleteUploadError: Parts are missing
        """
        metadata = await asyncio.to_thread(self.manager.authorize, session_id, owner_id)
        if session_id in _completing:
            raise InvalidInputError(
                f"Upload {session_id} is already merging",
                "session_id",
                {"session_id": session_id},
            )
        _completing.add(session_id)
        set_correlation_id()

        temp_dir = Path(tempfile.mkdtemp(prefix="docchat-merge-"))
        storage_key = None
        try:
            merged_path = temp_dir / MERGED_FILE
            size = await asyncio.to_thread(merge_parts, self.manager, session_id, merged_path)

            key = self._storage_key(owner_id, metadata.filename)
            await asyncio.to_thread(self.blob_store.put_file, key, merged_path)
            storage_key = key

            data = await asyncio.to_thread(merged_path.read_bytes)
            document = await self.document_service.ingest(
                owner_id=owner_id,
                filename=metadata.filename,
                media_type=metadata.media_type,
                data=data,
                storage_key=storage_key,
            )

            await asyncio.to_thread(self.manager.cancel, session_id)
            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:complete_upload - Upload {session_id} materialized "
                f"as document {document.id}",
                owner_id=owner_id,
                session_id=session_id,
                document_id=document.id,
                size=size,
                storage_key=storage_key,
            )
            return document
        except Exception as e:
            if storage_key is not None:
                await asyncio.to_thread(self.blob_store.delete, storage_key)
            log_exception_with_context(
                logger,
                f"{__name__}:complete_upload - Completion failed; parts kept for retry",
                e,
                owner_id=owner_id,
                session_id=session_id,
            )
            raise
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)
            _completing.discard(session_id)
            clear_correlation_id()
