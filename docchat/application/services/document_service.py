"""
Document service orchestrator.

Coordinates ingestion, listing and deletion of documents. Ingestion runs
the whole pipeline before touching the database, then writes the document
and every segment in one transaction, so a stored document always has all
of its embedded segments.

Dependencies: docchat.core.document_processing, docchat.boundary.db, docchat.boundary.blob
System role: Document management orchestration
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.blob import BlobStore, get_blob_store
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.segment_crud import segment_crud
from docchat.core.document_processing.entrypoint import DocumentPipeline
from docchat.core.exceptions import NotFoundError
from docchat.models.document import DocumentInfo
from docchat.observability import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Uses DocumentPipeline for extraction, segmentation and embedding and the
    blob store for the materialized payload.
    """

    def __init__(
        self,
        db: AsyncSession,
        pipeline: DocumentPipeline | None = None,
        blob_store: BlobStore | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document and segment storage
            pipeline: Optional DocumentPipeline (created if None)
            blob_store: Optional blob store (configured store if None)
        """
        self.db = db
        self._pipeline = pipeline
        self._blob_store = blob_store

    @property
    def pipeline(self) -> DocumentPipeline:
        """Lazy-load pipeline to avoid initialization cost."""
        if self._pipeline is None:
            self._pipeline = DocumentPipeline()
        return self._pipeline

    @property
    def blob_store(self) -> BlobStore:
        """Lazy-load blob store to avoid initialization cost."""
        if self._blob_store is None:
            self._blob_store = get_blob_store()
        return self._blob_store

    async def ingest(
        self,
        owner_id: str,
        filename: str,
        media_type: str,
        data: bytes,
        storage_key: str,
    ) -> DocumentInfo:
        """
        Process a materialized document and persist it with its segments.

        Steps:
        1. Extract, segment and embed through the pipeline (no persistence)
        2. Insert the document row and every segment row
        3. Commit once; roll back on any failure

        Args:
            owner_id: Owner identity
            filename: Original filename
            media_type: Declared media type
            data: Document bytes
            storage_key: Blob store key holding the payload

        Returns:
            DocumentInfo: Persisted document

        Raises:
            UnsupportedMediaTypeError: Media type outside the supported set
            ExtractionError: Document could not be parsed
            DocumentProcessingError: Document has no extractable text
            EmbeddingFailedError: Any segment failed to embed
        """
        result = await self.pipeline.process(data, media_type)

        try:
            document = await document_crud.create(
                self.db,
                owner_id=owner_id,
                filename=filename,
                media_type=media_type,
                size_bytes=len(data),
                storage_key=storage_key,
                segment_count=result.segment_count,
                suggested_questions=result.suggested_questions,
            )
            await segment_crud.create_many(self.db, document.id, result.segments)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            log_exception_with_context(
                logger,
                f"{__name__}:ingest - Failed to persist document",
                e,
                owner_id=owner_id,
                document_name=filename,
                storage_key=storage_key,
            )
            raise

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:ingest - Stored document {document.id} "
            f"with {result.segment_count} segment(s)",
            owner_id=owner_id,
            document_id=document.id,
            media_type=media_type,
            processing_time_ms=round(result.processing_time_ms),
        )
        return DocumentInfo.model_validate(document)

    async def list_documents(self, owner_id: str) -> list[DocumentInfo]:
        """List an owner's documents, newest first."""
        documents = await document_crud.get_by_owner(self.db, owner_id)
        return [DocumentInfo.model_validate(d) for d in documents]

    async def get_document(self, owner_id: str, document_id: UUID) -> DocumentInfo:
        """
        Get one owned document.

        Raises:
            NotFoundError: Unknown document or owned by someone else
        """
        document = await document_crud.get_for_owner(self.db, document_id, owner_id)
        if document is None:
            raise NotFoundError("document", str(document_id))
        return DocumentInfo.model_validate(document)

    async def delete_document(self, owner_id: str, document_id: UUID) -> None:
        """
        Delete a document, its segments and its stored payload.

        The blob delete is best effort; the rows are always removed.

        Args:
            owner_id: Owner identity
            document_id: Document UUID

        Raises:
            NotFoundError: Unknown document or owned by someone else
        """
        document = await document_crud.get_for_owner(self.db, document_id, owner_id)
        if document is None:
            raise NotFoundError("document", str(document_id))

        storage_key = document.storage_key
        try:
            await document_crud.delete_with_segments(self.db, document_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        if not await asyncio.to_thread(self.blob_store.delete, storage_key):
            logger.warning(
                f"{__name__}:delete_document - Blob {storage_key} of document "
                f"{document_id} could not be removed"
            )
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:delete_document - Deleted document {document_id}",
            owner_id=owner_id,
            document_id=document_id,
        )
