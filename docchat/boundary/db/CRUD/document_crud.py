"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with owner-scoped query methods.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.models.conversation_model import conversation_documents
from docchat.boundary.db.models.document_model import DocumentModel
from docchat.boundary.db.models.segment_model import SegmentModel
from docchat.boundary.db.CRUD.base_crud import BaseCRUD


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Every read used for access control takes an owner filter.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner_id: str,
    ) -> DocumentModel | None:
        """
        Retrieve a document only if it belongs to the owner.

        Args:
            session: Async database session
            id: Document UUID
            owner_id: Owner identity

        Returns:
            DocumentModel if found and owned, None otherwise
        """
        stmt = select(DocumentModel).where(
            DocumentModel.id == id,
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve an owner's documents, newest first.

        Args:
            session: Async database session
            owner_id: Owner identity
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels belonging to the owner
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.owner_id == owner_id)
            .order_by(DocumentModel.created_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_many_for_owner(
        self,
        session: AsyncSession,
        ids: Sequence[UUID],
        owner_id: str,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve the subset of the given documents that the owner holds.

        Args:
            session: Async database session
            ids: Candidate document UUIDs
            owner_id: Owner identity

        Returns:
            Sequence of owned DocumentModels (unknown ids are skipped)
        """
        if not ids:
            return []
        stmt = select(DocumentModel).where(
            DocumentModel.id.in_(list(ids)),
            DocumentModel.owner_id == owner_id,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_with_segments(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a document, its segments and its conversation links.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            True if the document row was deleted
        """
        await session.execute(delete(SegmentModel).where(SegmentModel.document_id == id))
        await session.execute(
            delete(conversation_documents).where(conversation_documents.c.document_id == id)
        )
        return await self.delete_by_id(session, id)


document_crud = DocumentCRUD()
