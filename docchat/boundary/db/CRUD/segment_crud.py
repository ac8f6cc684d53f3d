"""
Segment CRUD operations.

Bulk insertion of a document's segments and owner-scoped candidate
reads for similarity search.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Segment persistence operations
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.models.document_model import DocumentModel
from docchat.boundary.db.models.segment_model import SegmentModel
from docchat.boundary.db.CRUD.base_crud import BaseCRUD


class SegmentCRUD(BaseCRUD[SegmentModel]):
    """CRUD operations for SegmentModel."""

    def __init__(self) -> None:
        """Initialize SegmentCRUD with SegmentModel."""
        super().__init__(SegmentModel)

    async def create_many(
        self,
        session: AsyncSession,
        document_id: UUID,
        segments: Sequence[Any],
    ) -> list[SegmentModel]:
        """
        Insert all segments of a document in one flush.

        Args:
            session: Async database session
            document_id: Owning document UUID
            segments: Items exposing ordinal, content, start_char, end_char, embedding

        Returns:
            Created SegmentModel instances in ordinal order
        """
        instances = [
            SegmentModel(
                document_id=document_id,
                ordinal=segment.ordinal,
                content=segment.content,
                start_char=segment.start_char,
                end_char=segment.end_char,
                embedding=list(segment.embedding),
            )
            for segment in segments
        ]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[SegmentModel]:
        """
        Retrieve a document's segments ordered by ordinal.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            Sequence of SegmentModels
        """
        stmt = (
            select(SegmentModel)
            .where(SegmentModel.document_id == document_id)
            .order_by(SegmentModel.ordinal)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_candidates(
        self,
        session: AsyncSession,
        document_ids: Sequence[UUID],
        owner_id: str | None = None,
    ) -> Sequence[SegmentModel]:
        """
        Retrieve every segment of the given documents, optionally owner-scoped.

        Args:
            session: Async database session
            document_ids: Documents to search
            owner_id: When set, only documents owned by this identity qualify

        Returns:
            Sequence of SegmentModels ordered by document then ordinal
        """
        if not document_ids:
            return []
        stmt = (
            select(SegmentModel)
            .join(DocumentModel, SegmentModel.document_id == DocumentModel.id)
            .where(SegmentModel.document_id.in_(list(document_ids)))
        )
        if owner_id is not None:
            stmt = stmt.where(DocumentModel.owner_id == owner_id)
        stmt = stmt.order_by(SegmentModel.document_id, SegmentModel.ordinal)
        result = await session.execute(stmt)
        return result.scalars().all()


segment_crud = SegmentCRUD()
