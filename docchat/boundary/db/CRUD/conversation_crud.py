"""
Conversation CRUD operations.

Provides owner-scoped reads and the memory-accounting updates
(message counting, summary compare-and-swap, memory reset).

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Conversation persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from docchat.boundary.db.models.conversation_model import (
    ConversationModel,
    conversation_documents,
)
from docchat.boundary.db.models.message_model import MessageModel
from docchat.boundary.db.CRUD.base_crud import BaseCRUD


class ConversationCRUD(BaseCRUD[ConversationModel]):
    """
    CRUD operations for ConversationModel.

    Extends BaseCRUD with owner scoping, eager loading of linked
    documents and atomic memory-state transitions.
    """

    def __init__(self) -> None:
        """Initialize ConversationCRUD with ConversationModel."""
        super().__init__(ConversationModel)

    async def get_for_owner(
        self,
        session: AsyncSession,
        id: UUID,
        owner_id: str,
    ) -> ConversationModel | None:
        """
        Retrieve an owned conversation with its documents loaded.

        Args:
            session: Async database session
            id: Conversation UUID
            owner_id: Owner identity

        Returns:
            ConversationModel if found and owned, None otherwise
        """
        stmt = (
            select(ConversationModel)
            .where(
                ConversationModel.id == id,
                ConversationModel.owner_id == owner_id,
            )
            .options(selectinload(ConversationModel.documents))
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ConversationModel]:
        """
        Retrieve an owner's conversations, most recently updated first.

        Args:
            session: Async database session
            owner_id: Owner identity
            limit: Maximum number of conversations to return
            offset: Number of conversations to skip

        Returns:
            Sequence of ConversationModels with documents loaded
        """
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.owner_id == owner_id)
            .options(selectinload(ConversationModel.documents))
            .order_by(ConversationModel.updated_at.desc())
            .execution_options(populate_existing=True)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def increment_message_count(
        self,
        session: AsyncSession,
        id: UUID,
        by: int = 1,
    ) -> ConversationModel | None:
        """
        Atomically add to a conversation's message count.

        Args:
            session: Async database session
            id: Conversation UUID
            by: Amount to add

        Returns:
            Updated ConversationModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            message_count=ConversationModel.message_count + by,
        )

    async def mark_summarized(
        self,
        session: AsyncSession,
        id: UUID,
        summary: str,
        summarized_at: datetime,
    ) -> bool:
        """
        Flip a Live conversation to Summarized.

        Compare-and-swap on is_summarized: the row only changes when it is
        still Live, so two concurrent compactions cannot both succeed.

        Args:
            session: Async database session
            id: Conversation UUID
            summary: Non-empty summary text
            summarized_at: Summary timestamp

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(ConversationModel)
            .where(
                ConversationModel.id == id,
                ConversationModel.is_summarized.is_(False),
            )
            .values(
                is_summarized=True,
                summary=summary,
                summarized_at=summarized_at,
            )
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def reset_memory(self, session: AsyncSession, id: UUID) -> ConversationModel | None:
        """
        Return a conversation to a fresh Live state.

        Args:
            session: Async database session
            id: Conversation UUID

        Returns:
            Updated ConversationModel if found, None otherwise
        """
        return await self.update_by_id(
            session,
            id,
            is_summarized=False,
            summary=None,
            summarized_at=None,
            message_count=0,
        )

    async def link_documents(
        self,
        session: AsyncSession,
        id: UUID,
        document_ids: Sequence[UUID],
    ) -> None:
        """
        Associate documents with a conversation.

        Args:
            session: Async database session
            id: Conversation UUID
            document_ids: Documents to link (caller has checked ownership)
        """
        if not document_ids:
            return
        await session.execute(
            conversation_documents.insert(),
            [{"conversation_id": id, "document_id": doc_id} for doc_id in document_ids],
        )

    async def delete_with_messages(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a conversation, its messages and its document links.

        Args:
            session: Async database session
            id: Conversation UUID

        Returns:
            True if the conversation row was deleted
        """
        await session.execute(delete(MessageModel).where(MessageModel.conversation_id == id))
        await session.execute(
            delete(conversation_documents).where(conversation_documents.c.conversation_id == id)
        )
        return await self.delete_by_id(session, id)


conversation_crud = ConversationCRUD()
