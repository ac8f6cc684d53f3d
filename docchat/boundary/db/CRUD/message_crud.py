"""
Message CRUD operations.

Append-only message storage with chronological reads and the
summarized-flag updates used by memory compaction.

Dependencies: sqlalchemy, docchat.boundary.db.models
System role: Chat message persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.models.message_model import MessageModel, MessageRole
from docchat.boundary.db.CRUD.base_crud import BaseCRUD


class MessageCRUD(BaseCRUD[MessageModel]):
    """
    CRUD operations for MessageModel.

    Reads always return messages in append order (created_at, sequence).
    """

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def append(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        role: MessageRole,
        content: str,
        context: dict | None = None,
    ) -> MessageModel:
        """
        Append a message to a conversation.

        Args:
            session: Async database session
            conversation_id: Conversation UUID
            role: Message author
            content: Message text
            context: Optional retrieved-context snapshot

        Returns:
            Created MessageModel
        """
        stmt = select(func.coalesce(func.max(MessageModel.sequence), 0)).where(
            MessageModel.conversation_id == conversation_id
        )
        last_sequence = (await session.execute(stmt)).scalar_one()
        return await self.create(
            session,
            conversation_id=conversation_id,
            role=role,
            content=content,
            context=context,
            is_summarized=False,
            sequence=last_sequence + 1,
        )

    async def get_by_conversation(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        limit: int | None = None,
        unsummarized_only: bool = False,
    ) -> list[MessageModel]:
        """
        Retrieve a conversation's messages in chronological order.

        When limit is set, the most recent `limit` messages are returned,
        still oldest first.

        Args:
            session: Async database session
            conversation_id: Conversation UUID
            limit: Keep only the newest N messages
            unsummarized_only: Skip messages already folded into a summary

        Returns:
            List of MessageModels, oldest first
        """
        stmt = select(MessageModel).where(MessageModel.conversation_id == conversation_id)
        if unsummarized_only:
            stmt = stmt.where(MessageModel.is_summarized.is_(False))
        stmt = stmt.order_by(MessageModel.created_at.desc(), MessageModel.sequence.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))

    async def count_by_conversation(self, session: AsyncSession, conversation_id: UUID) -> int:
        """Count stored messages for a conversation."""
        stmt = select(func.count(MessageModel.id)).where(
            MessageModel.conversation_id == conversation_id
        )
        return (await session.execute(stmt)).scalar_one()

    async def mark_summarized(self, session: AsyncSession, ids: Sequence[UUID]) -> int:
        """
        Flag the given messages as folded into a summary.

        Args:
            session: Async database session
            ids: Message UUIDs

        Returns:
            Number of rows updated
        """
        if not ids:
            return 0
        stmt = (
            update(MessageModel)
            .where(MessageModel.id.in_(list(ids)))
            .values(is_summarized=True)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def reset_summarized(self, session: AsyncSession, conversation_id: UUID) -> int:
        """
        Clear the summarized flag on every message of a conversation.

        Args:
            session: Async database session
            conversation_id: Conversation UUID

        Returns:
            Number of rows updated
        """
        stmt = (
            update(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .values(is_summarized=False)
        )
        result = await session.execute(stmt)
        return result.rowcount

    async def delete_summarized_before(
        self,
        session: AsyncSession,
        conversation_id: UUID,
        cutoff: datetime,
    ) -> int:
        """
        Delete summarized messages created before the cutoff.

        Args:
            session: Async database session
            conversation_id: Conversation UUID
            cutoff: Messages strictly older than this are removed

        Returns:
            Number of rows deleted
        """
        stmt = delete(MessageModel).where(
            MessageModel.conversation_id == conversation_id,
            MessageModel.is_summarized.is_(True),
            MessageModel.created_at < cutoff,
        ).execution_options(synchronize_session=False)
        result = await session.execute(stmt)
        return result.rowcount


message_crud = MessageCRUD()
