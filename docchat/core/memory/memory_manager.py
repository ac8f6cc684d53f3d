"""
Conversation memory manager.

Keeps the prompt context of a conversation bounded. Each conversation is
Live until its message count reaches the threshold; compaction then folds
every unsummarized message into one summary and flips it to Summarized.
Only an explicit clear returns it to Live.

Compaction and clearing commit their own transaction; call them with no
pending changes on the session.

Dependencies: sqlalchemy, docchat.boundary.db
System role: Conversation memory state machine
"""

import logging
from datetime import timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.base import utcnow
from docchat.boundary.db.CRUD.conversation_crud import conversation_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.models.conversation_model import ConversationModel
from docchat.boundary.db.models.message_model import MessageModel
from docchat.configs import MemorySettings, get_settings
from docchat.core.exceptions import NotFoundError
from docchat.core.memory.context import normalize_context
from docchat.core.memory.summarizer import ConversationSummarizer
from docchat.models.memory import MemoryStats, OptimizationResult, OptimizedContext
from docchat.models.message import ChatMessage

logger = logging.getLogger(__name__)


def to_chat_message(message: MessageModel) -> ChatMessage:
    """Convert a stored message into its value object with normalized context."""
    return ChatMessage(
        id=message.id,
        role=message.role,
        content=message.content,
        context=normalize_context(message.context),
        is_summarized=message.is_summarized,
        created_at=message.created_at,
    )


class MemoryManager:
    """Decide when to compact conversation history and build bounded context."""

    def __init__(
        self,
        summarizer: ConversationSummarizer,
        settings: MemorySettings | None = None,
    ) -> None:
        """
        Initialize memory manager.

        Args:
            summarizer: Summarization function
            settings: Memory thresholds (defaults to global settings)
        """
        self._summarizer = summarizer
        self._settings = settings or get_settings().memory

    @property
    def settings(self) -> MemorySettings:
        return self._settings

    async def _load(self, db: AsyncSession, conversation_id: UUID) -> ConversationModel:
        conversation = await db.get(ConversationModel, conversation_id, populate_existing=True)
        if conversation is None:
            raise NotFoundError("conversation", str(conversation_id))
        return conversation

    def should_summarize(self, conversation: ConversationModel) -> bool:
        """True iff the conversation is Live and its message count reached the threshold."""
        return (
            not conversation.is_summarized
            and conversation.message_count >= self._settings.max_messages_before_summary
        )

    async def get_optimized_context(
        self,
        db: AsyncSession,
        conversation: ConversationModel,
    ) -> OptimizedContext:
        """
        Build the bounded history handed to answer generation.

        Summarized: summary plus the most recent unsummarized messages.
        Live over threshold: most recent messages, with should_summarize set.
        Live under threshold: full history up to max_history_length.

        Args:
            db: Async database session
            conversation: Conversation to read

        Returns:
            OptimizedContext: history (oldest first), optional summary, compaction signal
        """
        if conversation.is_summarized:
            messages = await message_crud.get_by_conversation(
                db,
                conversation.id,
                limit=self._settings.recent_messages_for_context,
                unsummarized_only=True,
            )
            return OptimizedContext(
                history=[to_chat_message(m) for m in messages],
                summary=conversation.summary,
                should_summarize=False,
            )

        if self.should_summarize(conversation):
            messages = await message_crud.get_by_conversation(
                db,
                conversation.id,
                limit=self._settings.recent_messages_for_context,
            )
            return OptimizedContext(
                history=[to_chat_message(m) for m in messages],
                summary=None,
                should_summarize=True,
            )

        messages = await message_crud.get_by_conversation(
            db,
            conversation.id,
            limit=self._settings.max_history_length,
        )
        return OptimizedContext(history=[to_chat_message(m) for m in messages])

    async def optimize_memory(self, db: AsyncSession, conversation_id: UUID) -> OptimizationResult:
        """
        Compact a Live conversation that reached the threshold.

        No-op when already Summarized, under threshold, or nothing is left
        to summarize. Otherwise summarizes every unsummarized message, then in
        one transaction stores the summary (compare-and-swap on the Live
        state) and flags exactly the summarized messages.

        Args:
            db: Async database session
            conversation_id: Conversation UUID

        Returns:
            OptimizationResult: optimized flag, summary, number of messages folded

        Raises:
            NotFoundError: If the conversation does not exist
            SummarizationFailedError: If the summarizer fails (state unchanged)
        """
        conversation = await self._load(db, conversation_id)
        if not self.should_summarize(conversation):
            return OptimizationResult(optimized=False, message_count=0)

        messages = await message_crud.get_by_conversation(db, conversation_id, unsummarized_only=True)
        if not messages:
            return OptimizationResult(optimized=False, message_count=0)

        summary = await self._summarizer.summarize(messages, str(conversation_id))

        try:
            swapped = await conversation_crud.mark_summarized(
                db, conversation_id, summary, utcnow()
            )
            if not swapped:
                await db.rollback()
                logger.info(
                    f"{__name__}:optimize_memory - Conversation {conversation_id} "
                    f"was summarized concurrently; discarding summary"
                )
                return OptimizationResult(optimized=False, message_count=0)
            flagged = await message_crud.mark_summarized(db, [m.id for m in messages])
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            f"{__name__}:optimize_memory - Summarized {flagged} message(s) "
            f"for conversation {conversation_id}"
        )
        return OptimizationResult(optimized=True, summary=summary, message_count=len(messages))

    async def clear_memory(self, db: AsyncSession, conversation_id: UUID) -> None:
        """
        Reset memory accounting to a fresh Live state. Messages are kept.

        Raises:
            NotFoundError: If the conversation does not exist
        """
        await self._load(db, conversation_id)
        try:
            await conversation_crud.reset_memory(db, conversation_id)
            await message_crud.reset_summarized(db, conversation_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(f"{__name__}:clear_memory - Cleared memory of conversation {conversation_id}")

    def get_memory_stats(self, conversation: ConversationModel) -> MemoryStats:
        """
        Diagnostic memory statistics.

        Efficiency is a heuristic in [0, 1]: summary length over an estimate of
        the raw history length when Summarized, threshold over message count
        when Live and over threshold, otherwise 1.
        """
        count = conversation.message_count
        threshold = self._settings.max_messages_before_summary
        summary = conversation.summary or ""

        if conversation.is_summarized and summary:
            estimated = count * self._settings.chars_per_message_estimate
            efficiency = min(1.0, len(summary) / estimated) if estimated > 0 else 1.0
        elif count > threshold:
            efficiency = threshold / count
        else:
            efficiency = 1.0

        return MemoryStats(
            message_count=count,
            is_summarized=conversation.is_summarized,
            summary_length=len(summary),
            last_summarized_at=conversation.summarized_at,
            efficiency=max(0.0, min(1.0, efficiency)),
        )

    async def prune_summarized_messages(
        self,
        db: AsyncSession,
        conversation_id: UUID,
        older_than_days: int | None = None,
    ) -> int:
        """
        Delete summarized messages older than the retention window.

        Args:
            db: Async database session
            conversation_id: Conversation UUID
            older_than_days: Window in days (defaults to prune_after_days)

        Returns:
            int: Number of messages deleted
        """
        days = self._settings.prune_after_days if older_than_days is None else older_than_days
        cutoff = utcnow() - timedelta(days=days)
        try:
            deleted = await message_crud.delete_summarized_before(db, conversation_id, cutoff)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            f"{__name__}:prune_summarized_messages - Deleted {deleted} summarized message(s) "
            f"older than {days} day(s) from conversation {conversation_id}"
        )
        return deleted
