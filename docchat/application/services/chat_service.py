"""
Chat service for document-grounded conversations.

Orchestrates one chat turn: conversation lookup or creation, bounded
memory, question embedding, owner-scoped retrieval, answer generation,
optional compaction and message persistence. Also exposes the
conversation and memory management operations.

Every operation is scoped to the caller: a conversation owned by someone
else is reported as not found.

Dependencies: docchat.core.memory, docchat.core.retrieval, docchat.core.chat, docchat.boundary.db
System role: Chat service orchestration layer (turn orchestrator)
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.conversation_crud import conversation_crud
from docchat.boundary.db.CRUD.document_crud import document_crud
from docchat.boundary.db.CRUD.message_crud import message_crud
from docchat.boundary.db.models.conversation_model import ConversationModel
from docchat.boundary.db.models.message_model import MessageRole
from docchat.configs import RetrievalSettings, get_settings
from docchat.core.chat.responder import AnswerGenerator
from docchat.core.document_processing.tasks import EmbeddingTask
from docchat.core.exceptions import (
    InvalidInputError,
    NotFoundError,
    SummarizationFailedError,
)
from docchat.core.memory.context import dump_context
from docchat.core.memory.memory_manager import MemoryManager, to_chat_message
from docchat.core.retrieval.retriever import SegmentRetriever
from docchat.models.chat import ConversationOverview, TurnResult
from docchat.models.memory import ConversationMemory, MemoryStats, OptimizationResult
from docchat.models.message import ChatMessage, ContextSegment, SegmentContext
from docchat.observability import (
    clear_correlation_id,
    log_exception_with_context,
    log_with_context,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 50


def make_title(question: str) -> str:
    """First 50 characters of the question, with an ellipsis when truncated."""
    if len(question) > TITLE_MAX_LENGTH:
        return question[:TITLE_MAX_LENGTH] + "..."
    return question


class ChatService:
    """
    Chat service for conversational Q&A over uploaded documents.

    Coordinates conversation validation, memory, retrieval, answer
    generation and message persistence for multi-turn conversations.
    """

    def __init__(
        self,
        db: AsyncSession,
        embedding_task: EmbeddingTask,
        memory_manager: MemoryManager,
        answer_generator: AnswerGenerator,
        retriever: SegmentRetriever | None = None,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for database operations
            embedding_task: Embeds questions for retrieval
            memory_manager: Conversation memory manager
            answer_generator: Completion function for answers
            retriever: Segment retriever (created if None)
            settings: Retrieval settings (global settings if None)
        """
        self.db = db
        self.embedding_task = embedding_task
        self.memory = memory_manager
        self.answer_generator = answer_generator
        self.retriever = retriever or SegmentRetriever()
        self._settings = settings or get_settings().retrieval

    async def _get_owned(self, owner_id: str, conversation_id: UUID) -> ConversationModel:
        conversation = await conversation_crud.get_for_owner(self.db, conversation_id, owner_id)
        if conversation is None:
            raise NotFoundError("conversation", str(conversation_id))
        return conversation

    async def _resolve_documents(
        self,
        owner_id: str,
        document_ids: Sequence[UUID],
    ) -> list[UUID]:
        """Owned subset of the requested ids, in request order, without duplicates."""
        owned = {
            d.id for d in await document_crud.get_many_for_owner(self.db, document_ids, owner_id)
        }
        resolved = []
        for doc_id in document_ids:
            if doc_id in owned and doc_id not in resolved:
                resolved.append(doc_id)
        return resolved

    async def _append(
        self,
        conversation_id: UUID,
        role: MessageRole,
        content: str,
        context: dict | None = None,
    ) -> None:
        try:
            await message_crud.append(self.db, conversation_id, role, content, context)
            await conversation_crud.increment_message_count(self.db, conversation_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

    async def process_turn(
        self,
        owner_id: str,
        question: str,
        document_ids: Sequence[UUID],
        conversation_id: UUID | None = None,
    ) -> TurnResult:
        """
        Answer one question within a conversation.

        Flow:
        1. Find the owner's conversation or create one linked to the documents
        2. Read the bounded memory context
        3. Store the user message
        4. Embed the question and retrieve the top-k owned segments
        5. Generate the answer
        6. Compact memory when signalled (failure is logged, the turn succeeds)
        7. Store the assistant message with its context snapshot

        Args:
            owner_id: Caller identity
            question: User question
            document_ids: Documents to search; for an existing conversation an
                empty list means its linked documents
            conversation_id: Existing conversation, or None to start one

        Returns:
            TurnResult: Answer, passages, conversation id, memory state

        Raises:
            InvalidInputError: Empty question
            NotFoundError: Unknown or foreign conversation
            EmbeddingFailedError: Question could not be embedded
            CompletionFailedError: Answer generation failed
        """
        question = question.strip() if question else ""
        if not question:
            raise InvalidInputError("Question must not be empty", "question")

        set_correlation_id()
        try:
            requested = await self._resolve_documents(owner_id, document_ids)

            if conversation_id is not None:
                conversation = await self._get_owned(owner_id, conversation_id)
                linked = [d.id for d in conversation.documents]
                new_links = [d for d in requested if d not in linked]
                if new_links:
                    try:
                        await conversation_crud.link_documents(self.db, conversation.id, new_links)
                        await self.db.commit()
                    except Exception:
                        await self.db.rollback()
                        raise
                search_ids = requested or linked
            else:
                try:
                    conversation = await conversation_crud.create(
                        self.db,
                        owner_id=owner_id,
                        title=make_title(question),
                    )
                    await conversation_crud.link_documents(self.db, conversation.id, requested)
                    await self.db.commit()
                except Exception:
                    await self.db.rollback()
                    raise
                search_ids = requested
            conversation_id = conversation.id

            optimized = await self.memory.get_optimized_context(self.db, conversation)

            await self._append(conversation_id, MessageRole.USER, question)

            query_vector = await self.embedding_task.embed_query(question)
            retrieved = await self.retriever.find_similar(
                self.db,
                query_vector,
                self._settings.top_k,
                search_ids,
                owner_id=owner_id,
            )
            passages = [segment.content for segment in retrieved]

            answer = await self.answer_generator.generate(
                question,
                passages,
                history=optimized.history,
                summary=optimized.summary,
            )

            summary = optimized.summary
            if optimized.should_summarize:
                try:
                    result = await self.memory.optimize_memory(self.db, conversation_id)
                    if result.optimized:
                        summary = result.summary
                except SummarizationFailedError as e:
                    log_exception_with_context(
                        logger,
                        f"{__name__}:process_turn - Compaction failed; continuing without it",
                        e,
                        conversation_id=conversation_id,
                    )

            snapshot = SegmentContext(
                segments=[
                    ContextSegment(
                        document_id=str(segment.document_id),
                        ordinal=segment.ordinal,
                        content=segment.content,
                        score=segment.score,
                    )
                    for segment in retrieved
                ]
            )
            await self._append(
                conversation_id,
                MessageRole.ASSISTANT,
                answer,
                dump_context(snapshot),
            )

            await self.db.refresh(conversation)
            stats = self.memory.get_memory_stats(conversation)

            log_with_context(
                logger,
                logging.INFO,
                f"{__name__}:process_turn - Answered turn in conversation {conversation_id}",
                owner_id=owner_id,
                conversation_id=conversation_id,
                passages=len(passages),
                message_count=stats.message_count,
                is_summarized=stats.is_summarized,
            )
            return TurnResult(
                answer=answer,
                context=passages,
                conversation_id=conversation_id,
                should_summarize=optimized.should_summarize,
                summary=summary,
                stats=stats,
            )
        finally:
            clear_correlation_id()

    async def get_history(
        self,
        owner_id: str,
        conversation_id: UUID,
        limit: int | None = None,
    ) -> list[ChatMessage]:
        """
        Full stored history of a conversation, oldest first.

        Includes messages already folded into the summary.

        Raises:
            NotFoundError: Unknown or foreign conversation
        """
        await self._get_owned(owner_id, conversation_id)
        messages = await message_crud.get_by_conversation(self.db, conversation_id, limit=limit)
        return [to_chat_message(m) for m in messages]

    async def list_conversations(self, owner_id: str) -> list[ConversationOverview]:
        """List the owner's conversations, most recently updated first."""
        conversations = await conversation_crud.get_by_owner(self.db, owner_id)
        return [
            ConversationOverview(
                id=c.id,
                title=c.title,
                document_ids=[d.id for d in c.documents],
                created_at=c.created_at,
                updated_at=c.updated_at,
                stats=self.memory.get_memory_stats(c),
            )
            for c in conversations
        ]

    async def delete_conversation(self, owner_id: str, conversation_id: UUID) -> None:
        """
        Delete a conversation and all of its messages.

        Raises:
            NotFoundError: Unknown or foreign conversation
        """
        await self._get_owned(owner_id, conversation_id)
        try:
            await conversation_crud.delete_with_messages(self.db, conversation_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info(f"{__name__}:delete_conversation - Deleted conversation {conversation_id}")

    async def summarize_conversation(
        self,
        owner_id: str,
        conversation_id: UUID,
    ) -> OptimizationResult:
        """
        Compact a conversation on request.

        Raises:
            NotFoundError: Unknown or foreign conversation
            InvalidInputError: Already summarized or under the threshold
            SummarizationFailedError: Summarizer failed; state unchanged
        """
        await self._get_owned(owner_id, conversation_id)
        result = await self.memory.optimize_memory(self.db, conversation_id)
        if not result.optimized:
            raise InvalidInputError(
                "Conversation has nothing to summarize",
                "conversation_id",
                {"conversation_id": str(conversation_id)},
            )
        return result

    async def clear_memory(self, owner_id: str, conversation_id: UUID) -> MemoryStats:
        """
        Reset a conversation's memory to a fresh Live state.

        Raises:
            NotFoundError: Unknown or foreign conversation
        """
        conversation = await self._get_owned(owner_id, conversation_id)
        await self.memory.clear_memory(self.db, conversation_id)
        await self.db.refresh(conversation)
        return self.memory.get_memory_stats(conversation)

    async def get_memory_stats(self, owner_id: str, conversation_id: UUID) -> MemoryStats:
        """
        Memory statistics of an owned conversation.

        Raises:
            NotFoundError: Unknown or foreign conversation
        """
        conversation = await self._get_owned(owner_id, conversation_id)
        return self.memory.get_memory_stats(conversation)

    async def get_memory(self, owner_id: str, conversation_id: UUID) -> ConversationMemory:
        """
        Memory view used for the next turn: bounded history and summary.

        Raises:
            NotFoundError: Unknown or foreign conversation
        """
        conversation = await self._get_owned(owner_id, conversation_id)
        optimized = await self.memory.get_optimized_context(self.db, conversation)
        return ConversationMemory(
            history=optimized.history,
            summary=optimized.summary,
            message_count=conversation.message_count,
            is_summarized=conversation.is_summarized,
        )
