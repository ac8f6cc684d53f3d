"""
Integration tests for MemoryManager.

Drives the Live -> Summarized -> Live state machine against an in-memory
database with a fake chat model behind the summarizer.

Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Verification of conversation memory compaction
"""

import uuid
from datetime import timedelta

import pytest
from langchain_core.language_models import FakeListChatModel

from docchat.boundary.db.base import utcnow
from docchat.boundary.db.CRUD import conversation_crud, message_crud
from docchat.boundary.db.models import MessageRole
from docchat.core.exceptions import NotFoundError, SummarizationFailedError
from docchat.core.memory import ConversationSummarizer, MemoryManager

SUMMARY = "The user asked about photosynthesis and chloroplasts."


def make_manager(memory_settings, reply: str = SUMMARY) -> MemoryManager:
    summarizer = ConversationSummarizer(FakeListChatModel(responses=[reply]), timeout_seconds=5)
    return MemoryManager(summarizer, memory_settings)


async def add_messages(db, conversation_id, count: int, start: int = 0) -> None:
    for i in range(start, start + count):
        role = MessageRole.USER if i % 2 == 0 else MessageRole.ASSISTANT
        await message_crud.append(db, conversation_id, role, f"message {i}")
        await conversation_crud.increment_message_count(db, conversation_id)
    await db.commit()


@pytest.fixture
async def conversation(test_async_db):
    """Empty Live conversation."""
    conversation = await conversation_crud.create(test_async_db, owner_id="alice", title="Chat")
    await test_async_db.commit()
    return conversation


class TestShouldSummarize:
    """Test suite for the compaction threshold."""

    @pytest.mark.asyncio
    async def test_should_summarize_at_threshold(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test compaction is signalled once message_count reaches the threshold."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 3)
        await test_async_db.refresh(conversation)
        below = manager.should_summarize(conversation)

        # Act
        await add_messages(test_async_db, conversation.id, 1, start=3)
        await test_async_db.refresh(conversation)

        # Assert
        assert below is False
        assert manager.should_summarize(conversation) is True


class TestGetOptimizedContext:
    """Test suite for MemoryManager.get_optimized_context()."""

    @pytest.mark.asyncio
    async def test_live_under_threshold_returns_full_history(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test the whole history is returned without a summary."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 3)
        await test_async_db.refresh(conversation)

        # Act
        context = await manager.get_optimized_context(test_async_db, conversation)

        # Assert
        assert [m.content for m in context.history] == ["message 0", "message 1", "message 2"]
        assert context.summary is None
        assert context.should_summarize is False

    @pytest.mark.asyncio
    async def test_live_over_threshold_returns_recent_and_signal(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test only recent messages are returned with the compaction signal."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 5)
        await test_async_db.refresh(conversation)

        # Act
        context = await manager.get_optimized_context(test_async_db, conversation)

        # Assert
        assert [m.content for m in context.history] == ["message 3", "message 4"]
        assert context.should_summarize is True

    @pytest.mark.asyncio
    async def test_summarized_returns_summary_and_unsummarized_tail(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test a Summarized conversation yields its summary plus newer messages."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 4)
        await manager.optimize_memory(test_async_db, conversation.id)
        await add_messages(test_async_db, conversation.id, 1, start=4)
        await test_async_db.refresh(conversation)

        # Act
        context = await manager.get_optimized_context(test_async_db, conversation)

        # Assert
        assert context.summary == SUMMARY
        assert [m.content for m in context.history] == ["message 4"]
        assert context.should_summarize is False


class TestOptimizeMemory:
    """Test suite for MemoryManager.optimize_memory()."""

    @pytest.mark.asyncio
    async def test_optimize_memory_should_flag_all_unsummarized_messages(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test compaction stores the summary and flags exactly the folded messages."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 5)

        # Act
        result = await manager.optimize_memory(test_async_db, conversation.id)

        # Assert
        assert result.optimized is True
        assert result.summary == SUMMARY
        assert result.message_count == 5
        await test_async_db.refresh(conversation)
        assert conversation.is_summarized is True
        assert conversation.summarized_at is not None
        messages = await message_crud.get_by_conversation(test_async_db, conversation.id)
        assert all(m.is_summarized for m in messages)

    @pytest.mark.asyncio
    async def test_optimize_memory_should_be_noop_under_threshold(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test nothing changes below the threshold."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 2)

        # Act
        result = await manager.optimize_memory(test_async_db, conversation.id)

        # Assert
        assert result.optimized is False
        await test_async_db.refresh(conversation)
        assert conversation.is_summarized is False

    @pytest.mark.asyncio
    async def test_optimize_memory_should_not_run_twice(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test a Summarized conversation is never summarized again."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 4)
        await manager.optimize_memory(test_async_db, conversation.id)
        await add_messages(test_async_db, conversation.id, 4, start=4)

        # Act
        result = await manager.optimize_memory(test_async_db, conversation.id)

        # Assert
        assert result.optimized is False
        unsummarized = await message_crud.get_by_conversation(
            test_async_db, conversation.id, unsummarized_only=True
        )
        assert len(unsummarized) == 4

    @pytest.mark.asyncio
    async def test_optimize_memory_failure_should_leave_state_unchanged(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test a failed summary flags nothing and keeps the conversation Live."""
        # Arrange
        manager = make_manager(memory_settings, reply="   ")
        await add_messages(test_async_db, conversation.id, 4)

        # Act & Assert
        with pytest.raises(SummarizationFailedError):
            await manager.optimize_memory(test_async_db, conversation.id)
        await test_async_db.refresh(conversation)
        assert conversation.is_summarized is False
        assert conversation.summary is None
        unsummarized = await message_crud.get_by_conversation(
            test_async_db, conversation.id, unsummarized_only=True
        )
        assert len(unsummarized) == 4

    @pytest.mark.asyncio
    async def test_optimize_memory_should_raise_for_unknown_conversation(
        self, test_async_db, memory_settings
    ) -> None:
        """Test a missing conversation is NotFound."""
        # Arrange
        manager = make_manager(memory_settings)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await manager.optimize_memory(test_async_db, uuid.uuid4())


class TestClearMemory:
    """Test suite for MemoryManager.clear_memory()."""

    @pytest.mark.asyncio
    async def test_clear_memory_should_return_to_live(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test clearing resets accounting but keeps messages."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 4)
        await manager.optimize_memory(test_async_db, conversation.id)

        # Act
        await manager.clear_memory(test_async_db, conversation.id)

        # Assert
        await test_async_db.refresh(conversation)
        assert conversation.is_summarized is False
        assert conversation.summary is None
        assert conversation.message_count == 0
        messages = await message_crud.get_by_conversation(
            test_async_db, conversation.id, unsummarized_only=True
        )
        assert len(messages) == 4


class TestMemoryStats:
    """Test suite for MemoryManager.get_memory_stats()."""

    @pytest.mark.asyncio
    async def test_stats_for_live_conversation_over_threshold(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test efficiency is threshold over message count when Live."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 8)
        await test_async_db.refresh(conversation)

        # Act
        stats = manager.get_memory_stats(conversation)

        # Assert
        assert stats.message_count == 8
        assert stats.is_summarized is False
        assert stats.efficiency == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_stats_for_summarized_conversation(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test efficiency compares summary length to estimated history length."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 4)
        await manager.optimize_memory(test_async_db, conversation.id)
        await test_async_db.refresh(conversation)

        # Act
        stats = manager.get_memory_stats(conversation)

        # Assert
        assert stats.is_summarized is True
        assert stats.summary_length == len(SUMMARY)
        assert stats.last_summarized_at is not None
        assert stats.efficiency == pytest.approx(len(SUMMARY) / 400)

    @pytest.mark.asyncio
    async def test_stats_for_new_conversation(
        self, conversation, memory_settings
    ) -> None:
        """Test an empty conversation is fully efficient."""
        # Act
        stats = make_manager(memory_settings).get_memory_stats(conversation)

        # Assert
        assert stats.message_count == 0
        assert stats.efficiency == 1.0


class TestPruneSummarizedMessages:
    """Test suite for MemoryManager.prune_summarized_messages()."""

    @pytest.mark.asyncio
    async def test_prune_should_delete_old_summarized_messages(
        self, test_async_db, conversation, memory_settings
    ) -> None:
        """Test only summarized messages past the retention window are removed."""
        # Arrange
        manager = make_manager(memory_settings)
        await add_messages(test_async_db, conversation.id, 4)
        await manager.optimize_memory(test_async_db, conversation.id)
        messages = await message_crud.get_by_conversation(test_async_db, conversation.id)
        old = utcnow() - timedelta(days=45)
        for message in messages[:2]:
            await message_crud.update_by_id(test_async_db, message.id, created_at=old)
        await test_async_db.commit()

        # Act
        deleted = await manager.prune_summarized_messages(test_async_db, conversation.id)

        # Assert
        assert deleted == 2
        assert await message_crud.count_by_conversation(test_async_db, conversation.id) == 2
