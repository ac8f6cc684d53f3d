"""
Chat domain models and schemas.

Dependencies: pydantic
System role: Chat turn and conversation listing contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from docchat.models.memory import MemoryStats


class ConversationOverview(BaseModel):
    """Conversation list entry with memory statistics."""

    id: uuid.UUID
    title: str
    document_ids: list[uuid.UUID]
    created_at: datetime
    updated_at: datetime
    stats: MemoryStats


class TurnResult(BaseModel):
    """Response of one chat turn."""

    answer: str
    context: list[str] = Field(description="Retrieved passages used for the answer")
    conversation_id: uuid.UUID
    should_summarize: bool
    summary: str | None = None
    stats: MemoryStats
