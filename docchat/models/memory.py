"""
Conversation memory models.

Dependencies: pydantic
System role: Memory manager contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

from docchat.models.message import ChatMessage


class OptimizedContext(BaseModel):
    """Bounded context handed to answer generation."""

    history: list[ChatMessage] = Field(default_factory=list)
    summary: str | None = None
    should_summarize: bool = Field(
        default=False,
        description="Live conversation is over threshold; compaction should be attempted",
    )


class OptimizationResult(BaseModel):
    """Outcome of a compaction attempt."""

    optimized: bool
    summary: str | None = None
    message_count: int = Field(default=0, description="Messages folded into the summary")


class MemoryStats(BaseModel):
    """Diagnostic memory accounting for a conversation."""

    message_count: int
    is_summarized: bool
    summary_length: int = 0
    last_summarized_at: datetime | None = None
    efficiency: float = Field(ge=0.0, le=1.0)


class ConversationMemory(BaseModel):
    """Current memory view of a conversation."""

    history: list[ChatMessage]
    summary: str | None = None
    message_count: int
    is_summarized: bool
