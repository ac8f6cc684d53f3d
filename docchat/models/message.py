"""
Message models.

Message context snapshots are a tagged union: either a plain list of
passages or a list of structured segment references. Stored JSON is
normalized into one of the two variants when read.

Dependencies: pydantic
System role: Chat message contracts
"""

import uuid
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from docchat.boundary.db.models.message_model import MessageRole


class ContextSegment(BaseModel):
    """Reference to a retrieved segment."""

    document_id: str | None = None
    ordinal: int | None = None
    content: str
    score: float | None = None


class PassageContext(BaseModel):
    """Context recorded as bare passage strings."""

    kind: Literal["passages"] = "passages"
    passages: list[str] = Field(default_factory=list)

    def texts(self) -> list[str]:
        return list(self.passages)


class SegmentContext(BaseModel):
    """Context recorded as structured segment references."""

    kind: Literal["segments"] = "segments"
    segments: list[ContextSegment] = Field(default_factory=list)

    def texts(self) -> list[str]:
        return [segment.content for segment in self.segments]


MessageContext = Annotated[Union[PassageContext, SegmentContext], Field(discriminator="kind")]


class ChatMessage(BaseModel):
    """Single chat message in history."""

    id: uuid.UUID
    role: MessageRole
    content: str
    context: MessageContext | None = None
    is_summarized: bool = False
    created_at: datetime
