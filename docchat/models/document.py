"""
Document domain models.

Dependencies: pydantic
System role: Document and retrieval contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentInfo(BaseModel):
    """Persisted document as returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: str
    filename: str
    media_type: str
    size_bytes: int
    storage_key: str
    segment_count: int
    suggested_questions: list[str] = Field(default_factory=list)
    created_at: datetime


class ScoredSegment(BaseModel):
    """A retrieved segment with its similarity to the query."""

    segment_id: uuid.UUID
    document_id: uuid.UUID
    ordinal: int
    content: str
    start_char: int
    end_char: int
    score: float = Field(description="Cosine similarity in [-1, 1]")
