"""
Text segment model for document processing pipeline.

Represents one span of extracted text with its character offsets and,
once embedded, its vector.

Dependencies: pydantic
System role: Data structure for segments in the ingestion pipeline
"""

from pydantic import BaseModel, Field


class TextSegment(BaseModel):
    """Document segment with optional embedding vector."""

    ordinal: int = Field(ge=0, description="Zero-based position within the document")
    content: str = Field(description="Segment text")
    start_char: int = Field(ge=0, description="Offset of the first character in the source text")
    end_char: int = Field(ge=0, description="Offset one past the last character")
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
