"""
Pipeline result model for document processing.

Represents the outcome of processing a document through the pipeline.
Nothing in it is persisted yet; the caller writes document and segments
in one transaction.

Dependencies: pydantic
System role: Return type for DocumentPipeline.process()
"""

from pydantic import BaseModel, Field

from .text_segment import TextSegment


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    media_type: str = Field(description="Media type the text was extracted from")
    text_length: int = Field(description="Length of the extracted text in characters")
    segments: list[TextSegment] = Field(description="Embedded segments in ordinal order")
    suggested_questions: list[str] = Field(default_factory=list)
    processing_time_ms: float = Field(description="Total processing time in milliseconds")

    @property
    def segment_count(self) -> int:
        return len(self.segments)
