"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for segmentation, embedding
fan-out and prompt suggestion generation.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Segmentation settings
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Target segment size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        description="Overlap between consecutive segments",
    )
    separators: list[str] = Field(
        default=["\n\n", "\n", " ", ""],
        description="Split priority: paragraph, line, word, character",
    )

    # Embedding settings
    embedding_concurrency: int = Field(
        default=8,
        gt=0,
        description="Maximum embedding requests in flight per document",
    )
    embedding_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to each embedding request",
    )

    # Prompt suggestions
    suggestion_count: int = Field(
        default=6,
        ge=0,
        description="Number of suggested questions generated per document",
    )
    suggestion_min_chars: int = Field(
        default=100,
        description="Documents with less extracted text get no suggestions",
    )
    suggestion_max_input_chars: int = Field(
        default=8000,
        description="Leading characters of the document shown to the model",
    )
    suggestion_max_length: int = Field(
        default=80,
        description="Maximum length of a single suggested question",
    )

    @model_validator(mode="after")
    def _overlap_smaller_than_chunk(self) -> "PipelineSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self
