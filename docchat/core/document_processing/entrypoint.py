"""
Document pipeline orchestrator.

Coordinates extraction, segmentation, embedding and suggestion tasks.
The pipeline persists nothing: a document is only written by the caller
once every segment carries an embedding.

Dependencies: All task modules, docchat.configs, docchat.boundary.llm
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel

from docchat.boundary.llm import get_chat_model, get_embeddings
from docchat.configs import PipelineSettings, get_settings
from docchat.core.exceptions import DocumentProcessingError
from .models import PipelineResult
from .tasks import (
    EmbeddingTask,
    ExtractionTask,
    SegmentationTask,
    SuggestionTask,
)

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: extract -> segment -> embed -> suggest."""

    def __init__(
        self,
        settings: PipelineSettings | None = None,
        embeddings: Embeddings | None = None,
        chat_model: BaseChatModel | None = None,
        embedding_dimension: int | None = None,
    ) -> None:
        """
        Initialize pipeline with configuration.

        Args:
            settings: Pipeline settings (uses global settings if None)
            embeddings: Embedding client (configured Google embeddings if None)
            chat_model: Chat model for suggestions (configured Google model if None)
            embedding_dimension: Expected vector length; defaults to the configured
                dimension when the default embedding client is used
        """
        self._settings = settings or get_settings().pipeline

        if embeddings is None:
            embeddings = get_embeddings()
            if embedding_dimension is None:
                embedding_dimension = get_settings().llm.embedding_dimension
        if chat_model is None:
            chat_model = get_chat_model()

        self._extraction_task = ExtractionTask()
        self._segmentation_task = SegmentationTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            separators=self._settings.separators,
        )
        self._embedding_task = EmbeddingTask(
            embeddings,
            concurrency=self._settings.embedding_concurrency,
            timeout_seconds=self._settings.embedding_timeout_seconds,
            dimension=embedding_dimension,
        )
        self._suggestion_task = SuggestionTask(
            chat_model,
            count=self._settings.suggestion_count,
            min_chars=self._settings.suggestion_min_chars,
            max_input_chars=self._settings.suggestion_max_input_chars,
            max_length=self._settings.suggestion_max_length,
        )

    @property
    def embedding_task(self) -> EmbeddingTask:
        """Embedding task, shared with query embedding at chat time."""
        return self._embedding_task

    async def process(self, data: bytes, media_type: str) -> PipelineResult:
        """
        Process a document payload through the full pipeline.

        Args:
            data: Raw document bytes
            media_type: Declared media type

        Returns:
            PipelineResult: Embedded segments and suggestions

        Raises:
            UnsupportedMediaTypeError: Media type outside the supported set
            ExtractionError: Document could not be parsed
            DocumentProcessingError: Document has no extractable text
            EmbeddingFailedError: Any segment failed to embed
        """
        start_time = time.perf_counter()

        text = await asyncio.to_thread(self._extraction_task.extract, data, media_type)
        segments = await asyncio.to_thread(self._segmentation_task.segment, text)
        if not segments:
            raise DocumentProcessingError(
                "Document contains no extractable text",
                details={"media_type": media_type, "size": len(data)},
            )

        vectors = await self._embedding_task.embed_texts([s.content for s in segments])
        for segment, vector in zip(segments, vectors):
            segment.embedding = vector

        suggestions = await self._suggestion_task.suggest(text)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{__name__}:process - Processed {media_type} document: "
            f"{len(text)} chars, {len(segments)} segment(s), "
            f"{len(suggestions)} suggestion(s) in {elapsed_ms:.0f}ms"
        )
        return PipelineResult(
            media_type=media_type,
            text_length=len(text),
            segments=segments,
            suggested_questions=suggestions,
            processing_time_ms=elapsed_ms,
        )
