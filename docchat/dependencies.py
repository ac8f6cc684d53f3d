"""
Dependency injection container.

Factory functions wiring configured model clients, stores and settings
into the application services. Stateless collaborators are cached for
the process; services are built per database session.

Dependencies: docchat.configs, docchat.application, docchat.boundary, docchat.core
System role: DI container for service construction
"""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.application.services import ChatService, DocumentService, UploadService
from docchat.boundary.blob import BlobStore, get_blob_store
from docchat.boundary.llm import get_chat_model
from docchat.configs import get_settings
from docchat.core.chat import AnswerGenerator
from docchat.core.document_processing.entrypoint import DocumentPipeline
from docchat.core.memory import ConversationSummarizer, MemoryManager
from docchat.core.uploads.reaper import UploadReaper
from docchat.core.uploads.session_store import UploadSessionManager


@lru_cache
def get_document_pipeline() -> DocumentPipeline:
    """Get pipeline singleton (configured embeddings and chat model)."""
    return DocumentPipeline()


@lru_cache
def get_blob_store_dependency() -> BlobStore:
    """Get configured blob store singleton."""
    return get_blob_store(get_settings().blob_store)


@lru_cache
def get_upload_manager() -> UploadSessionManager:
    """
    Get upload session manager singleton.

    Merge locks and merging markers live on the manager, so every request
    must share one instance.
    """
    return UploadSessionManager(get_settings().uploads)


@lru_cache
def get_memory_manager() -> MemoryManager:
    """Get memory manager singleton with a configured summarizer."""
    settings = get_settings()
    summarizer = ConversationSummarizer(
        get_chat_model(settings.llm),
        timeout_seconds=settings.memory.summarization_timeout_seconds,
    )
    return MemoryManager(summarizer, settings.memory)


@lru_cache
def get_answer_generator() -> AnswerGenerator:
    """Get answer generator singleton."""
    settings = get_settings().llm
    return AnswerGenerator(
        get_chat_model(settings),
        timeout_seconds=settings.completion_timeout_seconds,
        max_context_passages=settings.max_context_passages,
    )


def get_document_service(db: AsyncSession) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Database session

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(
        db,
        pipeline=get_document_pipeline(),
        blob_store=get_blob_store_dependency(),
    )


def get_upload_service(db: AsyncSession) -> UploadService:
    """
    Get upload service instance.

    Args:
        db: Database session

    Returns:
        UploadService: Upload service instance
    """
    return UploadService(
        db,
        manager=get_upload_manager(),
        blob_store=get_blob_store_dependency(),
        document_service=get_document_service(db),
        settings=get_settings(),
    )


def get_chat_service(db: AsyncSession) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Database session

    Returns:
        ChatService: Chat service instance
    """
    return ChatService(
        db,
        embedding_task=get_document_pipeline().embedding_task,
        memory_manager=get_memory_manager(),
        answer_generator=get_answer_generator(),
        settings=get_settings().retrieval,
    )


def get_upload_reaper() -> UploadReaper:
    """Get a reaper sweeping the shared upload manager."""
    return UploadReaper(get_upload_manager())
