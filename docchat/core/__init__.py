"""
Core business logic module.

Contains domain business logic and the exception hierarchy:
uploads, document processing, retrieval, conversation memory and chat.
"""

from docchat.core.exceptions import (
    AccessDeniedError,
    BlobStoreError,
    CompletionFailedError,
    DocChatError,
    DocumentProcessingError,
    EmbeddingFailedError,
    ExtractionError,
    IncompleteUploadError,
    InvalidChunkIndexError,
    InvalidInputError,
    NotFoundError,
    SummarizationFailedError,
    UnsupportedMediaTypeError,
    UploadError,
)

__all__ = [
    "DocChatError",
    "InvalidInputError",
    "UnsupportedMediaTypeError",
    "UploadError",
    "InvalidChunkIndexError",
    "IncompleteUploadError",
    "NotFoundError",
    "AccessDeniedError",
    "DocumentProcessingError",
    "ExtractionError",
    "EmbeddingFailedError",
    "SummarizationFailedError",
    "CompletionFailedError",
    "BlobStoreError",
]
