"""
Exception hierarchy for the document chat application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Client-caused errors (invalid input, bad part index, incomplete upload,
not found, access denied) are never retried by the server. Backend errors
(embedding, summarization, completion, blob store) leave persisted state
untouched and are safe for the caller to retry.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocChatError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidInputError(DocChatError):
    """Raised when a request is malformed (bad size, missing field, ...)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UnsupportedMediaTypeError(InvalidInputError):
    """Raised when a media type is outside the allowed set."""

    def __init__(self, media_type: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["media_type"] = media_type
        super().__init__(f"Unsupported media type: {media_type}", "media_type", details)


class UploadError(DocChatError):
    """Base exception for multi-part upload errors."""

    def __init__(
        self,
        message: str,
        session_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if session_id:
            details["session_id"] = session_id
        super().__init__(message, details)


class InvalidChunkIndexError(UploadError):
    """Raised when a part index falls outside [0, total_parts)."""

    def __init__(
        self,
        index: int,
        total_parts: int,
        session_id: str | None = None,
    ) -> None:
        """
        Initialize invalid part index error.

        Args:
            index: Offending part index
            total_parts: Declared number of parts for the upload
            session_id: Upload session, when already derived
        """
        super().__init__(
            f"Invalid part index {index}; expected 0 <= index < {total_parts}",
            session_id,
            {"index": index, "total_parts": total_parts},
        )


class IncompleteUploadError(UploadError):
    """Raised when merging is attempted before every part has arrived."""

    def __init__(self, session_id: str, missing: list[int]) -> None:
        super().__init__(
            f"Upload {session_id} is incomplete: {len(missing)} part(s) missing",
            session_id,
            {"missing": missing},
        )


class NotFoundError(DocChatError):
    """Raised when a resource does not exist or is not visible to the caller."""

    def __init__(
        self,
        resource: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"resource": resource, "resource_id": resource_id})
        super().__init__(f"{resource} not found: {resource_id}", details)


class AccessDeniedError(DocChatError):
    """Raised when a resource exists but belongs to another owner."""

    def __init__(
        self,
        resource: str,
        resource_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"resource": resource, "resource_id": resource_id})
        super().__init__(f"Access denied to {resource}: {resource_id}", details)


class DocumentProcessingError(DocChatError):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised when text extraction from a supported format fails."""

    def __init__(
        self,
        message: str,
        media_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if media_type:
            details["media_type"] = media_type
        super().__init__(message, details=details)


class EmbeddingFailedError(DocumentProcessingError):
    """Raised when embedding generation fails or returns malformed vectors."""

    pass


class SummarizationFailedError(DocChatError):
    """Raised when conversation summarization fails."""

    def __init__(
        self,
        message: str,
        conversation_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if conversation_id:
            details["conversation_id"] = conversation_id
        super().__init__(message, details)


class CompletionFailedError(DocChatError):
    """Raised when answer generation fails."""

    pass


class BlobStoreError(DocChatError):
    """Raised when blob store operations fail."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize blob store error.

        Args:
            message: Error message
            key: Blob key involved
            operation: Operation that failed (put, get, delete)
            details: Additional context
        """
        details = details or {}
        if key:
            details["key"] = key
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
