"""Service orchestrators."""

from .chat_service import ChatService
from .document_service import DocumentService
from .upload_service import UploadService

__all__ = [
    "ChatService",
    "DocumentService",
    "UploadService",
]
