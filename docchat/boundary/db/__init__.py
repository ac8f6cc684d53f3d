"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, SegmentModel, ConversationModel, MessageModel: Core domain entities
  - MessageRole: Message author enum
  - document_crud, segment_crud, conversation_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, docchat.configs
System role: Database adapter providing persistent storage for documents,
segments, conversations, and messages.
"""

from docchat.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docchat.boundary.db.models import (
    ConversationModel,
    DocumentModel,
    MessageModel,
    MessageRole,
    SegmentModel,
    conversation_documents,
)
from docchat.boundary.db.CRUD import (
    BaseCRUD,
    ConversationCRUD,
    DocumentCRUD,
    MessageCRUD,
    SegmentCRUD,
    conversation_crud,
    document_crud,
    message_crud,
    segment_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "DocumentModel",
    "SegmentModel",
    "ConversationModel",
    "conversation_documents",
    "MessageModel",
    "MessageRole",
    # CRUD classes
    "BaseCRUD",
    "DocumentCRUD",
    "SegmentCRUD",
    "ConversationCRUD",
    "MessageCRUD",
    # CRUD singletons
    "document_crud",
    "segment_crud",
    "conversation_crud",
    "message_crud",
]
