"""
Database models package.

Exports:
  - DocumentModel: Uploaded document ORM model
  - SegmentModel: Document segment with embedding
  - ConversationModel, conversation_documents: Conversation model and document link table
  - MessageModel, MessageRole: Conversation message model and role enum

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Database model definitions for domain entities
"""

from docchat.boundary.db.models.document_model import DocumentModel
from docchat.boundary.db.models.segment_model import SegmentModel
from docchat.boundary.db.models.conversation_model import (
    ConversationModel,
    conversation_documents,
)
from docchat.boundary.db.models.message_model import MessageModel, MessageRole

__all__ = [
    "DocumentModel",
    "SegmentModel",
    "ConversationModel",
    "conversation_documents",
    "MessageModel",
    "MessageRole",
]
