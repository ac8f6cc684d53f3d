"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from docchat.boundary.db.CRUD import document_crud, conversation_crud

    # Use singleton instances
    document = await document_crud.get_for_owner(db, document_id, owner_id)

    # Or instantiate classes directly for custom behavior
    from docchat.boundary.db.CRUD import DocumentCRUD
    custom_crud = DocumentCRUD()
"""

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from docchat.boundary.db.CRUD.segment_crud import SegmentCRUD, segment_crud
from docchat.boundary.db.CRUD.conversation_crud import ConversationCRUD, conversation_crud
from docchat.boundary.db.CRUD.message_crud import MessageCRUD, message_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "SegmentCRUD",
    "segment_crud",
    "ConversationCRUD",
    "conversation_crud",
    "MessageCRUD",
    "message_crud",
]
