"""
Message ORM model.

One turn of a conversation. Messages are append-only; the summarized
flag is only flipped by memory compaction.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Chat message persistence
"""

import enum
import uuid

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, JSON, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, TimestampMixin


class MessageRole(str, enum.Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class MessageModel(Base, UUIDMixin, TimestampMixin):
    """
    Message ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        conversation_id: Foreign key to ConversationModel (cascade delete)
        role: USER or ASSISTANT
        content: Message text
        context: Retrieved-context snapshot (tagged JSON, nullable)
        is_summarized: Set only by compaction
        sequence: Per-conversation append counter used as ordering tie-break
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    conversation_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )

    role: Mapped[MessageRole] = mapped_column(
        Enum(MessageRole, native_enum=False),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    context: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
        doc="Retrieved context snapshot attached to assistant messages",
    )

    is_summarized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    conversation = relationship("ConversationModel", back_populates="messages")
