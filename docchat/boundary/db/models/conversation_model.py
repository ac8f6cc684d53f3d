"""
Conversation ORM model.

Represents one ongoing chat with its memory-accounting state
(message count, summary, summarized flag) and linked documents.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Conversation persistence for chat memory management
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, TimestampMixin


conversation_documents = Table(
    "conversation_documents",
    Base.metadata,
    Column(
        "conversation_id",
        Uuid(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "document_id",
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class ConversationModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation ORM model.

    State machine: Live (is_summarized=False) -> Summarized (is_summarized=True),
    back to Live only through an explicit memory clear. When is_summarized is
    true, summary is non-empty.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Owner identity
        title: Display title derived from the first question
        message_count: Messages appended since creation or last memory clear
        is_summarized: Summarized flag
        summary: Summary text (nullable)
        summarized_at: When the summary was produced (nullable)

    Relationships:
        messages: One-to-many with MessageModel (cascade delete)
        documents: Many-to-many with DocumentModel
    """

    __tablename__ = "conversations"

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    message_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_summarized: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    summary: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    summarized_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    # Relationships
    messages = relationship(
        "MessageModel",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.sequence",
    )
    documents = relationship(
        "DocumentModel",
        secondary=conversation_documents,
        back_populates="conversations",
    )
