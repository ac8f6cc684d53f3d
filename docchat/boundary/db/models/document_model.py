"""
Document ORM model.

Represents a fully materialized uploaded file with its storage location
and optional prompt suggestions. A document is only written together with
its complete segment batch.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Document persistence for retrieval scoping
"""

from sqlalchemy import BigInteger, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, TimestampMixin


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        owner_id: Owner identity (user or anonymous device)
        filename: Original filename (255 char limit)
        media_type: Declared media type of the stored blob
        size_bytes: Size of the merged file in bytes
        storage_key: Blob store key of the raw document (1024 char limit)
        segment_count: Number of segments persisted with the document
        suggested_questions: Precomputed prompt suggestions (may be empty)
        created_at: Document creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        segments: One-to-many with SegmentModel (cascade delete)
        conversations: Many-to-many with ConversationModel
    """

    __tablename__ = "documents"

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        doc="Owner identity used for access scoping",
    )

    filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    media_type: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    size_bytes: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
    )

    storage_key: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="Blob store key for raw document",
    )

    segment_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    suggested_questions: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Prompt suggestions generated at upload time",
    )

    # Relationships
    segments = relationship(
        "SegmentModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SegmentModel.ordinal",
    )
    conversations = relationship(
        "ConversationModel",
        secondary="conversation_documents",
        back_populates="documents",
    )
