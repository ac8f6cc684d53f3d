"""
Segment ORM model.

A contiguous span of a document's extracted text with its embedding.
Segments are immutable once created and only removed by cascading
document deletion.

Dependencies: sqlalchemy, docchat.boundary.db.base
System role: Persistence of retrievable text spans and vectors
"""

import uuid

from sqlalchemy import ForeignKey, Integer, JSON, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docchat.boundary.db.base import Base, UUIDMixin, TimestampMixin


class SegmentModel(Base, UUIDMixin, TimestampMixin):
    """
    Segment ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        document_id: Foreign key to DocumentModel (cascade delete)
        ordinal: Zero-based position of the segment within the document
        content: Segment text
        start_char: Offset of the first character in the extracted text
        end_char: Offset one past the last character
        embedding: Embedding vector stored as a JSON float array

    Constraints:
        (document_id, ordinal): unique
    """

    __tablename__ = "segments"
    __table_args__ = (
        UniqueConstraint("document_id", "ordinal", name="uq_segments_document_ordinal"),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    ordinal: Mapped[int] = mapped_column(Integer, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    start_char: Mapped[int] = mapped_column(Integer, nullable=False)

    end_char: Mapped[int] = mapped_column(Integer, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(
        JSON,
        nullable=False,
        doc="Embedding vector",
    )

    # Relationships
    document = relationship("DocumentModel", back_populates="segments")
