"""
Upload domain models.

Value objects for the resumable multi-part upload protocol.

Dependencies: pydantic
System role: Upload session contracts
"""

from pydantic import BaseModel, Field


class PartMetadata(BaseModel):
    """
    Declared shape of an upload, sent with every part.

    Persisted as the session's metadata.json on first sight and
    immutable afterwards.
    """

    owner_id: str = Field(min_length=1, description="Owner identity (user or device)")
    filename: str = Field(min_length=1, description="Original filename")
    file_size: int = Field(description="Declared total size in bytes")
    media_type: str = Field(description="Declared media type")
    part_size: int = Field(description="Part size chosen at initialization")
    total_parts: int = Field(description="Part count chosen at initialization")
    started_at: int = Field(description="Upload start time, epoch milliseconds")


class UploadPlan(BaseModel):
    """Response to upload initialization."""

    session_id: str
    part_size: int = Field(gt=0)
    total_parts: int = Field(gt=0)
    started_at: int = Field(description="Epoch milliseconds to echo in part metadata")


class UploadProgress(BaseModel):
    """Received-part accounting for one session."""

    session_id: str
    uploaded: int
    total: int
    percentage: int = Field(ge=0, le=100)
    is_complete: bool


class PartReceipt(BaseModel):
    """Acknowledgement of a stored part."""

    session_id: str
    index: int
    progress: UploadProgress
    completed: bool = Field(description="True once every part index is present")
