"""
Resumable upload configuration.

Settings for the part staging directory, retention of abandoned sessions,
accepted media types and the part-size tier policy.

Dependencies: pydantic, pydantic_settings
System role: Upload session manager configuration
"""

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import SettingsConfigDict

from docchat.configs.base import BaseSettings

MIB = 1024 * 1024

PDF_MEDIA_TYPE = "application/pdf"
TEXT_MEDIA_TYPE = "text/plain"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class PartSizeTier(BaseModel):
    """Files strictly larger than ``min_file_size`` use ``part_size`` byte parts."""

    min_file_size: int = Field(ge=0)
    part_size: int = Field(gt=0)


class UploadSettings(BaseSettings):
    """Settings for multi-part upload sessions."""

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    temp_dir: str = Field(
        default="./temp-uploads",
        description="Directory holding one sub-directory per in-flight upload session",
    )
    retention_hours: float = Field(
        default=24,
        description="Sessions untouched for longer than this are reclaimed by the reaper",
    )
    reap_interval_seconds: float = Field(
        default=3600,
        description="Interval between reaper sweeps",
    )
    reap_grace_seconds: float = Field(
        default=300,
        description="Sessions modified within this window are never reaped",
    )
    max_file_size: int = Field(
        default=512 * MIB,
        description="Largest declared upload size accepted",
    )
    allowed_media_types: list[str] = Field(
        default=[PDF_MEDIA_TYPE, TEXT_MEDIA_TYPE, DOCX_MEDIA_TYPE],
        description="Media types accepted for upload and extraction",
    )
    part_size_tiers: list[PartSizeTier] = Field(
        default=[
            PartSizeTier(min_file_size=100 * MIB, part_size=10 * MIB),
            PartSizeTier(min_file_size=50 * MIB, part_size=5 * MIB),
            PartSizeTier(min_file_size=0, part_size=2 * MIB),
        ],
        description="Part size policy, evaluated from the largest threshold down",
    )

    @field_validator("part_size_tiers")
    @classmethod
    def _tiers_must_be_monotonic(cls, tiers: list[PartSizeTier]) -> list[PartSizeTier]:
        """Larger files must never get smaller parts."""
        if not tiers:
            raise ValueError("at least one part size tier is required")
        ordered = sorted(tiers, key=lambda tier: tier.min_file_size, reverse=True)
        for larger, smaller in zip(ordered, ordered[1:]):
            if larger.part_size < smaller.part_size:
                raise ValueError(
                    "part size tiers must be monotonic: "
                    f"> {larger.min_file_size} bytes uses {larger.part_size} "
                    f"but > {smaller.min_file_size} bytes uses {smaller.part_size}"
                )
        if ordered[-1].min_file_size != 0:
            raise ValueError("the smallest part size tier must start at 0 bytes")
        return ordered

    @property
    def retention_seconds(self) -> float:
        return self.retention_hours * 3600
