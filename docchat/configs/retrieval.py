"""
Retrieval configuration settings.

Dependencies: pydantic_settings
System role: Retrieval engine configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Settings for similarity-ranked segment retrieval."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIEVAL_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=5, gt=0, description="Number of top segments to retrieve")
