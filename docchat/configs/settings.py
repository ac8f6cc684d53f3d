"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from docchat.configs.base import BaseSettings
from docchat.configs.blob_store import BlobStoreSettings
from docchat.configs.database import DatabaseSettings
from docchat.configs.llm import LLMSettings
from docchat.configs.memory import MemorySettings
from docchat.configs.pipeline import PipelineSettings
from docchat.configs.retrieval import RetrievalSettings
from docchat.configs.uploads import UploadSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    uploads: UploadSettings = UploadSettings()
    blob_store: BlobStoreSettings = BlobStoreSettings()
    pipeline: PipelineSettings = PipelineSettings()
    retrieval: RetrievalSettings = RetrievalSettings()
    memory: MemorySettings = MemorySettings()
    llm: LLMSettings = LLMSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from docchat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
