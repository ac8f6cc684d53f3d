"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from docchat.configs.blob_store import BlobStoreSettings
from docchat.configs.database import DatabaseSettings
from docchat.configs.llm import LLMSettings
from docchat.configs.memory import MemorySettings
from docchat.configs.pipeline import PipelineSettings
from docchat.configs.retrieval import RetrievalSettings
from docchat.configs.settings import Settings, get_settings
from docchat.configs.uploads import PartSizeTier, UploadSettings

__all__ = [
    "Settings",
    "get_settings",
    "BlobStoreSettings",
    "DatabaseSettings",
    "LLMSettings",
    "MemorySettings",
    "PipelineSettings",
    "RetrievalSettings",
    "UploadSettings",
    "PartSizeTier",
]
