"""
Model client configuration.

Embedding and chat model identifiers for Google Generative AI.

Dependencies: pydantic_settings
System role: Embedding and completion model configuration
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Settings for embedding and chat model clients."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        gt=0,
        description="Fixed output dimension requested from the embedding model",
    )
    chat_model: str = Field(
        default="gemini-2.0-flash",
        description="Google chat model used for answers, summaries and suggestions",
    )
    temperature: float = Field(default=0.2, description="Chat model temperature")
    api_key: SecretStr | None = Field(
        default=None,
        description="Google API key; falls back to GOOGLE_API_KEY when unset",
    )
    completion_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout applied to one answer generation call",
    )
    max_context_passages: int = Field(
        default=10,
        gt=0,
        description="Retrieved passages included in the answer prompt",
    )
