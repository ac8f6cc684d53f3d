"""
Conversation memory configuration.

Thresholds controlling when a conversation is compacted into a summary
and how much history is handed to response generation.

Dependencies: pydantic_settings
System role: Conversation memory manager configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MemorySettings(BaseSettings):
    """Settings for conversation memory compaction."""

    model_config = SettingsConfigDict(
        env_prefix="MEMORY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_messages_before_summary: int = Field(
        default=15,
        gt=0,
        description="Message count at which a live conversation should be summarized",
    )
    max_history_length: int = Field(
        default=20,
        gt=0,
        description="History cap for live conversations under the threshold",
    )
    recent_messages_for_context: int = Field(
        default=8,
        gt=0,
        description="Recent unsummarized messages sent alongside a summary",
    )
    chars_per_message_estimate: int = Field(
        default=100,
        gt=0,
        description="Average message length assumed by the efficiency heuristic",
    )
    summarization_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout applied to a summarization call",
    )
    prune_after_days: int = Field(
        default=30,
        gt=0,
        description="Summarized messages older than this may be pruned",
    )
