"""
Conversation memory management.

Exports: MemoryManager, ConversationSummarizer, normalize_context helpers
"""

from docchat.core.memory.context import context_texts, dump_context, normalize_context
from docchat.core.memory.memory_manager import MemoryManager, to_chat_message
from docchat.core.memory.summarizer import ConversationSummarizer, format_transcript

__all__ = [
    "MemoryManager",
    "ConversationSummarizer",
    "normalize_context",
    "context_texts",
    "dump_context",
    "format_transcript",
    "to_chat_message",
]
