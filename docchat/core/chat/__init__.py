"""
Chat answer generation.

Exports: AnswerGenerator, ANSWER_PROMPT
"""

from docchat.core.chat.prompts import ANSWER_PROMPT, format_context, format_history
from docchat.core.chat.responder import AnswerGenerator

__all__ = ["AnswerGenerator", "ANSWER_PROMPT", "format_context", "format_history"]
