"""
Answer generator.

Produces the assistant's reply for a chat turn from the question, the
retrieved passages and the bounded conversation memory.

Dependencies: langchain_core
System role: Completion function used by the turn orchestrator
"""

import asyncio
import logging
from typing import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser

from docchat.core.chat.prompts import (
    ANSWER_PROMPT,
    NO_SUMMARY,
    format_context,
    format_history,
)
from docchat.core.exceptions import CompletionFailedError

logger = logging.getLogger(__name__)


class AnswerGenerator:
    """Answer questions with a LangChain chat model."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        timeout_seconds: float = 60,
        max_context_passages: int = 10,
    ) -> None:
        """
        Initialize answer generator.

        Args:
            chat_model: LangChain chat model
            timeout_seconds: Timeout for one completion call
            max_context_passages: Passages beyond this are left out of the prompt
        """
        self._chain = ANSWER_PROMPT | chat_model | StrOutputParser()
        self._timeout = timeout_seconds
        self._max_passages = max_context_passages

    async def generate(
        self,
        question: str,
        context_passages: Sequence[str],
        history: Sequence = (),
        summary: str | None = None,
    ) -> str:
        """
        Generate an answer.

        Args:
            question: User question
            context_passages: Retrieved passage texts, best first
            history: Recent messages exposing .role and .content, oldest first
            summary: Summary of earlier conversation, if compacted

        Returns:
            str: Markdown answer

        Raises:
            CompletionFailedError: When the call fails, times out or returns nothing
        """
        inputs = {
            "question": question,
            "context": format_context(list(context_passages)[: self._max_passages]),
            "chat_history": format_history(history),
            "summary": summary or NO_SUMMARY,
        }
        try:
            answer = await asyncio.wait_for(self._chain.ainvoke(inputs), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise CompletionFailedError(
                f"Answer generation timed out after {self._timeout}s"
            ) from e
        except Exception as e:
            raise CompletionFailedError(f"Answer generation failed: {e}") from e

        answer = answer.strip()
        if not answer:
            raise CompletionFailedError("Chat model returned an empty answer")
        logger.debug(
            f"{__name__}:generate - Answered with {len(context_passages)} passage(s), "
            f"{len(history)} history message(s)"
        )
        return answer
