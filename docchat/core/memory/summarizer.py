"""
Conversation summarizer.

Condenses a run of messages into one summary through the chat model.
The call is wrapped in a timeout; any failure or empty output raises
SummarizationFailedError so compaction stays all-or-nothing.

Dependencies: langchain_core
System role: Summarization function used by the memory manager
"""

import asyncio
import logging
from typing import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from docchat.core.exceptions import SummarizationFailedError

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You summarize conversations between a user and a document assistant.
Write a concise summary that preserves:
- the questions the user asked and the answers given
- facts, names and figures taken from the documents
- any preferences or follow-ups the user expressed
Do not invent information. Output only the summary text."""),
    ("human", """Conversation:
{transcript}

Summary:"""),
])


def format_transcript(messages: Sequence) -> str:
    """Render messages exposing .role and .content as 'User: ...' lines."""
    lines = []
    for message in messages:
        role = getattr(message.role, "value", message.role)
        speaker = "User" if role == "user" else "Assistant"
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


class ConversationSummarizer:
    """Summarize conversation history with a LangChain chat model."""

    def __init__(self, chat_model: BaseChatModel, timeout_seconds: float = 60) -> None:
        """
        Initialize summarizer.

        Args:
            chat_model: LangChain chat model
            timeout_seconds: Timeout for one summarization call
        """
        self._chain = SUMMARY_PROMPT | chat_model | StrOutputParser()
        self._timeout = timeout_seconds

    async def summarize(self, messages: Sequence, conversation_id: str | None = None) -> str:
        """
        Summarize messages.

        Args:
            messages: Messages exposing .role and .content, oldest first
            conversation_id: Used for error context only

        Returns:
            str: Non-empty summary

        Raises:
            SummarizationFailedError: When the call fails, times out or returns nothing
        """
        if not messages:
            raise SummarizationFailedError("No messages to summarize", conversation_id)
        try:
            summary = await asyncio.wait_for(
                self._chain.ainvoke({"transcript": format_transcript(messages)}),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise SummarizationFailedError(
                f"Summarization timed out after {self._timeout}s", conversation_id
            ) from e
        except Exception as e:
            raise SummarizationFailedError(
                f"Summarization failed: {e}", conversation_id
            ) from e

        summary = summary.strip()
        if not summary:
            raise SummarizationFailedError("Summarizer returned empty text", conversation_id)
        logger.info(
            f"{__name__}:summarize - Summarized {len(messages)} message(s) "
            f"into {len(summary)} chars"
        )
        return summary
