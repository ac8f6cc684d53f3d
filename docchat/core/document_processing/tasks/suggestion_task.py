"""
Prompt suggestion task.

Asks the chat model for a handful of short questions a reader could
ask about the document. Suggestions are optional: any failure yields
an empty list and never fails ingestion.

Dependencies: langchain_core
System role: Optional fourth stage of document ingestion pipeline
"""

import logging
import re

from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

logger = logging.getLogger(__name__)

SUGGESTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """You are an expert reader. Analyze the document and generate {count} thought-provoking, \
insightful, and contextually relevant questions that a user could ask based on its content.
Each question must reflect the actual concepts and ideas in the document and be no more than \
{max_length} characters long. Avoid vague or overly broad questions.
Output only the {count} questions as a numbered Markdown list."""),
    ("human", """---
Document Content:
{document}
---"""),
])

_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


def parse_suggestions(raw: str, count: int, max_length: int) -> list[str]:
    """
    Parse a numbered or bulleted list into question strings.

    Args:
        raw: Model output
        count: Maximum number of questions to keep
        max_length: Questions longer than this are dropped

    Returns:
        list[str]: Cleaned questions
    """
    questions = []
    for line in raw.splitlines():
        question = _LIST_MARKER.sub("", line).strip().strip('"').strip()
        if question and len(question) <= max_length:
            questions.append(question)
    return questions[:count]


class SuggestionTask:
    """Generate prompt suggestions for an uploaded document."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        count: int = 6,
        min_chars: int = 100,
        max_input_chars: int = 8000,
        max_length: int = 80,
    ) -> None:
        """
        Initialize suggestion task.

        Args:
            chat_model: LangChain chat model
            count: Number of questions to request
            min_chars: Texts this short or shorter get no suggestions
            max_input_chars: Only this many leading characters are sent
            max_length: Maximum question length in characters
        """
        self._chain = SUGGESTION_PROMPT | chat_model | StrOutputParser()
        self._count = count
        self._min_chars = min_chars
        self._max_input_chars = max_input_chars
        self._max_length = max_length

    async def suggest(self, text: str) -> list[str]:
        """
        Generate suggestions, or [] when the text is too short or the call fails.

        Args:
            text: Extracted document text

        Returns:
            list[str]: Up to `count` questions
        """
        if len(text.strip()) <= self._min_chars:
            return []
        try:
            raw = await self._chain.ainvoke({
                "count": self._count,
                "max_length": self._max_length,
                "document": text[: self._max_input_chars],
            })
        except Exception as e:
            logger.warning(f"{__name__}:suggest - Suggestion generation failed: {e}")
            return []
        return parse_suggestions(raw, self._count, self._max_length)
