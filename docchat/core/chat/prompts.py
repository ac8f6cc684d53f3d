"""
Answer prompt for chat turns.

Defines the prompt template used to answer a question from retrieved
passages, an optional conversation summary and recent history.

Dependencies: langchain_core.prompts
System role: Prompt template for document-grounded answers
"""

from typing import Sequence

from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are a helpful assistant that answers questions about the user's documents.

## Instructions
1. Based on the provided context, answer the question
2. If the context doesn't contain enough information to answer the question, say so
3. Be concise but thorough in your explanations
4. Format your answer using Markdown

## Conversation Memory
A summary of earlier conversation and the most recent messages may be provided.
Use them to:
- Understand follow-up questions that reference previous messages
- Maintain conversational coherence
- Avoid repeating information already discussed"""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Conversation summary:
{summary}

Recent conversation:
{chat_history}

Context:
{context}

Question: {question}"""),
])

NO_SUMMARY = "(none)"
NO_HISTORY = "(no previous messages)"
NO_CONTEXT = "(no relevant passages found)"


def format_history(history: Sequence) -> str:
    """Render messages exposing .role and .content, oldest first."""
    if not history:
        return NO_HISTORY
    lines = []
    for message in history:
        role = getattr(message.role, "value", message.role)
        speaker = "User" if role == "user" else "Assistant"
        lines.append(f"{speaker}: {message.content}")
    return "\n".join(lines)


def format_context(passages: Sequence[str]) -> str:
    """Number passages so the model can refer to them."""
    if not passages:
        return NO_CONTEXT
    return "\n\n".join(f"[{i}] {passage}" for i, passage in enumerate(passages, start=1))
