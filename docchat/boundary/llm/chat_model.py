"""
Chat model factory.

Dependencies: langchain_google_genai
System role: Completion/summarization model used by chat, memory and suggestions
"""

import logging

from langchain_core.language_models import BaseChatModel
from langchain_google_genai import ChatGoogleGenerativeAI

from docchat.configs import LLMSettings, get_settings

logger = logging.getLogger(__name__)


def get_chat_model(
    settings: LLMSettings | None = None,
    temperature: float | None = None,
) -> BaseChatModel:
    """
    Build the chat model from configuration.

    Args:
        settings: Optional model settings (defaults to global settings)
        temperature: Override for the configured temperature

    Returns:
        BaseChatModel: LangChain chat model
    """
    settings = settings or get_settings().llm
    kwargs = {}
    if settings.api_key is not None:
        kwargs["google_api_key"] = settings.api_key.get_secret_value()
    logger.info(f"{__name__}:get_chat_model - Creating chat model {settings.chat_model}")
    return ChatGoogleGenerativeAI(
        model=settings.chat_model,
        temperature=settings.temperature if temperature is None else temperature,
        **kwargs,
    )
