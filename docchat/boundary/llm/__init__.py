"""
Model client adapters.

Exports: FixedDimensionEmbeddings, get_embeddings, get_chat_model
"""

from docchat.boundary.llm.chat_model import get_chat_model
from docchat.boundary.llm.embeddings import FixedDimensionEmbeddings, get_embeddings

__all__ = [
    "FixedDimensionEmbeddings",
    "get_embeddings",
    "get_chat_model",
]
