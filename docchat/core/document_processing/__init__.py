"""
Document processing pipeline for ingestion.

Extracts text, splits it into overlapping segments, embeds every segment
and generates optional prompt suggestions.

Dependencies: langchain_text_splitters, langchain_community, langchain_core, docx
System role: Document ingestion pipeline entrypoint
"""

from .entrypoint import DocumentPipeline
from .models import PipelineResult, TextSegment

__all__ = [
    "DocumentPipeline",
    "PipelineResult",
    "TextSegment",
]
