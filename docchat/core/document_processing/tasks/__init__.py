"""
Task modules for document processing pipeline.

Exports: ExtractionTask, SegmentationTask, EmbeddingTask, SuggestionTask
"""

from .embedding_task import EmbeddingTask
from .extraction_task import ExtractionTask
from .segmentation_task import SegmentationTask
from .suggestion_task import SuggestionTask, parse_suggestions

__all__ = [
    "ExtractionTask",
    "SegmentationTask",
    "EmbeddingTask",
    "SuggestionTask",
    "parse_suggestions",
]
