"""
Models for document processing pipeline.

Exports: TextSegment, PipelineResult
"""

from .pipeline_result import PipelineResult
from .text_segment import TextSegment

__all__ = [
    "TextSegment",
    "PipelineResult",
]
