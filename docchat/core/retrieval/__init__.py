"""
Retrieval engine.

Exports: cosine_similarity, rank_segments, SegmentRetriever
"""

from docchat.core.retrieval.retriever import SegmentRetriever, order_candidates
from docchat.core.retrieval.similarity import cosine_similarity, rank_segments

__all__ = [
    "cosine_similarity",
    "rank_segments",
    "order_candidates",
    "SegmentRetriever",
]
