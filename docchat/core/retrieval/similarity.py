"""
Cosine similarity ranking.

Brute-force scoring of candidate vectors against a query vector. No index
is maintained; candidate sets are scoped to the few documents attached to
a conversation.

Dependencies: numpy
System role: Similarity scoring for the retrieval engine
"""

from typing import Callable, Sequence, TypeVar

import numpy as np

from docchat.core.exceptions import InvalidInputError

T = TypeVar("T")


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two equal-length vectors.

    A zero vector has similarity 0.0 with anything.

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Similarity in [-1, 1]

    Raises:
        InvalidInputError: If the vectors differ in length
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise InvalidInputError(
            "Vectors must have the same length",
            "embedding",
            {"left": int(va.size), "right": int(vb.size)},
        )
    norm = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if norm == 0.0:
        return 0.0
    return float(np.clip(np.dot(va, vb) / norm, -1.0, 1.0))


def rank_segments(
    query_vector: Sequence[float],
    candidates: Sequence[T],
    k: int,
    vector_of: Callable[[T], Sequence[float]] = lambda item: item.embedding,
) -> list[tuple[T, float]]:
    """
    Return the top k candidates by descending cosine similarity.

    The sort is stable: equal scores keep the order candidates were given in.

    Args:
        query_vector: Query embedding
        candidates: Items to rank
        k: Maximum number of results
        vector_of: Extracts an item's embedding (defaults to its .embedding)

    Returns:
        list[tuple[T, float]]: (item, score) pairs, scores non-increasing
    """
    if k <= 0 or not candidates:
        return []
    scored = [(item, cosine_similarity(query_vector, vector_of(item))) for item in candidates]
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:k]
