"""
Segment retriever.

Loads owner-scoped candidate segments for a set of documents and ranks
them against a query vector.

Dependencies: sqlalchemy, numpy, docchat.boundary.db
System role: Retrieval engine (FindSimilar)
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docchat.boundary.db.CRUD.segment_crud import segment_crud
from docchat.boundary.db.models.segment_model import SegmentModel
from docchat.core.retrieval.similarity import rank_segments
from docchat.models.document import ScoredSegment

logger = logging.getLogger(__name__)


def order_candidates(
    candidates: Sequence[SegmentModel],
    document_ids: Sequence[UUID],
) -> list[SegmentModel]:
    """
    Fix candidate order to (position of document in request, segment ordinal).

    This order is the tie-break for equal similarity scores.
    """
    position = {}
    for i, doc_id in enumerate(document_ids):
        position.setdefault(doc_id, i)
    return sorted(
        candidates,
        key=lambda s: (position.get(s.document_id, len(position)), s.ordinal),
    )


class SegmentRetriever:
    """Brute-force cosine similarity search over stored segments."""

    async def find_similar(
        self,
        db: AsyncSession,
        query_vector: Sequence[float],
        k: int,
        document_ids: Sequence[UUID],
        owner_id: str | None = None,
    ) -> list[ScoredSegment]:
        """
        Find the k segments most similar to a query vector.

        Args:
            db: Async database session
            query_vector: Query embedding
            k: Maximum number of results
            document_ids: Documents whose segments are candidates
            owner_id: When set, only documents owned by this identity are searched

        Returns:
            list[ScoredSegment]: At most k segments, similarity non-increasing

        Raises:
            InvalidInputError: If a stored embedding differs in length from the query
        """
        if k <= 0 or not document_ids:
            return []

        candidates = await segment_crud.get_candidates(db, document_ids, owner_id)
        ordered = order_candidates(candidates, document_ids)
        ranked = rank_segments(query_vector, ordered, k)

        logger.info(
            f"{__name__}:find_similar - Ranked {len(candidates)} candidate(s) "
            f"from {len(document_ids)} document(s); returning {len(ranked)}"
        )
        return [
            ScoredSegment(
                segment_id=segment.id,
                document_id=segment.document_id,
                ordinal=segment.ordinal,
                content=segment.content,
                start_char=segment.start_char,
                end_char=segment.end_char,
                score=score,
            )
            for segment, score in ranked
        ]
