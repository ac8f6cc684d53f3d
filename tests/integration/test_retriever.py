"""
Integration tests for SegmentRetriever.

System role: Verification of owner-scoped similarity search
"""

from types import SimpleNamespace

import pytest

from docchat.boundary.db.CRUD import document_crud, segment_crud
from docchat.core.exceptions import InvalidInputError
from docchat.core.retrieval.retriever import SegmentRetriever


async def store_document(db, owner_id: str, vectors: list[list[float]]):
    document = await document_crud.create(
        db,
        owner_id=owner_id,
        filename="doc.txt",
        media_type="text/plain",
        size_bytes=10,
        storage_key=f"documents/{owner_id}/doc.txt",
        segment_count=len(vectors),
        suggested_questions=[],
    )
    segments = [
        SimpleNamespace(
            ordinal=i,
            content=f"{owner_id} segment {i}",
            start_char=i,
            end_char=i + 1,
            embedding=vector,
        )
        for i, vector in enumerate(vectors)
    ]
    await segment_crud.create_many(db, document.id, segments)
    await db.commit()
    return document


@pytest.fixture
def retriever() -> SegmentRetriever:
    return SegmentRetriever()


class TestSegmentRetriever:
    """Test suite for SegmentRetriever.find_similar()."""

    @pytest.mark.asyncio
    async def test_find_similar_should_rank_by_cosine_similarity(
        self, test_async_db, retriever
    ) -> None:
        """Test results are ordered by similarity and capped at k."""
        # Arrange
        document = await store_document(
            test_async_db, "alice", [[0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
        )

        # Act
        results = await retriever.find_similar(
            test_async_db, [1.0, 0.0], 2, [document.id], owner_id="alice"
        )

        # Assert
        assert [r.ordinal for r in results] == [1, 2]
        assert results[0].score == pytest.approx(1.0)
        assert results[0].score >= results[1].score

    @pytest.mark.asyncio
    async def test_find_similar_should_exclude_foreign_documents(
        self, test_async_db, retriever
    ) -> None:
        """Test another owner's segments never surface."""
        # Arrange
        mine = await store_document(test_async_db, "alice", [[0.0, 1.0]])
        theirs = await store_document(test_async_db, "bob", [[1.0, 0.0]])

        # Act
        results = await retriever.find_similar(
            test_async_db, [1.0, 0.0], 5, [mine.id, theirs.id], owner_id="alice"
        )

        # Assert
        assert [r.document_id for r in results] == [mine.id]

    @pytest.mark.asyncio
    async def test_find_similar_should_break_ties_by_request_order(
        self, test_async_db, retriever
    ) -> None:
        """Test equal scores follow document request order, then ordinal."""
        # Arrange
        first = await store_document(test_async_db, "alice", [[1.0, 0.0], [2.0, 0.0]])
        second = await store_document(test_async_db, "alice", [[3.0, 0.0]])

        # Act
        results = await retriever.find_similar(
            test_async_db, [1.0, 0.0], 3, [second.id, first.id], owner_id="alice"
        )

        # Assert
        assert [(r.document_id, r.ordinal) for r in results] == [
            (second.id, 0),
            (first.id, 0),
            (first.id, 1),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [0, -1])
    async def test_find_similar_should_return_empty_for_non_positive_k(
        self, test_async_db, retriever, k: int
    ) -> None:
        """Test k <= 0 yields no results."""
        # Arrange
        document = await store_document(test_async_db, "alice", [[1.0, 0.0]])

        # Act & Assert
        assert await retriever.find_similar(test_async_db, [1.0, 0.0], k, [document.id]) == []

    @pytest.mark.asyncio
    async def test_find_similar_should_return_empty_without_documents(
        self, test_async_db, retriever
    ) -> None:
        """Test an empty document list yields no results."""
        # Act & Assert
        assert await retriever.find_similar(test_async_db, [1.0, 0.0], 5, []) == []

    @pytest.mark.asyncio
    async def test_find_similar_should_reject_dimension_mismatch(
        self, test_async_db, retriever
    ) -> None:
        """Test a query of the wrong length is refused."""
        # Arrange
        document = await store_document(test_async_db, "alice", [[1.0, 0.0]])

        # Act & Assert
        with pytest.raises(InvalidInputError):
            await retriever.find_similar(test_async_db, [1.0, 0.0, 0.0], 1, [document.id])
