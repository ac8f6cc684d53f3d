"""
Embedding generation task.

Embeds segments concurrently, one request per segment, with bounded
fan-out and a per-request timeout. A single failure fails the whole
document.

Dependencies: langchain_core.embeddings, asyncio
System role: Third stage of document ingestion pipeline
"""

import asyncio
import logging
import math
from typing import Sequence

from langchain_core.embeddings import Embeddings

from docchat.core.exceptions import EmbeddingFailedError

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Generate embeddings through a LangChain Embeddings client."""

    def __init__(
        self,
        embeddings: Embeddings,
        concurrency: int = 8,
        timeout_seconds: float = 30,
        dimension: int | None = None,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embeddings client
            concurrency: Maximum in-flight embedding requests
            timeout_seconds: Per-request timeout
            dimension: Expected vector length (None accepts any consistent length)

        Raises:
            ValueError: When concurrency is not positive
        """
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self._embeddings = embeddings
        self._concurrency = concurrency
        self._timeout = timeout_seconds
        self._dimension = dimension

    def _validate(self, vector, label: str) -> list[float]:
        if not isinstance(vector, (list, tuple)) or not vector:
            raise EmbeddingFailedError(f"Empty or malformed embedding for {label}")
        try:
            values = [float(v) for v in vector]
        except (TypeError, ValueError) as e:
            raise EmbeddingFailedError(f"Non-numeric embedding for {label}") from e
        if not all(math.isfinite(v) for v in values):
            raise EmbeddingFailedError(f"Non-finite embedding values for {label}")
        if self._dimension is not None and len(values) != self._dimension:
            raise EmbeddingFailedError(
                f"Embedding for {label} has {len(values)} dimensions, expected {self._dimension}",
                details={"dimension": len(values), "expected": self._dimension},
            )
        return values

    async def _call(self, coro, label: str):
        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise EmbeddingFailedError(
                f"Embedding request for {label} timed out after {self._timeout}s"
            ) from e
        except EmbeddingFailedError:
            raise
        except Exception as e:
            raise EmbeddingFailedError(f"Embedding request for {label} failed: {e}") from e

    async def embed_texts(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed each text with its own request.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, in input order

        Raises:
            EmbeddingFailedError: When any request fails, times out or
                returns a malformed vector, or vector lengths disagree
        """
        if not texts:
            return []

        semaphore = asyncio.Semaphore(self._concurrency)

        async def embed_one(index: int, text: str) -> list[float]:
            label = f"segment {index}"
            async with semaphore:
                vectors = await self._call(self._embeddings.aembed_documents([text]), label)
            if not isinstance(vectors, list) or len(vectors) != 1:
                raise EmbeddingFailedError(f"Expected one embedding for {label}")
            return self._validate(vectors[0], label)

        tasks = [asyncio.create_task(embed_one(i, text)) for i, text in enumerate(texts)]
        try:
            vectors = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        dimensions = {len(v) for v in vectors}
        if len(dimensions) != 1:
            raise EmbeddingFailedError(
                "Embeddings have inconsistent dimensions",
                details={"dimensions": sorted(dimensions)},
            )
        logger.info(
            f"{__name__}:embed_texts - Embedded {len(vectors)} text(s) "
            f"({dimensions.pop()} dims, concurrency={self._concurrency})"
        )
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """
        Embed a search query.

        Raises:
            EmbeddingFailedError: When the request fails or returns a malformed vector
        """
        vector = await self._call(self._embeddings.aembed_query(text), "query")
        return self._validate(vector, "query")
