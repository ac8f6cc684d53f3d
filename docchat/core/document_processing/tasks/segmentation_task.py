"""
Text segmentation task using RecursiveCharacterTextSplitter.

Splits extracted text into overlapping segments and records each
segment's character span in the source text.

Dependencies: langchain_text_splitters
System role: Second stage of document ingestion pipeline
"""

import logging

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..models import TextSegment

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]


class SegmentationTask:
    """Split text into overlapping, addressable segments."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: list[str] | None = None,
    ) -> None:
        """
        Initialize segmentation task with splitter configuration.

        Separators are kept and whitespace is not stripped, so every
        segment is an exact substring of the source and the segments
        tile the whole text.

        Args:
            chunk_size: Target segment size in characters
            chunk_overlap: Maximum overlap between consecutive segments
            separators: Split priority list (paragraph, line, word, character)
        """
        self._chunk_overlap = chunk_overlap
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            separators=separators or DEFAULT_SEPARATORS,
            keep_separator=True,
            strip_whitespace=False,
            length_function=len,
        )

    def segment(self, text: str) -> list[TextSegment]:
        """
        Split text into segments with offsets.

        Offsets come from a forward-moving search: a segment can only start
        after the previous one did and no earlier than the previous end minus
        the overlap, so repeated passages are not mapped to an earlier copy.

        Args:
            text: Extracted document text

        Returns:
            list[TextSegment]: Segments in order; empty for blank text
        """
        if not text.strip():
            return []

        segments = []
        prev_start, prev_end = -1, 0
        for ordinal, chunk in enumerate(self._splitter.split_text(text)):
            search_from = max(prev_start + 1, prev_end - self._chunk_overlap)
            start = text.find(chunk, search_from)
            if start < 0:
                start = text.find(chunk, max(prev_start, 0))
            if start < 0:
                logger.warning(
                    f"{__name__}:segment - Segment {ordinal} not found in source text; "
                    f"assigning cursor offset {search_from}"
                )
                start = search_from
            end = start + len(chunk)
            segments.append(
                TextSegment(ordinal=ordinal, content=chunk, start_char=start, end_char=end)
            )
            prev_start, prev_end = start, end

        logger.debug(f"{__name__}:segment - Produced {len(segments)} segment(s)")
        return segments
