"""
Message context normalization.

Assistant messages carry a snapshot of the passages used to answer.
Stored snapshots come in several shapes (bare string lists from older
rows, lists of segment dicts, tagged dicts); they are normalized into
PassageContext or SegmentContext when read.

Dependencies: pydantic
System role: Read-time validation of stored context payloads
"""

import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from docchat.models.message import (
    ContextSegment,
    MessageContext,
    PassageContext,
    SegmentContext,
)

logger = logging.getLogger(__name__)

_context_adapter = TypeAdapter(MessageContext)


def normalize_context(raw: Any) -> PassageContext | SegmentContext | None:
    """
    Convert a stored context payload into a tagged context variant.

    Args:
        raw: None, a tagged dict, a list of strings, a list of segment dicts,
            or an already-normalized context

    Returns:
        PassageContext | SegmentContext | None: None when there is no usable context
    """
    if raw is None:
        return None
    if isinstance(raw, (PassageContext, SegmentContext)):
        return raw
    if isinstance(raw, dict):
        try:
            return _context_adapter.validate_python(raw)
        except ValidationError as e:
            logger.warning(f"{__name__}:normalize_context - Unreadable tagged context: {e}")
            return None
    if isinstance(raw, (list, tuple)):
        if raw and all(isinstance(item, dict) for item in raw):
            try:
                return SegmentContext(segments=[ContextSegment.model_validate(item) for item in raw])
            except ValidationError as e:
                logger.warning(f"{__name__}:normalize_context - Unreadable segment list: {e}")
        passages = []
        for item in raw:
            if isinstance(item, str):
                passages.append(item)
            elif isinstance(item, dict) and isinstance(item.get("content"), str):
                passages.append(item["content"])
        return PassageContext(passages=passages)

    logger.warning(
        f"{__name__}:normalize_context - Ignoring context of type {type(raw).__name__}"
    )
    return None


def context_texts(raw: Any) -> list[str]:
    """Passage texts of a stored context payload, in order."""
    context = normalize_context(raw)
    return context.texts() if context is not None else []


def dump_context(context: PassageContext | SegmentContext | None) -> dict | None:
    """Serialize a context variant for JSON storage."""
    return context.model_dump(mode="json") if context is not None else None
