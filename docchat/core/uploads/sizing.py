"""
Part-size tier policy.

Larger files get larger parts so the part count stays bounded; the tier
table is monotonic (see UploadSettings) and part count is always
ceil(size / part_size).

Dependencies: docchat.configs
System role: Deterministic upload planning
"""

from typing import Sequence

from docchat.configs import PartSizeTier, UploadSettings
from docchat.core.exceptions import InvalidInputError


def calculate_part_size(size: int, tiers: Sequence[PartSizeTier]) -> int:
    """
    Choose the part size for a file.

    Args:
        size: Declared file size in bytes
        tiers: Tier table; a tier applies to files strictly larger than its min_file_size

    Returns:
        int: Part size in bytes
    """
    for tier in sorted(tiers, key=lambda t: t.min_file_size, reverse=True):
        if size > tier.min_file_size:
            return tier.part_size
    # size == 0 never reaches here through plan_upload; smallest tier applies
    return min(tiers, key=lambda t: t.min_file_size).part_size


def calculate_total_parts(size: int, part_size: int) -> int:
    """Number of parts needed to carry ``size`` bytes (ceiling division)."""
    return -(-size // part_size)


def plan_upload(size: int, settings: UploadSettings) -> tuple[int, int]:
    """
    Validate a declared size and derive (part_size, total_parts).

    Args:
        size: Declared file size in bytes
        settings: Upload settings holding the tier table and size cap

    Returns:
        tuple[int, int]: (part_size, total_parts), both positive

    Raises:
        InvalidInputError: If size is not positive or exceeds max_file_size
    """
    if size <= 0:
        raise InvalidInputError("File size must be greater than zero", "size", {"size": size})
    if size > settings.max_file_size:
        raise InvalidInputError(
            f"File size exceeds the {settings.max_file_size} byte limit",
            "size",
            {"size": size, "max_file_size": settings.max_file_size},
        )
    part_size = calculate_part_size(size, settings.part_size_tiers)
    return part_size, calculate_total_parts(size, part_size)
