"""Heading outline validation."""

from typing import Sequence


def check_heading_hierarchy(heading_levels: Sequence[int]) -> bool:
    """Check that heading levels start at 1 and never skip a level going deeper.

    Levels are expected in ascending order, so only forward gaps are
    examined; repeated levels are allowed. An empty sequence is valid.

    Args:
        heading_levels: Ascending heading levels (1-6)

    Returns:
        True if the hierarchy has no gaps and starts at level 1
    """
    if not heading_levels:
        return True

    if heading_levels[0] != 1:
        return False

    for previous, current in zip(heading_levels, heading_levels[1:]):
        if current - previous > 1:
            return False

    return True
