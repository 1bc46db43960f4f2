"""Block orderings tried by successive attempts.

The packer is greedy, so the order blocks arrive in decides the result.
Attempts 0-4 use fixed orderings known to work well; later attempts
shuffle.
"""

from __future__ import annotations

import math
import random
from enum import Enum
from typing import Sequence

from .block import Block


class SortMethod(str, Enum):
    """Ordering applied to an attempt's blocks."""

    AREA = "area"
    LARGEST_DIMENSION = "largest dimension"
    WIDTH = "width"
    HEIGHT = "height"
    INTERLEAVING = "interleaving"
    RANDOM = "random shuffle"
    NONE = "no sorting"


DETERMINISTIC_METHODS: tuple[SortMethod, ...] = (
    SortMethod.AREA,
    SortMethod.LARGEST_DIMENSION,
    SortMethod.WIDTH,
    SortMethod.HEIGHT,
    SortMethod.INTERLEAVING,
)


def sort_method_for_attempt(index: int, force_random: bool = False) -> SortMethod:
    """Pick the ordering for an attempt by its index."""
    if force_random or index >= len(DETERMINISTIC_METHODS):
        return SortMethod.RANDOM
    return DETERMINISTIC_METHODS[index]


def interleave_by_area(blocks: Sequence[Block]) -> list[Block]:
    """Alternate large and small blocks.

    Blocks are sorted by area, largest first, and split in two with the
    larger half taking the odd one out. The result takes one from each half
    in turn.
    """
    by_area = sorted(blocks, key=lambda b: b.w * b.h, reverse=True)
    half = math.ceil(len(by_area) / 2)
    larger = by_area[:half]
    smaller = by_area[half:]

    interleaved: list[Block] = []
    for i, block in enumerate(larger):
        interleaved.append(block)
        if i < len(smaller):
            interleaved.append(smaller[i])
    return interleaved


def sort_blocks(
    blocks: Sequence[Block],
    method: SortMethod,
    rng: random.Random | None = None,
) -> list[Block]:
    """Return a new list of blocks in the order ``method`` prescribes.

    The deterministic orderings are stable, so ties keep input order.

    Args:
        blocks: Blocks to order; left untouched.
        method: The ordering to apply.
        rng: Random source for ``SortMethod.RANDOM``.

    Returns:
        The reordered blocks.
    """
    if method == SortMethod.AREA:
        return sorted(blocks, key=lambda b: b.w * b.h, reverse=True)
    if method == SortMethod.LARGEST_DIMENSION:
        return sorted(blocks, key=lambda b: max(b.w, b.h), reverse=True)
    if method == SortMethod.WIDTH:
        return sorted(blocks, key=lambda b: b.w, reverse=True)
    if method == SortMethod.HEIGHT:
        return sorted(blocks, key=lambda b: b.h, reverse=True)
    if method == SortMethod.INTERLEAVING:
        return interleave_by_area(blocks)
    if method == SortMethod.RANDOM:
        shuffled = list(blocks)
        (rng or random.Random()).shuffle(shuffled)
        return shuffled
    return list(blocks)
