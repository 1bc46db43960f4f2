"""Single-bin packer working over a list of free rectangles.

The packer keeps every free region of the bin as a rectangle. Blocks are
taken in the order given and each goes into the first region large enough
for it, at that region's top-left corner. The placed footprint is then cut
out of every region it touches, leaving up to four slivers per region, and
a merge pass stretches adjoining regions across each other and drops any
region contained in another.

The merge pass is an adjacency heuristic rather than a true rectangle
union. The free list it leaves is always conservative (occupied space is
never reported free) but can be fragmented enough that a block is refused
from space a perfect union would have offered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from .block import Block
from .geometry import contains, intersect, union_expand

logger = logging.getLogger(__name__)


@dataclass
class FreeRegion:
    """Mutable corner-pair rectangle of unoccupied bin space."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0


@dataclass
class FitResult:
    """Outcome of fitting a sequence of blocks into one bin.

    Attributes:
        count: Number of blocks placed.
        area: Total area of placed blocks (padding included).
        packed_blocks: Placed blocks, in placement order.
        remaining_blocks: Blocks that did not fit, in input order.
    """

    count: int = 0
    area: float = 0.0
    packed_blocks: list[Block] = field(default_factory=list)
    remaining_blocks: list[Block] = field(default_factory=list)


class FreeRegionPacker:
    """Greedy first-fit packer for one bin.

    Attributes:
        width: Usable bin width.
        height: Usable bin height.
        allow_rotation: Whether to retry a refused block turned 90 degrees.
    """

    def __init__(self, width: float, height: float, allow_rotation: bool = False) -> None:
        self.width = width
        self.height = height
        self.allow_rotation = allow_rotation

    def fit(self, blocks: Sequence[Block], bin_index: int) -> FitResult:
        """Place as many blocks as possible, in the order given.

        Placed blocks get their position, ``packed`` flag and ``bin_index``
        set. Blocks that do not fit are returned exactly as they came in.

        Args:
            blocks: Blocks to place; their order decides priority.
            bin_index: Index recorded on every placed block.

        Returns:
            FitResult with placed and remaining blocks.
        """
        regions: list[FreeRegion] = [FreeRegion(0.0, 0.0, self.width, self.height)]
        result = FitResult()

        for block in blocks:
            region = self._find_region(regions, block)

            if region is None and self.allow_rotation:
                block.rotate()
                region = self._find_region(regions, block)
                if region is None:
                    block.rotate()

            if region is None:
                result.remaining_blocks.append(block)
                continue

            block.place(region.x0, region.y0)
            block.bin_index = bin_index
            regions = self._subtract(regions, block)

            result.packed_blocks.append(block)
            result.area += block.w * block.h

        result.count = len(result.packed_blocks)

        logger.debug(
            "Bin %d (%sx%s): placed %d, %d left, %d free regions",
            bin_index,
            self.width,
            self.height,
            result.count,
            len(result.remaining_blocks),
            len(regions),
        )
        return result

    @staticmethod
    def _find_region(regions: list[FreeRegion], block: Block) -> FreeRegion | None:
        """Return the first region the block fits in, in list order."""
        for region in regions:
            if block.w <= region.width and block.h <= region.height:
                return region
        return None

    def _subtract(self, regions: list[FreeRegion], block: Block) -> list[FreeRegion]:
        """Cut the block's footprint out of every region it touches.

        Each touched region is replaced by the slivers above, right of,
        below and left of the overlap that have non-zero extent. Slivers
        are appended after the untouched regions, then merged.
        """
        kept: list[FreeRegion] = []
        slivers: list[FreeRegion] = []

        for region in regions:
            overlap = intersect(region, block)
            if overlap is None:
                kept.append(region)
                continue

            # Below
            if overlap.y1 != region.y1:
                slivers.append(FreeRegion(region.x0, overlap.y1, region.x1, region.y1))
            # Right
            if overlap.x1 != region.x1:
                slivers.append(FreeRegion(overlap.x1, region.y0, region.x1, region.y1))
            # Above
            if region.y0 != overlap.y0:
                slivers.append(FreeRegion(region.x0, region.y0, region.x1, overlap.y0))
            # Left
            if region.x0 != overlap.x0:
                slivers.append(FreeRegion(region.x0, region.y0, overlap.x0, region.y1))

        return self._merge(kept + slivers)

    @staticmethod
    def _merge(regions: list[FreeRegion]) -> list[FreeRegion]:
        """Stretch adjoining regions and drop contained ones.

        Every ordered pair is visited once. Regions are dropped by clearing
        their slot so indices stay stable during the pass.
        """
        slots: list[FreeRegion | None] = list(regions)
        count = len(slots)

        for i in range(count):
            for j in range(count):
                if i == j:
                    continue
                a = slots[i]
                b = slots[j]
                if a is None or b is None:
                    continue

                union_expand(a, b)

                if contains(b, a):
                    slots[i] = None
                elif contains(a, b):
                    slots[j] = None

        return [region for region in slots if region is not None]
