"""Blocks: the per-attempt working copy of an item."""

from __future__ import annotations

from dataclasses import dataclass

from .geometry import Rect
from .value_objects import ItemSpec


@dataclass(frozen=True)
class BlockDimensions:
    """Extent and origin correction for one orientation."""

    w: float
    h: float
    dx: float
    dy: float


@dataclass(eq=False)
class Block:
    """Tracks one item while it is being packed.

    A fresh Block is built for every attempt. The dimension sets are fixed
    at construction; only the placement fields change while packing.

    Attributes:
        index: Position of the item in the caller's input.
        item: The item this block stands for.
        normal: Dimensions in the item's own orientation (padding included).
        rotated: Dimensions turned 90 degrees.
        w: Current width.
        h: Current height.
        dx: Current origin correction along x.
        dy: Current origin correction along y.
        x0: Left edge once packed, in packer coordinates.
        y0: Top edge once packed.
        x1: Right edge once packed.
        y1: Bottom edge once packed.
        bin_index: Packing bin the block landed in.
        is_rotated: Whether the rotated dimensions are active.
        packed: Whether the block has been placed.
    """

    index: int
    item: ItemSpec
    normal: BlockDimensions
    rotated: BlockDimensions
    w: float = 0.0
    h: float = 0.0
    dx: float = 0.0
    dy: float = 0.0
    x0: float = 0.0
    y0: float = 0.0
    x1: float = 0.0
    y1: float = 0.0
    bin_index: int | None = None
    is_rotated: bool = False
    packed: bool = False

    def __post_init__(self) -> None:
        self._apply(self.normal)

    @classmethod
    def from_item(
        cls,
        index: int,
        item: ItemSpec,
        padding: float = 0.0,
        force_rotate: bool = False,
    ) -> Block:
        """Build a block with ``padding`` added once to each dimension."""
        w = item.width + padding
        h = item.height + padding
        rotated_offset = item.effective_rotated_offset
        block = cls(
            index=index,
            item=item,
            normal=BlockDimensions(w=w, h=h, dx=item.offset.dx, dy=item.offset.dy),
            rotated=BlockDimensions(w=h, h=w, dx=rotated_offset.dx, dy=rotated_offset.dy),
        )
        if force_rotate:
            block.rotate()
        return block

    def _apply(self, dims: BlockDimensions) -> None:
        self.w = dims.w
        self.h = dims.h
        self.dx = dims.dx
        self.dy = dims.dy

    def rotate(self) -> None:
        """Swap between the normal and rotated orientation.

        Square blocks are left as they are.
        """
        if self.w == self.h:
            return
        self.is_rotated = not self.is_rotated
        self._apply(self.rotated if self.is_rotated else self.normal)

    def place(self, x: float, y: float) -> None:
        """Put the block's top-left corner at (x, y)."""
        self.x0 = x
        self.y0 = y
        self.x1 = x + self.w
        self.y1 = y + self.h
        self.packed = True

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def has_valid_size(self) -> bool:
        """Whether both dimensions are positive."""
        return self.normal.w > 0 and self.normal.h > 0

    @property
    def footprint(self) -> Rect:
        """Occupied rectangle in packer coordinates."""
        return Rect(self.x0, self.y0, self.x1, self.y1)

    def __repr__(self) -> str:
        if not self.packed:
            return f"Block(index={self.index}, w={self.w}, h={self.h}, packed=False)"
        return (
            f"Block(index={self.index}, bin={self.bin_index}, "
            f"rotated={self.is_rotated}, x0={self.x0}, y0={self.y0}, "
            f"w={self.w}, h={self.h})"
        )
