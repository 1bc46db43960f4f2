"""Axis-aligned rectangle primitives used by the packer.

Rectangles are stored as corner pairs (x0, y0, x1, y1) with y growing
downwards, so (x0, y0) is the top-left corner. Boundaries are inclusive:
two rectangles that only touch along an edge intersect in a zero-width
rectangle, and callers must treat that as a valid intersection.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Sequence


class Bounds(Protocol):
    """Anything carrying corner-pair coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float


@dataclass(frozen=True)
class Rect:
    """Immutable corner-pair rectangle.

    Attributes:
        x0: Left edge.
        y0: Top edge.
        x1: Right edge.
        y1: Bottom edge.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> Rect:
        """Build a rectangle from an origin and an extent."""
        return cls(x0=x, y0=y, x1=x + w, y1=y + h)

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_xywh(self) -> tuple[float, float, float, float]:
        """Return (x, y, width, height)."""
        return (self.x0, self.y0, self.width, self.height)


class GuideOrientation(str, Enum):
    """Orientation of a dividing guide line."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Guide:
    """A full-length guide line used to divide a bin into cells.

    A horizontal guide sits at a y location, a vertical guide at an x location.
    """

    orientation: GuideOrientation
    location: float


def intersect(a: Bounds, b: Bounds) -> Rect | None:
    """Return the overlap of two rectangles, or None when they are apart.

    Touching edges produce a zero-width (or zero-height) rectangle.
    """
    ix0 = max(a.x0, b.x0)
    ix1 = min(a.x1, b.x1)
    iy0 = max(a.y0, b.y0)
    iy1 = min(a.y1, b.y1)

    if ix0 <= ix1 and iy0 <= iy1:
        return Rect(x0=ix0, y0=iy0, x1=ix1, y1=iy1)
    return None


def contains(a: Bounds, b: Bounds) -> bool:
    """Whether ``a`` fully encloses ``b`` (inclusive)."""
    return a.x0 <= b.x0 and a.y0 <= b.y0 and b.x1 <= a.x1 and b.y1 <= a.y1


def expand(a: Bounds, b: Bounds) -> None:
    """Stretch ``b`` in place across ``a`` where ``a`` spans it.

    If ``a`` spans ``b`` horizontally and they meet vertically, ``b`` grows
    to cover both vertically. Likewise for the other axis.
    """
    if a.x0 <= b.x0 and b.x1 <= a.x1 and b.y0 <= a.y1:
        b.y0 = min(a.y0, b.y0)
        b.y1 = max(a.y1, b.y1)

    if a.y0 <= b.y0 and b.y1 <= a.y1 and b.x0 <= a.x1:
        b.x0 = min(a.x0, b.x0)
        b.x1 = max(a.x1, b.x1)


def union_expand(a: Bounds, b: Bounds) -> None:
    """Grow two intersecting rectangles towards their union, in place.

    This is an adjacency merge, not a general union: when neither rectangle
    contains the other, each is stretched across the other along any axis
    where it is fully spanned. The two may overlap afterwards. Contained
    pairs are left alone; removing them is up to the caller.
    """
    if intersect(a, b) is None:
        return
    if contains(a, b) or contains(b, a):
        return
    expand(a, b)
    expand(b, a)


def divide_bounds(
    rect: Rect,
    guides: Sequence[Guide],
    margin: float = 0.0,
) -> list[Rect]:
    """Split a rectangle into cells at the given guides.

    Horizontal guides are applied first, then vertical ones, each in
    descending location order. A guide only splits cells it strictly
    crosses, and ``margin`` is left clear on either side of it.

    Args:
        rect: The rectangle to divide.
        guides: Guide lines in any order.
        margin: Clearance either side of each guide.

    Returns:
        The resulting cells; ``[rect]`` when no guide crosses it.
    """
    ordered = sorted(guides, key=lambda g: g.location, reverse=True)
    horizontal = [g for g in ordered if g.orientation == GuideOrientation.HORIZONTAL]
    vertical = [g for g in ordered if g.orientation == GuideOrientation.VERTICAL]

    cells = [rect]
    for guide in horizontal:
        split: list[Rect] = []
        for cell in cells:
            if cell.y0 < guide.location < cell.y1:
                split.append(Rect(cell.x0, cell.y0, cell.x1, guide.location - margin))
                split.append(Rect(cell.x0, guide.location + margin, cell.x1, cell.y1))
            else:
                split.append(cell)
        cells = split

    for guide in vertical:
        split = []
        for cell in cells:
            if cell.x0 < guide.location < cell.x1:
                split.append(Rect(cell.x0, cell.y0, guide.location - margin, cell.y1))
                split.append(Rect(guide.location + margin, cell.y0, cell.x1, cell.y1))
            else:
                split.append(cell)
        cells = split

    return cells
