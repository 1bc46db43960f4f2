"""Value objects describing what gets packed and where.

Items and bins arrive from a caller that owns the real objects (page
items, artboards, sheets). Each carries an opaque ``token`` so results can
be mapped back without this package knowing anything about the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .geometry import Guide, Rect, divide_bounds


@dataclass(frozen=True)
class Offset:
    """Displacement of an item's origin from the top-left of its bounds."""

    dx: float = 0.0
    dy: float = 0.0


@dataclass(frozen=True)
class ItemSpec:
    """An item to pack, reduced to its bounding box.

    Attributes:
        width: Bounding-box width.
        height: Bounding-box height.
        offset: Item origin relative to its bounding box when unrotated.
        rotated_offset: The same correction once the item is turned 90
            degrees. Defaults to ``Offset(-offset.dy, offset.dx)``.
        token: Caller handle returned untouched with the results.
    """

    width: float
    height: float
    offset: Offset = field(default_factory=Offset)
    rotated_offset: Offset | None = None
    token: Any = None

    @classmethod
    def from_rect(cls, rect: Rect, token: Any = None) -> ItemSpec:
        """Build an item whose origin is the top-left of ``rect``."""
        return cls(width=rect.width, height=rect.height, token=token)

    @property
    def effective_rotated_offset(self) -> Offset:
        if self.rotated_offset is not None:
            return self.rotated_offset
        return Offset(dx=-self.offset.dy, dy=self.offset.dx)


@dataclass(frozen=True)
class BinSpec:
    """A container supplied by the caller.

    Attributes:
        width: Full bin width, before margins.
        height: Full bin height, before margins.
        x: Bin origin in the caller's coordinate space.
        y: Bin origin in the caller's coordinate space.
        token: Caller handle returned untouched with the results.
        guides: Guide lines (caller coordinates) dividing the bin into
            separately packed cells.
    """

    width: float
    height: float
    x: float = 0.0
    y: float = 0.0
    token: Any = None
    guides: tuple[Guide, ...] = ()

    @property
    def bounds(self) -> Rect:
        return Rect.from_xywh(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class PackingBin:
    """One packing target as the packer sees it.

    The packing area is the caller's bin less its margin (and split at
    guides, if any). One unit of padding is added back to the usable size
    because every block carries one unit of padding on its trailing edges.

    Attributes:
        index: Position in the ordered list of packing bins.
        spec: The caller's bin this target belongs to.
        area: Packing area in caller coordinates.
        padding: Padding added to the usable size.
        cell: Index of the guide cell within ``spec``.
    """

    index: int
    spec: BinSpec
    area: Rect
    padding: float = 0.0
    cell: int = 0

    @property
    def width(self) -> float:
        """Usable width handed to the packer."""
        return self.area.width + self.padding

    @property
    def height(self) -> float:
        """Usable height handed to the packer."""
        return self.area.height + self.padding

    @property
    def usable_area(self) -> float:
        return self.width * self.height

    @property
    def is_usable(self) -> bool:
        """False when either usable dimension is non-positive."""
        return self.width > 0 and self.height > 0

    @property
    def token(self) -> Any:
        return self.spec.token

    @property
    def origin_offset(self) -> tuple[float, float]:
        """Packing-area origin relative to the caller's bin origin."""
        return (self.area.x0 - self.spec.x, self.area.y0 - self.spec.y)

    @property
    def label(self) -> str:
        """Short human-readable name for logs and summaries."""
        name = f"bin {self.index + 1}"
        details: list[str] = []
        if self.spec.token is not None:
            details.append(str(self.spec.token))
        if self.spec.guides:
            details.append(f"cell {self.cell + 1}")
        if details:
            name += f" ({', '.join(details)})"
        return name


def resolve_packing_bins(
    specs: Sequence[BinSpec],
    margin: float = 0.0,
    padding: float = 0.0,
    guides_margin: float = 0.0,
) -> list[PackingBin]:
    """Turn caller bins into ordered packing targets.

    Each bin is shrunk by ``margin`` on every side, then divided at its
    guides. Cells keep their parent's order, so bin 0's cells come first.

    Args:
        specs: Caller bins in fill order.
        margin: Clearance inside each bin edge.
        padding: Item padding, added back to each usable size.
        guides_margin: Clearance either side of each guide.

    Returns:
        One PackingBin per cell, indexed in fill order.
    """
    bins: list[PackingBin] = []
    for spec in specs:
        area = Rect(
            x0=spec.x + margin,
            y0=spec.y + margin,
            x1=spec.x + spec.width - margin,
            y1=spec.y + spec.height - margin,
        )
        cells = divide_bounds(area, spec.guides, guides_margin) if spec.guides else [area]
        for cell_index, cell in enumerate(cells):
            bins.append(
                PackingBin(
                    index=len(bins),
                    spec=spec,
                    area=cell,
                    padding=padding,
                    cell=cell_index,
                )
            )
    return bins
