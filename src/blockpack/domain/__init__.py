"""Domain layer - packing core."""

from .attempt import (
    BIN_SAVING_BONUS,
    REMAINING_PENALTY,
    Attempt,
    PackingTotals,
    build_blocks,
    run_attempt,
    score_bin,
)
from .block import Block, BlockDimensions
from .exceptions import NoBinsAvailableError, PackingCancelled, PackingError
from .geometry import (
    Guide,
    GuideOrientation,
    Rect,
    contains,
    divide_bounds,
    expand,
    intersect,
    union_expand,
)
from .packer import FitResult, FreeRegion, FreeRegionPacker
from .settings import BestFitBy, PackingSettings
from .sorting import (
    SortMethod,
    interleave_by_area,
    sort_blocks,
    sort_method_for_attempt,
)
from .value_objects import (
    BinSpec,
    ItemSpec,
    Offset,
    PackingBin,
    resolve_packing_bins,
)

__all__ = [
    # Geometry
    "Guide",
    "GuideOrientation",
    "Rect",
    "contains",
    "divide_bounds",
    "expand",
    "intersect",
    "union_expand",
    # Items and bins
    "BinSpec",
    "Block",
    "BlockDimensions",
    "ItemSpec",
    "Offset",
    "PackingBin",
    "resolve_packing_bins",
    # Packer
    "FitResult",
    "FreeRegion",
    "FreeRegionPacker",
    # Ordering
    "SortMethod",
    "interleave_by_area",
    "sort_blocks",
    "sort_method_for_attempt",
    # Attempts
    "Attempt",
    "BIN_SAVING_BONUS",
    "PackingTotals",
    "REMAINING_PENALTY",
    "build_blocks",
    "run_attempt",
    "score_bin",
    # Settings
    "BestFitBy",
    "PackingSettings",
    # Errors
    "NoBinsAvailableError",
    "PackingCancelled",
    "PackingError",
]
