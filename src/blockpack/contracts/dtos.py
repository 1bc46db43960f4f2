"""Shared Data Transfer Objects for cross-layer communication.

These DTOs carry packing results from the application layer to callers
and to the infrastructure formatters without either depending on the
packing internals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from blockpack.domain.geometry import Rect


class UnpackedReason(str, Enum):
    """Why an item was not placed."""

    DID_NOT_FIT = "did_not_fit"
    INVALID_DIMENSION = "invalid_dimension"


@dataclass(frozen=True)
class Placement:
    """Where one item ended up.

    Attributes:
        item_index: Position of the item in the caller's input.
        item_token: The caller's handle for the item.
        bin_index: Index of the packing bin (guide cells count separately).
        bin_token: The caller's handle for the bin.
        x: Item origin relative to the caller's bin origin.
        y: Item origin relative to the caller's bin origin.
        document_x: Item origin in the caller's coordinate space.
        document_y: Item origin in the caller's coordinate space.
        width: Placed item width (rotation applied, padding excluded).
        height: Placed item height (rotation applied, padding excluded).
        rotated: Whether the item was turned 90 degrees.
        block: Occupied rectangle in packer coordinates, padding included.
    """

    item_index: int
    item_token: Any
    bin_index: int
    bin_token: Any
    x: float
    y: float
    document_x: float
    document_y: float
    width: float
    height: float
    rotated: bool
    block: Rect


@dataclass(frozen=True)
class UnpackedItem:
    """An item left over after packing."""

    item_index: int
    item_token: Any
    reason: UnpackedReason = UnpackedReason.DID_NOT_FIT


@dataclass(frozen=True)
class PackingSummary:
    """Diagnostic summary of the winning attempt.

    Attributes:
        attempt_index: Index of the winning attempt (None if none ran).
        sort_method: Label of the ordering the winner used.
        score: Winning score.
        attempts_run: Number of attempts completed.
        bin_counts: Items packed per packing bin index.
        info: Per-bin log lines of the winning attempt.
        cancelled: Whether the run was stopped early by the caller.
        item_count: Number of items supplied.
        packed_count: Number of items placed.
    """

    attempt_index: int | None
    sort_method: str | None
    score: float
    attempts_run: int
    bin_counts: dict[int, int] = field(default_factory=dict)
    info: tuple[str, ...] = ()
    cancelled: bool = False
    item_count: int = 0
    packed_count: int = 0

    @property
    def remaining_count(self) -> int:
        return self.item_count - self.packed_count

    @property
    def success(self) -> bool:
        """True when every item was placed."""
        return self.remaining_count == 0


@dataclass(frozen=True)
class PackingOutput:
    """Complete result of a packing run.

    Attributes:
        placements: One entry per placed item, in bin then placement order.
        unpacked: Items that were not placed, in input order.
        summary: Diagnostics for display.
    """

    placements: tuple[Placement, ...]
    unpacked: tuple[UnpackedItem, ...]
    summary: PackingSummary

    @property
    def packed_count(self) -> int:
        return len(self.placements)

    @property
    def remaining_count(self) -> int:
        return len(self.unpacked)

    @property
    def bins_used(self) -> int:
        """Number of distinct packing bins holding at least one item."""
        return len({p.bin_index for p in self.placements})

    def placements_for_bin(self, bin_index: int) -> list[Placement]:
        """Placements in one packing bin."""
        return [p for p in self.placements if p.bin_index == bin_index]


@dataclass(frozen=True)
class ProgressEvent:
    """Observational progress report.

    Attributes:
        kind: "bin" after each bin of an attempt, "attempt" after each
            completed attempt.
        attempt_index: Attempt the event belongs to.
        attempt_budget: Maximum number of attempts for the run.
        item_count: Number of items in the run.
        packed_count: Items packed so far by this attempt.
        best_attempt_index: Best attempt so far (attempt events only).
        best_packed_count: Items packed by the best attempt so far.
        best_bin_count: Bins used by the best attempt so far.
        bin_index: Bin just processed (bin events only).
    """

    kind: str
    attempt_index: int
    attempt_budget: int
    item_count: int
    packed_count: int
    best_attempt_index: int | None = None
    best_packed_count: int = 0
    best_bin_count: int = 0
    bin_index: int | None = None
