"""One complete packing trial across every bin, and how it is scored.

An attempt builds its own blocks, orders them, then fills the bins
strictly in order: whatever bin ``i`` leaves over is offered to bin
``i + 1``. Attempts share nothing mutable, so several can run at once.

Scoring (higher is better):

- per bin that packed anything:
  ``bin_area / packed_area * factor``, where ``factor`` is
  ``total_count / packed_count`` when fitting by count, or
  ``total_area / packed_area`` when fitting by area;
- ``+ BIN_SAVING_BONUS`` for every bin left untouched;
- ``- REMAINING_PENALTY`` for every block left unpacked.

The constants are large next to the per-bin ratios, so fewer leftovers
dominates, then fewer bins, and the ratios only break ties.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Sequence

from .block import Block
from .exceptions import PackingCancelled
from .packer import FitResult, FreeRegionPacker
from .settings import PackingSettings
from .sorting import SortMethod, sort_blocks, sort_method_for_attempt
from .value_objects import ItemSpec, PackingBin

if TYPE_CHECKING:
    import threading

logger = logging.getLogger(__name__)

BIN_SAVING_BONUS = 100.0
REMAINING_PENALTY = 100.0


@dataclass(frozen=True)
class PackingTotals:
    """Run-wide figures the per-bin score is weighted against.

    Attributes:
        item_count: Number of items in the run.
        item_area: Total padded area of all packable items.
    """

    item_count: int
    item_area: float


@dataclass
class Attempt:
    """State and outcome of one packing trial.

    Attributes:
        index: Attempt number; also selects the ordering.
        sort_method: Ordering used for this attempt.
        bin_total: Number of packing bins available.
        remaining_blocks: Blocks not yet placed.
        packed_blocks: Placed blocks in bin order.
        area: Total area placed.
        bin_count: Number of bins reached before stopping.
        score: Accumulated score.
        info: One human-readable line per bin processed.
        bin_counts: Blocks placed per processed bin, keyed by bin index.
        complete: Whether the bin loop ran to its end.
    """

    index: int
    sort_method: SortMethod
    bin_total: int
    remaining_blocks: list[Block] = field(default_factory=list)
    packed_blocks: list[Block] = field(default_factory=list)
    area: float = 0.0
    bin_count: int = 0
    score: float = 0.0
    info: list[str] = field(default_factory=list)
    bin_counts: dict[int, int] = field(default_factory=dict)
    complete: bool = False

    @property
    def packed_count(self) -> int:
        return len(self.packed_blocks)

    @property
    def remaining_count(self) -> int:
        return len(self.remaining_blocks)

    def record(self, packing_bin: PackingBin, result: FitResult, score: float) -> None:
        """Fold one bin's fit result into the attempt."""
        self.area += result.area
        self.bin_count = packing_bin.index + 1
        self.packed_blocks.extend(result.packed_blocks)
        self.remaining_blocks = list(result.remaining_blocks)
        self.bin_counts[packing_bin.index] = result.count
        self.score += score
        self.info.append(f"Packed {result.count} items into {packing_bin.label}.")

    def finalize(self) -> None:
        """Apply the bin-saving bonus and leftover penalty."""
        self.score += (self.bin_total - self.bin_count) * BIN_SAVING_BONUS
        self.score -= self.remaining_count * REMAINING_PENALTY
        self.complete = True


def score_bin(
    bin_area: float,
    packed_count: int,
    packed_area: float,
    totals: PackingTotals,
    prefer_count: bool = True,
) -> float:
    """Score contribution of one bin.

    A bin that packed nothing contributes 0.
    """
    if packed_count == 0 or packed_area <= 0:
        return 0.0
    if prefer_count:
        factor = totals.item_count / packed_count
    else:
        factor = totals.item_area / packed_area
    return (bin_area / packed_area) * factor


def build_blocks(
    indexed_items: Sequence[tuple[int, ItemSpec]],
    settings: PackingSettings,
) -> list[Block]:
    """Make a fresh block for every (input index, item) pair."""
    return [
        Block.from_item(
            index,
            item,
            padding=settings.padding,
            force_rotate=settings.force_rotate,
        )
        for index, item in indexed_items
    ]


def run_attempt(
    index: int,
    indexed_items: Sequence[tuple[int, ItemSpec]],
    bins: Sequence[PackingBin],
    settings: PackingSettings,
    totals: PackingTotals,
    *,
    force_random: bool = False,
    rng: random.Random | None = None,
    on_bin: Callable[[Attempt, PackingBin, FitResult], None] | None = None,
    cancel_event: threading.Event | None = None,
) -> Attempt:
    """Run one packing trial across all bins.

    Args:
        index: Attempt number, which selects the ordering.
        indexed_items: Packable items with their input index.
        bins: Packing bins in fill order.
        settings: Packing settings.
        totals: Run-wide totals used for scoring.
        force_random: Shuffle regardless of ``index``.
        rng: Random source for shuffling.
        on_bin: Called after every bin with the attempt so far.
        cancel_event: Checked between bins.

    Returns:
        The finished, scored attempt.

    Raises:
        PackingCancelled: If ``cancel_event`` was set between bins.
    """
    blocks = build_blocks(indexed_items, settings)

    if settings.do_not_sort:
        method = SortMethod.NONE
    else:
        method = sort_method_for_attempt(index, force_random=force_random)
        blocks = sort_blocks(blocks, method, rng)

    attempt = Attempt(
        index=index,
        sort_method=method,
        bin_total=len(bins),
        remaining_blocks=blocks,
    )

    for position, packing_bin in enumerate(bins):
        if position > 0 and cancel_event is not None and cancel_event.is_set():
            raise PackingCancelled(index)

        if not packing_bin.is_usable:
            attempt.bin_count = packing_bin.index + 1
            attempt.info.append(f"Skipped {packing_bin.label}: no usable space.")
            continue

        packer = FreeRegionPacker(
            packing_bin.width,
            packing_bin.height,
            allow_rotation=settings.allow_rotation,
        )
        result = packer.fit(attempt.remaining_blocks, packing_bin.index)
        attempt.record(
            packing_bin,
            result,
            score_bin(
                packing_bin.usable_area,
                result.count,
                result.area,
                totals,
                prefer_count=settings.prefer_count,
            ),
        )

        if on_bin is not None:
            on_bin(attempt, packing_bin, result)

        if not attempt.remaining_blocks:
            break

    attempt.finalize()

    logger.debug(
        "Attempt %d (%s): packed %d, %d remaining, %d bins, score %.2f",
        attempt.index,
        attempt.sort_method.value,
        attempt.packed_count,
        attempt.remaining_count,
        attempt.bin_count,
        attempt.score,
    )
    return attempt
