"""Multi-attempt packing orchestration.

The orchestrator runs a bounded series of attempts over the same items
and bins, keeps the best-scoring one, and turns it into placements the
caller can apply. The first five attempts use the deterministic orderings;
the rest shuffle. Once every item fits the search stops early, unless
``try_harder`` is set.
"""

from __future__ import annotations

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, Sequence

from blockpack.contracts.dtos import (
    PackingOutput,
    PackingSummary,
    Placement,
    ProgressEvent,
    UnpackedItem,
    UnpackedReason,
)
from blockpack.domain import (
    Attempt,
    BinSpec,
    Block,
    FitResult,
    ItemSpec,
    NoBinsAvailableError,
    PackingBin,
    PackingCancelled,
    PackingSettings,
    PackingTotals,
    resolve_packing_bins,
    run_attempt,
)

if TYPE_CHECKING:
    import threading

    from blockpack.contracts.protocols import HostAdapter, ProgressCallback

logger = logging.getLogger(__name__)

MAX_ATTEMPT_CEILING = 200
DETERMINISTIC_ATTEMPTS = 5
SEED_STRIDE = 1_000_003


def default_max_attempt_count(item_count: int) -> int:
    """Attempt budget for ``item_count`` items.

    Grows with the logarithm of the item count and is capped at 200.
    """
    if item_count < 1:
        return 0
    return min(MAX_ATTEMPT_CEILING, 4 + math.floor(math.log2(item_count) * 5))


class PackingOrchestrator:
    """Runs packing attempts and selects the best one.

    Example:
        ```python
        orchestrator = PackingOrchestrator(PackingSettings(padding=2))
        output = orchestrator.pack(items, bins)
        for placement in output.placements:
            ...
        ```
    """

    def __init__(self, settings: PackingSettings | None = None) -> None:
        self.settings = settings or PackingSettings()

    def attempt_budget(self, item_count: int, random_attempt: bool = False) -> int:
        """Number of attempts a run over ``item_count`` items may make."""
        if random_attempt or self.settings.do_not_sort:
            return 1
        if self.settings.max_attempt_count is not None:
            return self.settings.max_attempt_count
        return default_max_attempt_count(item_count)

    def rng_for_attempt(self, index: int) -> random.Random:
        """Random source for one attempt.

        With a seed, every attempt gets its own reproducible stream, so the
        result does not depend on how attempts are scheduled.
        """
        if self.settings.seed is None:
            return random.Random()
        return random.Random(self.settings.seed * SEED_STRIDE + index)

    def pack(
        self,
        items: Sequence[ItemSpec],
        bins: Sequence[BinSpec],
        *,
        random_attempt: bool = False,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> PackingOutput:
        """Pack ``items`` into ``bins``.

        Args:
            items: Items in input order.
            bins: Bins in fill order.
            random_attempt: Make a single shuffled attempt.
            on_progress: Receives a ProgressEvent after every bin and
                every attempt.
            cancel_event: When set, no further attempts are started and
                the running one stops at its next bin.

        Returns:
            Placements of the best attempt, leftovers, and a summary.

        Raises:
            NoBinsAvailableError: If ``bins`` is empty.
        """
        if not bins:
            raise NoBinsAvailableError()

        settings = self.settings
        packing_bins = resolve_packing_bins(
            bins,
            margin=settings.margin,
            padding=settings.padding,
            guides_margin=settings.guides_margin,
        )
        for packing_bin in packing_bins:
            if not packing_bin.is_usable:
                logger.warning(
                    "Skipping %s: usable size %gx%g is not positive",
                    packing_bin.label,
                    packing_bin.width,
                    packing_bin.height,
                )

        if not items:
            logger.info("Nothing to pack")
            return PackingOutput(
                placements=(),
                unpacked=(),
                summary=PackingSummary(
                    attempt_index=None,
                    sort_method=None,
                    score=0.0,
                    attempts_run=0,
                ),
            )

        packable, rejected = self._split_items(items)
        totals = PackingTotals(
            item_count=len(items),
            item_area=sum(
                Block.from_item(index, item, padding=settings.padding).area
                for index, item in packable
            ),
        )

        budget = self.attempt_budget(len(items), random_attempt) if packable else 0
        logger.info(
            "Packing %d items into %d bins (%d packing areas), up to %d attempts",
            len(items),
            len(bins),
            len(packing_bins),
            budget,
        )

        best, attempts_run, cancelled = self._search(
            packable,
            packing_bins,
            totals,
            budget,
            random_attempt=random_attempt,
            on_progress=on_progress,
            cancel_event=cancel_event,
        )

        output = self._build_output(
            best,
            packable,
            rejected,
            packing_bins,
            attempts_run=attempts_run,
            cancelled=cancelled,
            item_count=len(items),
        )
        logger.info(
            "Packed %d of %d items into %d bins after %d attempts",
            output.packed_count,
            len(items),
            output.bins_used,
            attempts_run,
        )
        return output

    def _split_items(
        self, items: Sequence[ItemSpec]
    ) -> tuple[list[tuple[int, ItemSpec]], list[UnpackedItem]]:
        """Separate packable items from those with no positive padded size."""
        packable: list[tuple[int, ItemSpec]] = []
        rejected: list[UnpackedItem] = []
        for index, item in enumerate(items):
            block = Block.from_item(index, item, padding=self.settings.padding)
            if block.has_valid_size:
                packable.append((index, item))
                continue
            logger.warning(
                "Rejecting item %d (%r): padded size %gx%g is not positive",
                index,
                item.token,
                block.w,
                block.h,
            )
            rejected.append(
                UnpackedItem(
                    item_index=index,
                    item_token=item.token,
                    reason=UnpackedReason.INVALID_DIMENSION,
                )
            )
        return packable, rejected

    def _search(
        self,
        packable: list[tuple[int, ItemSpec]],
        packing_bins: list[PackingBin],
        totals: PackingTotals,
        budget: int,
        *,
        random_attempt: bool,
        on_progress: ProgressCallback | None,
        cancel_event: threading.Event | None,
    ) -> tuple[Attempt | None, int, bool]:
        """Run up to ``budget`` attempts and return (best, attempts run, cancelled)."""
        best: Attempt | None = None
        attempts_run = 0
        batch_size = max(1, self.settings.workers)

        def on_bin(attempt: Attempt, packing_bin: PackingBin, result: FitResult) -> None:
            if on_progress is not None:
                on_progress(
                    ProgressEvent(
                        kind="bin",
                        attempt_index=attempt.index,
                        attempt_budget=budget,
                        item_count=totals.item_count,
                        packed_count=attempt.packed_count,
                        bin_index=packing_bin.index,
                    )
                )

        def attempt_at(index: int) -> Attempt | None:
            try:
                return run_attempt(
                    index,
                    packable,
                    packing_bins,
                    self.settings,
                    totals,
                    force_random=random_attempt,
                    rng=self.rng_for_attempt(index),
                    on_bin=on_bin,
                    cancel_event=cancel_event,
                )
            except PackingCancelled as exc:
                logger.info("Attempt %d cancelled", exc.attempt_index)
                return None

        executor = ThreadPoolExecutor(max_workers=batch_size) if batch_size > 1 else None
        try:
            for start in range(0, budget, batch_size):
                if start > 0 and cancel_event is not None and cancel_event.is_set():
                    return best, attempts_run, True

                indices = range(start, min(start + batch_size, budget))
                if executor is None:
                    results = [attempt_at(index) for index in indices]
                else:
                    results = list(executor.map(attempt_at, indices))

                # Reduce in index order so a fixed seed gives the sequential result.
                for attempt in results:
                    if attempt is None:
                        return best, attempts_run, True

                    attempts_run += 1
                    if best is None or attempt.score > best.score:
                        best = attempt

                    if on_progress is not None:
                        on_progress(
                            ProgressEvent(
                                kind="attempt",
                                attempt_index=attempt.index,
                                attempt_budget=budget,
                                item_count=totals.item_count,
                                packed_count=attempt.packed_count,
                                best_attempt_index=best.index,
                                best_packed_count=best.packed_count,
                                best_bin_count=best.bin_count,
                            )
                        )

                    if (
                        not self.settings.try_harder
                        and attempt.index >= DETERMINISTIC_ATTEMPTS
                        and best.remaining_count == 0
                    ):
                        logger.debug("All items packed after attempt %d", attempt.index)
                        return best, attempts_run, False
        finally:
            if executor is not None:
                executor.shutdown(wait=True)

        return best, attempts_run, False

    def _build_output(
        self,
        best: Attempt | None,
        packable: list[tuple[int, ItemSpec]],
        rejected: list[UnpackedItem],
        packing_bins: list[PackingBin],
        attempts_run: int,
        cancelled: bool,
        item_count: int,
    ) -> PackingOutput:
        padding = self.settings.padding
        placements: list[Placement] = []
        unpacked = list(rejected)

        if best is None:
            unpacked.extend(
                UnpackedItem(item_index=index, item_token=item.token)
                for index, item in packable
            )
        else:
            for block in best.packed_blocks:
                packing_bin = packing_bins[block.bin_index]
                origin_x, origin_y = packing_bin.origin_offset
                placements.append(
                    Placement(
                        item_index=block.index,
                        item_token=block.item.token,
                        bin_index=packing_bin.index,
                        bin_token=packing_bin.token,
                        x=origin_x + block.x0 + block.dx,
                        y=origin_y + block.y0 + block.dy,
                        document_x=packing_bin.area.x0 + block.x0 + block.dx,
                        document_y=packing_bin.area.y0 + block.y0 + block.dy,
                        width=block.w - padding,
                        height=block.h - padding,
                        rotated=block.is_rotated,
                        block=block.footprint,
                    )
                )
            unpacked.extend(
                UnpackedItem(item_index=block.index, item_token=block.item.token)
                for block in best.remaining_blocks
            )

        unpacked.sort(key=lambda entry: entry.item_index)

        info = list(best.info) if best is not None else []
        remaining = len(unpacked)
        if remaining:
            info.append(f"{remaining} item{'s' if remaining > 1 else ''} remaining.")

        summary = PackingSummary(
            attempt_index=best.index if best is not None else None,
            sort_method=best.sort_method.value if best is not None else None,
            score=best.score if best is not None else 0.0,
            attempts_run=attempts_run,
            bin_counts=dict(best.bin_counts) if best is not None else {},
            info=tuple(info),
            cancelled=cancelled,
            item_count=item_count,
            packed_count=len(placements),
        )
        return PackingOutput(
            placements=tuple(placements),
            unpacked=tuple(unpacked),
            summary=summary,
        )


def pack_items(
    items: Sequence[ItemSpec],
    bins: Sequence[BinSpec],
    settings: PackingSettings | None = None,
    *,
    random_attempt: bool = False,
    on_progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> PackingOutput:
    """Pack ``items`` into ``bins`` with a one-off orchestrator."""
    return PackingOrchestrator(settings).pack(
        items,
        bins,
        random_attempt=random_attempt,
        on_progress=on_progress,
        cancel_event=cancel_event,
    )


def pack_with_host(
    host: HostAdapter,
    document: Any,
    items: Sequence[Any],
    settings: PackingSettings | None = None,
    *,
    random_attempt: bool = False,
    on_progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> PackingOutput:
    """Pack host items into the bins of a host document and move them.

    Every item's bounding box comes from ``host.get_bounds``; every placed
    item is handed back through ``host.place_item``. Item tokens are the
    host items themselves.

    Args:
        host: Adapter to the application owning items and bins.
        document: Host document passed to ``host.resolve_bins``.
        items: Host items to pack.
        settings: Packing settings.
        random_attempt: Make a single shuffled attempt.
        on_progress: Progress receiver.
        cancel_event: Cooperative cancellation flag.

    Returns:
        The packing output, after placements have been applied.
    """
    bins = list(host.resolve_bins(document))
    specs = [ItemSpec.from_rect(host.get_bounds(item), token=item) for item in items]
    output = pack_items(
        specs,
        bins,
        settings,
        random_attempt=random_attempt,
        on_progress=on_progress,
        cancel_event=cancel_event,
    )
    for placement in output.placements:
        host.place_item(placement.item_token, placement)
    return output
