"""Packing settings.

All distances are plain numbers in one linear unit chosen by the caller;
converting strings such as "5mm" belongs in front of this layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BestFitBy(str, Enum):
    """What the per-bin score weighting favours."""

    COUNT = "count"
    AREA = "area"


@dataclass(frozen=True)
class PackingSettings:
    """Configuration for a packing run.

    Attributes:
        padding: Space between packed items. Added once to every item's
            width and height and once to every bin's usable size, so only
            gaps between items are consumed. May be negative to force
            overlaps.
        margin: Space between a bin's edge and its packing area.
        allow_rotation: Whether a block may be turned 90 degrees to fit.
        best_fit_by: Weight per-bin scores by item count or packed area.
        max_attempt_count: Attempt budget; None derives it from item count.
        try_harder: Keep running the whole budget even after an attempt
            packs every item.
        do_not_sort: Keep items in input order and run a single attempt.
        force_rotate: Start every block in its rotated orientation.
        seed: Seed for the random shuffles; None for a fresh random source.
        workers: Number of attempts evaluated concurrently.
        guides_margin: Clearance either side of guides dividing a bin.
    """

    padding: float = 0.0
    margin: float = 0.0
    allow_rotation: bool = True
    best_fit_by: BestFitBy = BestFitBy.COUNT
    max_attempt_count: int | None = None
    try_harder: bool = False
    do_not_sort: bool = False
    force_rotate: bool = False
    seed: int | None = None
    workers: int = 1
    guides_margin: float = 0.0

    def __post_init__(self) -> None:
        if not isinstance(self.best_fit_by, BestFitBy):
            try:
                object.__setattr__(self, "best_fit_by", BestFitBy(self.best_fit_by))
            except ValueError:
                raise ValueError(
                    f"best_fit_by must be one of: "
                    f"{', '.join(m.value for m in BestFitBy)}"
                ) from None
        if self.max_attempt_count is not None and self.max_attempt_count < 1:
            raise ValueError("Max attempt count must be at least 1")
        if self.workers < 1:
            raise ValueError("Workers must be at least 1")
        if self.guides_margin < 0:
            raise ValueError("Guides margin must be non-negative")

    @property
    def prefer_count(self) -> bool:
        """Whether scoring is weighted by packed item count."""
        return self.best_fit_by == BestFitBy.COUNT
