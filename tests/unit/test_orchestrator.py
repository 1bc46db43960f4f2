"""Tests for the multi-attempt packing orchestrator.

Tests cover:
- Attempt budget and early exit
- Leftover and rejected items
- Placement coordinates (margin, padding, offsets, rotation, guides)
- Reproducibility, concurrency, cancellation, and progress
- Packing through a host adapter
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

import pytest

from blockpack.application import (
    PackingOrchestrator,
    ProgressEvent,
    UnpackedReason,
    default_max_attempt_count,
    pack_items,
    pack_with_host,
)
from blockpack.domain import (
    BinSpec,
    Guide,
    GuideOrientation,
    ItemSpec,
    NoBinsAvailableError,
    Offset,
    PackingSettings,
    Rect,
    contains,
)


@pytest.fixture
def roomy_bin() -> BinSpec:
    """A bin large enough for every item in ``mixed_items``."""
    return BinSpec(width=1000, height=1000, token="roomy")


# =============================================================================
# Attempt Budget Tests
# =============================================================================


class TestAttemptBudget:
    """Tests for how many attempts a run may make."""

    @pytest.mark.parametrize(
        "item_count,expected",
        [(0, 0), (1, 4), (2, 9), (4, 14), (12, 21), (10**20, 200)],
    )
    def test_default_budget(self, item_count: int, expected: int) -> None:
        assert default_max_attempt_count(item_count) == expected

    def test_random_attempt_runs_once(self) -> None:
        assert PackingOrchestrator().attempt_budget(50, random_attempt=True) == 1

    def test_do_not_sort_runs_once(self) -> None:
        orchestrator = PackingOrchestrator(PackingSettings(do_not_sort=True))
        assert orchestrator.attempt_budget(50) == 1

    def test_explicit_budget(self) -> None:
        orchestrator = PackingOrchestrator(PackingSettings(max_attempt_count=3))
        assert orchestrator.attempt_budget(50) == 3

    def test_derived_budget(self) -> None:
        assert PackingOrchestrator().attempt_budget(12) == default_max_attempt_count(12)


# =============================================================================
# Packing Tests
# =============================================================================


class TestPack:
    """Tests for PackingOrchestrator.pack."""

    def test_no_bins_raises(self) -> None:
        with pytest.raises(NoBinsAvailableError):
            PackingOrchestrator().pack([ItemSpec(10, 10)], [])

    def test_no_bins_raises_without_items(self) -> None:
        with pytest.raises(NoBinsAvailableError):
            PackingOrchestrator().pack([], [])

    def test_no_items(self, square_bin: BinSpec) -> None:
        output = PackingOrchestrator().pack([], [square_bin])

        assert output.placements == ()
        assert output.unpacked == ()
        assert output.summary.attempts_run == 0
        assert output.summary.attempt_index is None
        assert output.summary.success

    def test_all_items_placed(
        self,
        mixed_items: list[ItemSpec],
        roomy_bin: BinSpec,
        default_settings: PackingSettings,
    ) -> None:
        output = PackingOrchestrator(default_settings).pack(mixed_items, [roomy_bin])

        assert output.packed_count == len(mixed_items)
        assert output.unpacked == ()
        assert output.summary.success
        assert output.bins_used == 1
        assert output.summary.bin_counts == {0: len(mixed_items)}
        assert output.summary.info == (f"Packed {len(mixed_items)} items into bin 1 (roomy).",)

    def test_early_exit_once_everything_fits(
        self,
        mixed_items: list[ItemSpec],
        roomy_bin: BinSpec,
        default_settings: PackingSettings,
    ) -> None:
        """Test that the search stops after the first shuffled attempt that packs everything."""
        output = PackingOrchestrator(default_settings).pack(mixed_items, [roomy_bin])

        assert output.summary.attempts_run == 6
        # Equal scores never replace the first attempt.
        assert output.summary.attempt_index == 0
        assert output.summary.sort_method == "area"

    def test_try_harder_runs_full_budget(
        self, mixed_items: list[ItemSpec], roomy_bin: BinSpec
    ) -> None:
        settings = PackingSettings(seed=42, try_harder=True)
        output = PackingOrchestrator(settings).pack(mixed_items, [roomy_bin])
        assert output.summary.attempts_run == default_max_attempt_count(len(mixed_items))

    def test_small_budget_not_cut_short(
        self, mixed_items: list[ItemSpec], roomy_bin: BinSpec
    ) -> None:
        settings = PackingSettings(max_attempt_count=3)
        output = PackingOrchestrator(settings).pack(mixed_items, [roomy_bin])
        assert output.summary.attempts_run == 3

    def test_random_attempt(self, mixed_items: list[ItemSpec], roomy_bin: BinSpec) -> None:
        output = PackingOrchestrator(PackingSettings(seed=1)).pack(
            mixed_items, [roomy_bin], random_attempt=True
        )
        assert output.summary.attempts_run == 1
        assert output.summary.sort_method == "random shuffle"

    def test_oversized_item_left_over(self, square_bin: BinSpec) -> None:
        items = [ItemSpec(50, 50, token="fits"), ItemSpec(150, 150, token="huge")]
        output = PackingOrchestrator().pack(items, [square_bin])

        assert [p.item_token for p in output.placements] == ["fits"]
        assert len(output.unpacked) == 1
        leftover = output.unpacked[0]
        assert leftover.item_index == 1
        assert leftover.item_token == "huge"
        assert leftover.reason == UnpackedReason.DID_NOT_FIT
        assert not output.summary.success
        assert output.summary.info[-1] == "1 item remaining."
        # Nothing ever packs the huge item, so the whole budget runs.
        assert output.summary.attempts_run == default_max_attempt_count(2)

    def test_invalid_item_rejected(self, square_bin: BinSpec) -> None:
        """Test that items without a positive size are reported, not packed."""
        items = [ItemSpec(10, 10), ItemSpec(0, 10, token="flat"), ItemSpec(20, 20)]
        output = PackingOrchestrator().pack(items, [square_bin])

        assert output.packed_count == 2
        assert output.unpacked[0].item_index == 1
        assert output.unpacked[0].reason == UnpackedReason.INVALID_DIMENSION
        assert output.summary.item_count == 3
        assert output.summary.remaining_count == 1

    def test_only_invalid_items(self, square_bin: BinSpec) -> None:
        output = PackingOrchestrator().pack([ItemSpec(-5, 10)], [square_bin])
        assert output.summary.attempts_run == 0
        assert output.unpacked[0].reason == UnpackedReason.INVALID_DIMENSION
        assert output.summary.info == ("1 item remaining.",)

    def test_unusable_bin_logged(
        self, square_bin: BinSpec, caplog: pytest.LogCaptureFixture
    ) -> None:
        tiny = BinSpec(width=4, height=4, token="tiny")
        with caplog.at_level(logging.WARNING, logger="blockpack.application.orchestrator"):
            output = PackingOrchestrator(PackingSettings(margin=3)).pack(
                [ItemSpec(10, 10)], [tiny, square_bin]
            )

        assert "Skipping bin 1 (tiny)" in caplog.text
        assert output.placements[0].bin_token == "bin-a"

    def test_every_item_accounted_for(
        self,
        mixed_items: list[ItemSpec],
        default_settings: PackingSettings,
        assert_no_overlap: Callable[..., None],
    ) -> None:
        """Test that each item is placed once or left over once, never both."""
        bins = [BinSpec(width=100, height=100, token=f"b{i}") for i in range(2)]
        output = PackingOrchestrator(default_settings).pack(mixed_items, bins)

        placed = [p.item_index for p in output.placements]
        leftover = [u.item_index for u in output.unpacked]
        assert sorted(placed + leftover) == list(range(len(mixed_items)))
        assert_no_overlap(output.placements)
        for placement in output.placements:
            assert contains(Rect(0, 0, 100, 100), placement.block)

    def test_unpacked_in_input_order(self) -> None:
        items = [ItemSpec(200, 200), ItemSpec(0, 0), ItemSpec(300, 300)]
        output = PackingOrchestrator().pack(items, [BinSpec(100, 100)])
        assert [u.item_index for u in output.unpacked] == [0, 1, 2]


# =============================================================================
# Placement Coordinate Tests
# =============================================================================


class TestPlacementCoordinates:
    """Tests for mapping packed blocks back to caller coordinates."""

    def test_margin_and_padding(self) -> None:
        """Test that padding is excluded and the margin shifts the origin."""
        bin_spec = BinSpec(width=100, height=100, x=10, y=20, token="p")
        settings = PackingSettings(margin=5, padding=2)
        output = PackingOrchestrator(settings).pack([ItemSpec(30, 20)], [bin_spec])

        placement = output.placements[0]
        assert (placement.x, placement.y) == (5, 5)
        assert (placement.document_x, placement.document_y) == (15, 25)
        assert (placement.width, placement.height) == (30, 20)
        assert placement.block == Rect(0, 0, 32, 22)
        assert placement.bin_token == "p"
        assert not placement.rotated

    def test_item_offset_applied(self) -> None:
        item = ItemSpec(30, 20, offset=Offset(dx=3, dy=4))
        output = PackingOrchestrator().pack([item], [BinSpec(100, 100, x=50, y=60)])

        placement = output.placements[0]
        assert (placement.x, placement.y) == (3, 4)
        assert (placement.document_x, placement.document_y) == (53, 64)

    def test_rotated_item(self) -> None:
        output = PackingOrchestrator().pack([ItemSpec(80, 40)], [BinSpec(50, 90)])

        placement = output.placements[0]
        assert placement.rotated
        assert (placement.width, placement.height) == (40, 80)

    def test_guide_cells(self) -> None:
        """Test that each guide cell is packed as its own bin."""
        bin_spec = BinSpec(
            width=100,
            height=100,
            token="split",
            guides=(Guide(GuideOrientation.HORIZONTAL, 50),),
        )
        items = [ItemSpec(100, 50), ItemSpec(100, 50)]
        output = PackingOrchestrator(PackingSettings(allow_rotation=False)).pack(
            items, [bin_spec]
        )

        assert [p.bin_index for p in output.placements] == [0, 1]
        assert [p.bin_token for p in output.placements] == ["split", "split"]
        assert (output.placements[1].x, output.placements[1].y) == (0, 50)
        assert output.bins_used == 2


# =============================================================================
# Reproducibility, Concurrency, and Cancellation Tests
# =============================================================================


class TestSearchControl:
    """Tests for seeding, workers, cancellation, and progress."""

    def test_seed_reproducible(self, mixed_items: list[ItemSpec], square_bin: BinSpec) -> None:
        """Test that a fixed seed reproduces the same result."""
        first = PackingOrchestrator(PackingSettings(seed=5)).pack(mixed_items, [square_bin])
        second = PackingOrchestrator(PackingSettings(seed=5)).pack(mixed_items, [square_bin])

        assert first.placements == second.placements
        assert first.summary.attempt_index == second.summary.attempt_index
        assert first.summary.score == second.summary.score

    def test_zero_is_a_seed(self) -> None:
        orchestrator = PackingOrchestrator(PackingSettings(seed=0))
        assert orchestrator.rng_for_attempt(3).random() == orchestrator.rng_for_attempt(3).random()

    def test_workers_match_sequential(
        self, mixed_items: list[ItemSpec], square_bin: BinSpec
    ) -> None:
        """Test that concurrent attempts give the sequential result."""
        sequential = PackingOrchestrator(PackingSettings(seed=9)).pack(mixed_items, [square_bin])
        concurrent = PackingOrchestrator(PackingSettings(seed=9, workers=3)).pack(
            mixed_items, [square_bin]
        )

        assert concurrent.placements == sequential.placements
        assert concurrent.summary.attempt_index == sequential.summary.attempt_index
        assert concurrent.summary.attempts_run == sequential.summary.attempts_run

    def test_workers_respect_early_exit(
        self, mixed_items: list[ItemSpec], roomy_bin: BinSpec
    ) -> None:
        settings = PackingSettings(seed=42, workers=4)
        output = PackingOrchestrator(settings).pack(mixed_items, [roomy_bin])
        assert output.summary.attempts_run == 6

    def test_cancel_keeps_first_attempt(
        self, mixed_items: list[ItemSpec], roomy_bin: BinSpec
    ) -> None:
        """Test that a set cancel flag stops the search after the running attempt."""
        cancel = threading.Event()
        cancel.set()
        output = PackingOrchestrator(PackingSettings(try_harder=True)).pack(
            mixed_items, [roomy_bin], cancel_event=cancel
        )

        assert output.summary.cancelled
        assert output.summary.attempts_run == 1
        assert output.packed_count == len(mixed_items)

    def test_cancel_before_any_attempt_completes(self) -> None:
        """Test that a cancelled first attempt leaves every item unpacked."""
        cancel = threading.Event()
        cancel.set()
        items = [ItemSpec(100, 100), ItemSpec(100, 100)]
        bins = [BinSpec(100, 100), BinSpec(100, 100)]
        output = PackingOrchestrator().pack(items, bins, cancel_event=cancel)

        assert output.summary.cancelled
        assert output.summary.attempts_run == 0
        assert output.summary.attempt_index is None
        assert output.placements == ()
        assert [u.item_index for u in output.unpacked] == [0, 1]

    def test_progress_events(self, square_bin: BinSpec) -> None:
        events: list[ProgressEvent] = []
        settings = PackingSettings(max_attempt_count=2)
        PackingOrchestrator(settings).pack(
            [ItemSpec(10, 10)], [square_bin], on_progress=events.append
        )

        assert [e.kind for e in events] == ["bin", "attempt", "bin", "attempt"]
        assert [e.attempt_index for e in events] == [0, 0, 1, 1]
        assert all(e.attempt_budget == 2 for e in events)
        attempt_events = [e for e in events if e.kind == "attempt"]
        assert [e.best_attempt_index for e in attempt_events] == [0, 0]
        assert attempt_events[-1].best_packed_count == 1
        assert attempt_events[-1].best_bin_count == 1
        assert events[0].bin_index == 0


# =============================================================================
# Convenience Entry Point Tests
# =============================================================================


class _ListHost:
    """Host double whose items are dicts and whose document is a list of bins."""

    def __init__(self) -> None:
        self.placed: list[tuple[Any, Any]] = []

    def get_bounds(self, item: dict[str, Any]) -> Rect:
        return Rect.from_xywh(item["x"], item["y"], item["w"], item["h"])

    def place_item(self, item: dict[str, Any], placement: Any) -> None:
        self.placed.append((item, placement))

    def resolve_bins(self, document: list[BinSpec]) -> list[BinSpec]:
        return document


class TestEntryPoints:
    """Tests for pack_items and pack_with_host."""

    def test_pack_items(self, square_bin: BinSpec) -> None:
        output = pack_items([ItemSpec(10, 10)], [square_bin], PackingSettings(seed=1))
        assert output.packed_count == 1

    def test_pack_with_host_moves_items(self) -> None:
        host = _ListHost()
        items = [{"x": 500, "y": 500, "w": 30, "h": 30}, {"x": 0, "y": 0, "w": 300, "h": 30}]
        output = pack_with_host(host, [BinSpec(100, 100)], items)

        assert len(host.placed) == 1
        item, placement = host.placed[0]
        assert item is items[0]
        assert placement.item_token is items[0]
        assert output.unpacked[0].item_token is items[1]

    def test_pack_with_host_no_bins(self) -> None:
        with pytest.raises(NoBinsAvailableError):
            pack_with_host(_ListHost(), [], [{"x": 0, "y": 0, "w": 1, "h": 1}])
