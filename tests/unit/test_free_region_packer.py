"""Tests for the single-bin free-region packer.

Tests cover:
- First-fit placement at region corners
- Rotation retry and restoring refused blocks
- Free-region bookkeeping (subtraction and merging)
- Reuse of one packer across calls
"""

from __future__ import annotations

from typing import Callable

import pytest

from blockpack.domain import Block, FreeRegion, FreeRegionPacker, Rect, contains


def _region_tuple(region: FreeRegion) -> tuple[float, float, float, float]:
    return (region.x0, region.y0, region.x1, region.y1)


# =============================================================================
# Placement Tests
# =============================================================================


class TestFit:
    """Tests for FreeRegionPacker.fit."""

    def test_two_blocks_side_by_side(self, make_block: Callable[..., Block]) -> None:
        """Test that 60x100 and 40x100 exactly fill a 100x100 bin."""
        a = make_block(0, 60, 100)
        b = make_block(1, 40, 100)
        result = FreeRegionPacker(100, 100).fit([a, b], bin_index=0)

        assert result.count == 2
        assert result.remaining_blocks == []
        assert a.footprint == Rect(0, 0, 60, 100)
        assert b.footprint == Rect(60, 0, 100, 100)
        assert result.area == 10000

    def test_rotation_makes_block_fit(self, make_block: Callable[..., Block]) -> None:
        """Test that a refused 80x40 block fits a 50x90 bin once turned."""
        block = make_block(0, 80, 40)
        result = FreeRegionPacker(50, 90, allow_rotation=True).fit([block], bin_index=0)

        assert result.count == 1
        assert block.is_rotated
        assert block.footprint == Rect(0, 0, 40, 80)

    def test_no_rotation_leaves_block(self, make_block: Callable[..., Block]) -> None:
        block = make_block(0, 80, 40)
        result = FreeRegionPacker(50, 90, allow_rotation=False).fit([block], bin_index=0)

        assert result.count == 0
        assert result.remaining_blocks == [block]
        assert not block.packed
        assert not block.is_rotated

    def test_refused_block_restored(self, make_block: Callable[..., Block]) -> None:
        """Test that a block refused in both orientations comes back unrotated."""
        block = make_block(0, 200, 150)
        result = FreeRegionPacker(100, 100, allow_rotation=True).fit([block], bin_index=0)

        assert result.remaining_blocks == [block]
        assert not block.is_rotated
        assert (block.w, block.h) == (200, 150)

    def test_exact_fit(self, make_block: Callable[..., Block]) -> None:
        block = make_block(0, 100, 100)
        result = FreeRegionPacker(100, 100).fit([block], bin_index=0)
        assert result.count == 1

    def test_bin_index_recorded(self, make_block: Callable[..., Block]) -> None:
        block = make_block(0, 10, 10)
        FreeRegionPacker(100, 100).fit([block], bin_index=4)
        assert block.bin_index == 4
        assert block.packed

    def test_remaining_keep_input_order(self, make_block: Callable[..., Block]) -> None:
        """Test that unplaced blocks come back in the order they were given."""
        big = make_block(0, 90, 90)
        too_big_1 = make_block(1, 50, 50)
        small = make_block(2, 10, 10)
        too_big_2 = make_block(3, 40, 40)
        result = FreeRegionPacker(100, 100, allow_rotation=True).fit(
            [big, too_big_1, small, too_big_2], bin_index=0
        )

        assert result.packed_blocks == [big, small]
        assert result.remaining_blocks == [too_big_1, too_big_2]

    def test_first_fit_fills_column_then_row(self, make_block: Callable[..., Block]) -> None:
        """Test that blocks go to the first region large enough, in list order."""
        blocks = [make_block(i, 50, 50) for i in range(4)]
        result = FreeRegionPacker(100, 100).fit(blocks, bin_index=0)

        assert result.count == 4
        corners = {(b.x0, b.y0) for b in blocks}
        assert corners == {(0, 0), (50, 0), (0, 50), (50, 50)}

    def test_padding_consumes_gaps_only(self, make_block: Callable[..., Block]) -> None:
        """Test that padded blocks fit a bin whose usable size includes one padding."""
        padding = 2
        blocks = [make_block(i, 48, 48, padding=padding) for i in range(4)]
        result = FreeRegionPacker(100 + padding, 100 + padding).fit(blocks, bin_index=0)
        assert result.count == 4

    def test_no_overlap_and_contained(self, make_block: Callable[..., Block]) -> None:
        """Test that placed blocks stay inside the bin and never overlap."""
        sizes = [(30, 20), (25, 45), (10, 10), (60, 15), (35, 35), (20, 70), (15, 15), (40, 25)]
        blocks = [make_block(i, w, h) for i, (w, h) in enumerate(sizes)]
        result = FreeRegionPacker(100, 100, allow_rotation=True).fit(blocks, bin_index=0)

        bin_rect = Rect(0, 0, 100, 100)
        placed = result.packed_blocks
        for block in placed:
            assert contains(bin_rect, block)
        for i, a in enumerate(placed):
            for b in placed[i + 1 :]:
                overlap_w = min(a.x1, b.x1) - max(a.x0, b.x0)
                overlap_h = min(a.y1, b.y1) - max(a.y0, b.y0)
                assert overlap_w <= 0 or overlap_h <= 0
        assert result.count + len(result.remaining_blocks) == len(blocks)

    def test_empty_input(self) -> None:
        result = FreeRegionPacker(100, 100).fit([], bin_index=0)
        assert result.count == 0
        assert result.area == 0
        assert result.packed_blocks == []
        assert result.remaining_blocks == []

    def test_packer_reusable(self, make_block: Callable[..., Block]) -> None:
        """Test that a packer keeps no free space between calls."""
        packer = FreeRegionPacker(100, 100)
        first = packer.fit([make_block(0, 100, 100)], bin_index=0)
        second = packer.fit([make_block(1, 100, 100)], bin_index=1)
        assert first.count == 1
        assert second.count == 1


# =============================================================================
# Free Region Bookkeeping Tests
# =============================================================================


class TestRegionBookkeeping:
    """Tests for subtracting footprints and merging regions."""

    def test_subtract_corner_block(self, make_block: Callable[..., Block]) -> None:
        """Test the slivers left by a block in the top-left corner."""
        packer = FreeRegionPacker(100, 100)
        block = make_block(0, 40, 30)
        block.place(0, 0)
        regions = packer._subtract([FreeRegion(0, 0, 100, 100)], block)

        assert sorted(_region_tuple(r) for r in regions) == [
            (0, 30, 100, 100),
            (40, 0, 100, 100),
        ]

    def test_subtract_full_block_leaves_nothing(self, make_block: Callable[..., Block]) -> None:
        packer = FreeRegionPacker(100, 100)
        block = make_block(0, 100, 100)
        block.place(0, 0)
        assert packer._subtract([FreeRegion(0, 0, 100, 100)], block) == []

    def test_subtract_keeps_untouched_regions(self, make_block: Callable[..., Block]) -> None:
        packer = FreeRegionPacker(100, 100)
        block = make_block(0, 10, 10)
        block.place(0, 0)
        far = FreeRegion(50, 50, 60, 60)
        regions = packer._subtract([far], block)
        assert [_region_tuple(r) for r in regions] == [(50, 50, 60, 60)]

    def test_merge_drops_contained(self) -> None:
        outer = FreeRegion(0, 0, 100, 100)
        inner = FreeRegion(10, 10, 20, 20)
        merged = FreeRegionPacker._merge([inner, outer])
        assert [_region_tuple(r) for r in merged] == [(0, 0, 100, 100)]

    def test_merge_joins_halves(self) -> None:
        """Test that two halves of a free area merge into one region."""
        merged = FreeRegionPacker._merge([FreeRegion(0, 0, 50, 100), FreeRegion(50, 0, 100, 100)])
        assert [_region_tuple(r) for r in merged] == [(0, 0, 100, 100)]

    @pytest.mark.parametrize("count", [1, 3, 7])
    def test_free_space_never_claims_occupied(
        self, make_block: Callable[..., Block], count: int
    ) -> None:
        """Test that no free region overlaps a placed block after packing."""
        packer = FreeRegionPacker(100, 100)
        regions = [FreeRegion(0, 0, 100, 100)]
        placed: list[Block] = []
        for i in range(count):
            block = make_block(i, 20 + i, 15 + 2 * i)
            region = packer._find_region(regions, block)
            assert region is not None
            block.place(region.x0, region.y0)
            regions = packer._subtract(regions, block)
            placed.append(block)

        for region in regions:
            for block in placed:
                overlap_w = min(region.x1, block.x1) - max(region.x0, block.x0)
                overlap_h = min(region.y1, block.y1) - max(region.y0, block.y0)
                assert overlap_w <= 0 or overlap_h <= 0
