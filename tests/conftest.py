"""Pytest configuration and shared fixtures for blockpack tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from blockpack.domain import BinSpec, Block, ItemSpec, PackingSettings


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def assert_no_overlap() -> Callable[..., None]:
    """Checker failing if two placements in one bin overlap with positive area."""

    def _check(placements) -> None:
        by_bin: dict[int, list] = {}
        for p in placements:
            by_bin.setdefault(p.bin_index, []).append(p)
        for group in by_bin.values():
            for i, a in enumerate(group):
                for b in group[i + 1 :]:
                    overlap_w = min(a.block.x1, b.block.x1) - max(a.block.x0, b.block.x0)
                    overlap_h = min(a.block.y1, b.block.y1) - max(a.block.y0, b.block.y0)
                    assert overlap_w <= 0 or overlap_h <= 0, f"{a} overlaps {b}"

    return _check


@pytest.fixture
def default_settings() -> PackingSettings:
    """Settings with a fixed seed so runs are reproducible."""
    return PackingSettings(seed=42)


@pytest.fixture
def square_bin() -> BinSpec:
    """A single 100x100 bin at the origin."""
    return BinSpec(width=100, height=100, token="bin-a")


@pytest.fixture
def make_block() -> Callable[..., Block]:
    """Factory for blocks built from a bare width and height."""

    def _make(index: int, width: float, height: float, padding: float = 0.0) -> Block:
        return Block.from_item(index, ItemSpec(width=width, height=height), padding=padding)

    return _make


@pytest.fixture
def mixed_items() -> list[ItemSpec]:
    """A dozen items of assorted sizes."""
    sizes = [
        (40, 30), (20, 60), (35, 35), (10, 80), (50, 20), (25, 25),
        (15, 45), (60, 10), (30, 30), (45, 15), (20, 20), (5, 70),
    ]
    return [ItemSpec(width=w, height=h, token=f"item-{i}") for i, (w, h) in enumerate(sizes)]


@pytest.fixture
def job_data() -> dict[str, Any]:
    """A small, valid job file as a dictionary."""
    return {
        "schema_version": "1.0",
        "settings": {"padding": 2, "seed": 7},
        "bins": [
            {"id": "page-1", "x": 0, "y": 0, "width": 200, "height": 100},
            {"id": "page-2", "x": 250, "y": 0, "width": 200, "height": 100},
        ],
        "items": [
            {"id": "a", "x": 10, "y": 500, "width": 90, "height": 45},
            {"id": "b", "x": 20, "y": 500, "width": 60, "height": 60},
            {"id": "c", "x": 30, "y": 500, "width": 40, "height": 90},
            {"id": "d", "x": 40, "y": 500, "width": 100, "height": 30},
        ],
    }


@pytest.fixture
def write_job(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a job dictionary to a temporary JSON file."""

    def _write(data: dict[str, Any], name: str = "job.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return path

    return _write
