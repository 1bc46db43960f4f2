"""Pydantic configuration schema models for packing job files.

A job file describes the bins to fill, the items to pack into them, and
the packing settings. It uses Pydantic v2 for validation and
serialization.

The BestFitBy and GuideOrientation enums are reused from the domain layer
so configuration values and domain values cannot drift apart.
"""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blockpack.domain.geometry import GuideOrientation
from blockpack.domain.settings import BestFitBy

# Supported schema versions for job files
# Version 1.0: Initial schema with bins, guides, items, and settings
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class SettingsConfigSchema(BaseModel):
    """Packing settings section of a job file.

    Attributes:
        padding: Gap kept between items.
        margin: Clearance inside every bin edge.
        allow_rotation: Whether items may be turned 90 degrees.
        best_fit_by: Score bins by packed item count or packed area.
        max_attempt_count: Attempt budget; computed from the item count
            when omitted.
        try_harder: Keep searching after every item fits.
        do_not_sort: Pack in input order with a single attempt.
        force_rotate: Turn every item before packing.
        seed: Seed for shuffled attempts.
        workers: Number of attempts run concurrently.
        guides_margin: Clearance either side of each bin guide.
    """

    model_config = ConfigDict(extra="forbid")

    padding: float = Field(default=0.0, ge=0, description="Gap between items")
    margin: float = Field(default=0.0, ge=0, description="Clearance inside bin edges")
    allow_rotation: bool = Field(default=True, description="Allow 90 degree rotation")
    best_fit_by: BestFitBy = Field(
        default=BestFitBy.COUNT,
        description="Score bins by item count or by packed area",
    )
    max_attempt_count: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of attempts (computed when omitted)",
    )
    try_harder: bool = Field(default=False, description="Use every attempt")
    do_not_sort: bool = Field(default=False, description="Pack in input order")
    force_rotate: bool = Field(default=False, description="Rotate every item")
    seed: int | None = Field(default=None, description="Seed for shuffled attempts")
    workers: int = Field(default=1, ge=1, le=64, description="Concurrent attempts")
    guides_margin: float = Field(default=0.0, ge=0, description="Clearance at guides")


class GuideConfigSchema(BaseModel):
    """A guide line dividing a bin into separately packed cells.

    Attributes:
        orientation: "horizontal" guides split rows, "vertical" split columns.
        location: Guide position in document coordinates.
    """

    model_config = ConfigDict(extra="forbid")

    orientation: GuideOrientation
    location: float


class BinConfigSchema(BaseModel):
    """A bin to pack into.

    Attributes:
        id: Name of the bin, reported back with placements.
        x: Left edge in document coordinates.
        y: Top edge in document coordinates.
        width: Bin width.
        height: Bin height.
        guides: Optional guide lines dividing the bin.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    x: float = 0.0
    y: float = 0.0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    guides: list[GuideConfigSchema] = Field(default_factory=list)


class ItemConfigSchema(BaseModel):
    """An item to pack, described by its bounding box.

    Sizes are not range-checked here: items without a positive padded size
    are reported as unpacked rather than failing the whole job.

    Attributes:
        id: Name of the item, reported back with its placement.
        x: Current left edge in document coordinates.
        y: Current top edge in document coordinates.
        width: Bounding-box width.
        height: Bounding-box height.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    x: float = 0.0
    y: float = 0.0
    width: float
    height: float


class PackingJobConfiguration(BaseModel):
    """Root model of a packing job file.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        settings: Packing settings
        bins: Bins in fill order
        items: Items in input order

    Example:
        >>> config = PackingJobConfiguration(
        ...     schema_version="1.0",
        ...     bins=[BinConfigSchema(id="page-1", width=595, height=842)],
        ...     items=[ItemConfigSchema(id="a", width=100, height=50)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    settings: SettingsConfigSchema = Field(default_factory=SettingsConfigSchema)
    bins: list[BinConfigSchema] = Field(default_factory=list)
    items: list[ItemConfigSchema] = Field(default_factory=list)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that schema version is supported.

        Newer minor versions within a supported major version are accepted.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @model_validator(mode="after")
    def validate_unique_ids(self) -> PackingJobConfiguration:
        """Bin ids and item ids must each be unique."""
        for label, ids in (
            ("bin", [b.id for b in self.bins]),
            ("item", [i.id for i in self.items]),
        ):
            duplicates = sorted(x for x, n in Counter(ids).items() if n > 1)
            if duplicates:
                raise ValueError(f"Duplicate {label} ids: {', '.join(duplicates)}")
        return self
