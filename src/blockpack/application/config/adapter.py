"""Adapters from a PackingJobConfiguration to domain objects.

Bin and item ids become the tokens of the domain objects, so placements
can be mapped back to the job file entries they came from.
"""

from __future__ import annotations

from blockpack.application.config.schema import (
    BinConfigSchema,
    ItemConfigSchema,
    PackingJobConfiguration,
)
from blockpack.domain import BinSpec, Guide, ItemSpec, PackingSettings


def config_to_settings(config: PackingJobConfiguration) -> PackingSettings:
    """Convert the settings section to PackingSettings."""
    settings = config.settings
    return PackingSettings(
        padding=settings.padding,
        margin=settings.margin,
        allow_rotation=settings.allow_rotation,
        best_fit_by=settings.best_fit_by,
        max_attempt_count=settings.max_attempt_count,
        try_harder=settings.try_harder,
        do_not_sort=settings.do_not_sort,
        force_rotate=settings.force_rotate,
        seed=settings.seed,
        workers=settings.workers,
        guides_margin=settings.guides_margin,
    )


def _bin_config_to_spec(bin_config: BinConfigSchema) -> BinSpec:
    return BinSpec(
        width=bin_config.width,
        height=bin_config.height,
        x=bin_config.x,
        y=bin_config.y,
        token=bin_config.id,
        guides=tuple(
            Guide(orientation=guide.orientation, location=guide.location)
            for guide in bin_config.guides
        ),
    )


def _item_config_to_spec(item_config: ItemConfigSchema) -> ItemSpec:
    return ItemSpec(
        width=item_config.width,
        height=item_config.height,
        token=item_config.id,
    )


def config_to_bins(config: PackingJobConfiguration) -> list[BinSpec]:
    """Convert the bins of a job, in fill order."""
    return [_bin_config_to_spec(b) for b in config.bins]


def config_to_items(config: PackingJobConfiguration) -> list[ItemSpec]:
    """Convert the items of a job, in input order."""
    return [_item_config_to_spec(i) for i in config.items]
