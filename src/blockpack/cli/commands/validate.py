"""Validate command for checking packing job files.

This module provides the `validate` command that checks a JSON job file for
errors, and warns about items that can never be packed.
"""

from pathlib import Path
from typing import Annotated

import typer

from blockpack.application.config import (
    ConfigError,
    PackingJobConfiguration,
    config_to_bins,
    config_to_items,
    config_to_settings,
    load_config,
)
from blockpack.domain import Block, resolve_packing_bins


def display_load_error(error: ConfigError) -> None:
    """Display a job file loading error on stderr.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type in ("validation", "version"):
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            typer.echo(f"  {path}: {message}", err=True)
            value = detail.get("value")
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"    Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def collect_warnings(config: PackingJobConfiguration) -> list[str]:
    """Find job entries that can be loaded but never packed.

    Args:
        config: A validated job.

    Returns:
        One message per problem, in job order.
    """
    settings = config_to_settings(config)
    packing_bins = resolve_packing_bins(
        config_to_bins(config),
        margin=settings.margin,
        padding=settings.padding,
        guides_margin=settings.guides_margin,
    )
    warnings: list[str] = []

    if not config.bins:
        warnings.append("bins: no bins to pack into")
    for packing_bin in packing_bins:
        if not packing_bin.is_usable:
            warnings.append(f"bins: {packing_bin.label} has no usable space")

    usable = [b for b in packing_bins if b.is_usable]
    for index, item in enumerate(config_to_items(config)):
        block = Block.from_item(index, item, padding=settings.padding)
        if not block.has_valid_size:
            warnings.append(f"items[{index}]: {item.token} has no positive size")
            continue
        fits = any(
            (block.w <= b.width and block.h <= b.height)
            or (settings.allow_rotation and block.h <= b.width and block.w <= b.height)
            for b in usable
        )
        if not fits:
            warnings.append(f"items[{index}]: {item.token} is larger than every bin")
    return warnings


def validate_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a packing job file.

    Checks the job file for:
    - JSON syntax errors
    - Schema validation errors (missing required fields, invalid types, etc.)
    - Items that can never be packed (no size, larger than every bin)

    Exit codes:
        0 - Job is valid with no warnings
        1 - Job has errors (cannot be used)
        2 - Job is valid but has warnings

    Example:
        blockpack validate job.json
    """
    typer.echo(f"Validating {job_file}...")
    typer.echo()

    try:
        config = load_config(job_file)
    except ConfigError as e:
        display_load_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{len(config.items)} items, {len(config.bins)} bins")

    warnings = collect_warnings(config)
    if warnings:
        typer.echo()
        typer.echo("Warnings:")
        for warning in warnings:
            typer.echo(f"  {warning}")
        typer.echo()
        typer.echo(f"Validation passed with {len(warnings)} warning(s)")
        raise typer.Exit(code=2)

    typer.echo("Validation passed. Job is valid.")
