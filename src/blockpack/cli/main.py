"""Typer CLI for rectangle packing."""

import dataclasses
import logging
from pathlib import Path
from typing import Annotated

import typer

from blockpack.application import ProgressEvent, pack_with_host
from blockpack.application.config import ConfigError, config_to_settings, load_config
from blockpack.cli.commands import display_load_error, validate_command
from blockpack.domain import PackingError
from blockpack.infrastructure import (
    JsonExporter,
    LayoutRenderer,
    PlacementTableFormatter,
    RecordHost,
    ResultsFormatter,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="blockpack",
    help="Pack rectangular items into rectangular bins.",
)

# Register validate command
app.command(name="validate")(validate_command)


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _echo_progress(event: ProgressEvent) -> None:
    if event.kind != "attempt":
        return
    typer.echo(
        f"Attempt {event.attempt_index + 1}/{event.attempt_budget}: "
        f"packed {event.packed_count}/{event.item_count}, "
        f"best {event.best_packed_count} in {event.best_bin_count} bins "
        f"(attempt {event.best_attempt_index})",
        err=True,
    )


@app.command()
def pack(
    job_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write results and placed items as JSON"),
    ] = None,
    svg_dir: Annotated[
        Path | None,
        typer.Option("--svg-dir", help="Write one SVG layout per bin into this directory"),
    ] = None,
    try_harder: Annotated[
        bool,
        typer.Option("--try-harder", help="Use every attempt even after all items fit"),
    ] = False,
    random_attempt: Annotated[
        bool,
        typer.Option("--random", help="Make a single shuffled attempt"),
    ] = False,
    max_attempts: Annotated[
        int | None,
        typer.Option("--max-attempts", min=1, help="Maximum number of attempts"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for shuffled attempts"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Number of attempts run concurrently"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Print a table of placements"),
    ] = False,
    progress: Annotated[
        bool,
        typer.Option("--progress", help="Report each attempt on stderr"),
    ] = False,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Increase log detail (-v, -vv)"),
    ] = 0,
) -> None:
    """Pack the items of a job file into its bins.

    Command line options override the job's settings.

    Exit codes:
        0 - Every item was packed
        1 - The job could not be loaded or packed
        2 - Some items remain unpacked

    Example:
        blockpack pack job.json -o placed.json --svg-dir layouts
    """
    _configure_logging(verbose)

    try:
        config = load_config(job_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    settings = config_to_settings(config)
    overrides: dict[str, object] = {}
    if try_harder:
        overrides["try_harder"] = True
    if max_attempts is not None:
        overrides["max_attempt_count"] = max_attempts
    if seed is not None:
        overrides["seed"] = seed
    if workers is not None:
        overrides["workers"] = workers
    if overrides:
        settings = dataclasses.replace(settings, **overrides)
    logger.debug("Packing with %s", settings)

    document = config.model_dump(mode="json")
    host = RecordHost()
    try:
        output = pack_with_host(
            host,
            document,
            document["items"],
            settings,
            random_attempt=random_attempt,
            on_progress=_echo_progress if progress else None,
        )
    except PackingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(ResultsFormatter().format(output))
    if table:
        typer.echo()
        typer.echo(PlacementTableFormatter().format(output))

    if output_file is not None:
        output_file.write_text(JsonExporter().export(output, items=document["items"]))
        typer.echo(f"\nResults written to: {output_file}")

    if svg_dir is not None:
        svg_dir.mkdir(parents=True, exist_ok=True)
        svgs = LayoutRenderer().render_all_svg(output, host.resolve_bins(document), settings)
        for number, svg in enumerate(svgs, start=1):
            path = svg_dir / f"bin-{number:02d}.svg"
            path.write_text(svg)
        typer.echo(f"Wrote {len(svgs)} layout(s) to: {svg_dir}")

    if not output.summary.success:
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
