"""Output formatters and exporters for packing results."""

from __future__ import annotations

import json
from typing import Any, Mapping

from blockpack.contracts.dtos import PackingOutput, Placement


def token_label(token: Any, fallback: int) -> str:
    """Display name for an item or bin token.

    Record tokens (mappings) are named by their ``id``; a missing token
    falls back to the index.
    """
    if isinstance(token, Mapping):
        token = token.get("id")
    if token is None:
        return str(fallback)
    return str(token)


class ResultsFormatter:
    """Formats the results summary shown after a packing run."""

    def format(self, output: PackingOutput) -> str:
        summary = output.summary
        if summary.success:
            headline = f"SUCCESS: Packed {output.packed_count} blocks."
        else:
            headline = f"FAILED: {output.remaining_count} blocks remaining."

        lines = [headline, ""]
        if summary.attempt_index is not None:
            lines.append(f"Attempt number: {summary.attempt_index}")
            lines.append(f"SortType: {summary.sort_method}")
            lines.append(f"Score: {round(summary.score)}")
        else:
            lines.append("No attempt completed.")
        if summary.cancelled:
            lines.append(f"Cancelled after {summary.attempts_run} attempts.")
        lines.append("")
        lines.extend(summary.info)
        return "\n".join(lines)


class PlacementTableFormatter:
    """Formats placements as a table, one row per placed item."""

    def format(self, output: PackingOutput) -> str:
        if not output.placements:
            return "No items placed."

        lines = [
            "PLACEMENTS",
            "=" * 72,
            f"{'Item':<16} {'Bin':<16} {'X':>9} {'Y':>9} {'Width':>9} {'Height':>9}",
            "-" * 72,
        ]
        for p in output.placements:
            name = token_label(p.item_token, p.item_index)
            bin_name = token_label(p.bin_token, p.bin_index)
            if p.rotated:
                name += " (R)"
            lines.append(
                f"{name:<16} {bin_name:<16} {p.x:>9.2f} {p.y:>9.2f} "
                f"{p.width:>9.2f} {p.height:>9.2f}"
            )
        lines.append("-" * 72)

        if output.unpacked:
            lines.append("")
            lines.append("UNPACKED")
            for entry in output.unpacked:
                name = token_label(entry.item_token, entry.item_index)
                lines.append(f"  {name} ({entry.reason.value})")
        return "\n".join(lines)


class JsonExporter:
    """Exports packing results as JSON."""

    def export(self, output: PackingOutput, items: list[dict[str, Any]] | None = None) -> str:
        """Export a packing output as a JSON string.

        Args:
            output: Result of a packing run.
            items: Job items with placements already applied, included
                verbatim when given.

        Returns:
            Indented JSON document.
        """
        summary = output.summary
        data: dict[str, Any] = {
            "summary": {
                "success": summary.success,
                "attempt_index": summary.attempt_index,
                "sort_method": summary.sort_method,
                "score": summary.score,
                "attempts_run": summary.attempts_run,
                "cancelled": summary.cancelled,
                "packed_count": output.packed_count,
                "remaining_count": output.remaining_count,
                "bin_counts": {str(k): v for k, v in summary.bin_counts.items()},
                "info": list(summary.info),
            },
            "placements": [self._format_placement(p) for p in output.placements],
            "unpacked": [
                {
                    "item_index": entry.item_index,
                    "item": token_label(entry.item_token, entry.item_index),
                    "reason": entry.reason.value,
                }
                for entry in output.unpacked
            ],
        }
        if items is not None:
            data["items"] = items
        return json.dumps(data, indent=2, default=str)

    def _format_placement(self, placement: Placement) -> dict[str, Any]:
        return {
            "item_index": placement.item_index,
            "item": token_label(placement.item_token, placement.item_index),
            "bin_index": placement.bin_index,
            "bin": token_label(placement.bin_token, placement.bin_index),
            "x": placement.x,
            "y": placement.y,
            "document_x": placement.document_x,
            "document_y": placement.document_y,
            "width": placement.width,
            "height": placement.height,
            "rotated": placement.rotated,
        }
