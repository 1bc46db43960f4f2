"""Layout diagram rendering for packing results.

This module renders one SVG per caller bin showing the packing areas
(margins and guide cells), the placed items with their labels, and a
rotation indicator.
"""

from __future__ import annotations

import html
from typing import Sequence

from blockpack.contracts.dtos import PackingOutput, Placement
from blockpack.domain import BinSpec, PackingBin, PackingSettings, resolve_packing_bins
from blockpack.infrastructure.formatters import token_label


class LayoutRenderer:
    """Renders packing layouts in SVG format.

    Attributes:
        scale: Pixels per document unit.
        item_fill: Fill color for placed items.
        rotated_fill: Fill color for rotated items.
        item_stroke: Stroke color for item outlines.
        area_stroke: Stroke color for packing area outlines.
        text_color: Color for labels and the header.
        show_labels: Whether to label items.
    """

    header_height = 30

    def __init__(
        self,
        scale: float = 1.0,
        item_fill: str = "#ADD8E6",  # Light blue
        rotated_fill: str = "#F0E68C",  # Khaki
        item_stroke: str = "#000000",
        area_stroke: str = "#999999",
        text_color: str = "#000000",
        show_labels: bool = True,
    ) -> None:
        self.scale = scale
        self.item_fill = item_fill
        self.rotated_fill = rotated_fill
        self.item_stroke = item_stroke
        self.area_stroke = area_stroke
        self.text_color = text_color
        self.show_labels = show_labels

    def render_svg(
        self,
        spec: BinSpec,
        areas: Sequence[PackingBin],
        placements: Sequence[Placement],
        bin_number: int = 1,
        total_bins: int = 1,
    ) -> str:
        """Generate an SVG diagram for one caller bin.

        Args:
            spec: The caller's bin.
            areas: Packing areas belonging to ``spec``.
            placements: Placements inside those areas.
            bin_number: One-based position of ``spec`` (for the header).
            total_bins: Number of caller bins (for the header).

        Returns:
            SVG document as a string.
        """
        svg_width = spec.width * self.scale
        svg_height = spec.height * self.scale + self.header_height

        used_area = sum(p.width * p.height for p in placements)
        bin_area = spec.width * spec.height
        fill_percentage = used_area / bin_area * 100 if bin_area else 0.0
        name = token_label(spec.token, bin_number)
        header_text = html.escape(
            f"Bin {bin_number} of {total_bins} - {name} - "
            f"{len(placements)} items - {fill_percentage:.1f}% filled"
        )

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" fill="white"/>',
            f'  <rect x="0" y="0" width="{svg_width}" height="{self.header_height}" fill="#E0E0E0"/>',
            f'  <text x="10" y="{self.header_height - 8}" font-family="Arial, sans-serif" '
            f'font-size="14" fill="{self.text_color}">{header_text}</text>',
            f'  <rect x="0" y="{self.header_height}" width="{svg_width}" '
            f'height="{spec.height * self.scale}" fill="#FAFAFA" stroke="{self.item_stroke}" '
            f'stroke-width="2"/>',
            "",
            "  <!-- Packing areas -->",
        ]
        for area in areas:
            ax = (area.area.x0 - spec.x) * self.scale
            ay = self.header_height + (area.area.y0 - spec.y) * self.scale
            parts.append(
                f'  <rect x="{ax}" y="{ay}" width="{area.area.width * self.scale}" '
                f'height="{area.area.height * self.scale}" fill="none" '
                f'stroke="{self.area_stroke}" stroke-dasharray="5,5"/>'
            )

        parts.append("")
        parts.append("  <!-- Placed items -->")
        for placement in placements:
            parts.append(self._render_item(placement))

        parts.append("")
        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(
        self,
        output: PackingOutput,
        bins: Sequence[BinSpec],
        settings: PackingSettings | None = None,
    ) -> list[str]:
        """Generate one SVG per caller bin, including empty ones.

        Args:
            output: Result of a packing run over ``bins``.
            bins: The caller bins the run used.
            settings: Settings of the run (for margins and guides).

        Returns:
            SVG strings in bin order.
        """
        settings = settings or PackingSettings()
        packing_bins = resolve_packing_bins(
            bins,
            margin=settings.margin,
            padding=settings.padding,
            guides_margin=settings.guides_margin,
        )

        svgs: list[str] = []
        for number, spec in enumerate(bins, start=1):
            areas = [b for b in packing_bins if b.spec is spec]
            indices = {b.index for b in areas}
            placements = [p for p in output.placements if p.bin_index in indices]
            svgs.append(self.render_svg(spec, areas, placements, number, len(bins)))
        return svgs

    def _render_item(self, placement: Placement) -> str:
        x = placement.x * self.scale
        y = self.header_height + placement.y * self.scale
        w = placement.width * self.scale
        h = placement.height * self.scale
        fill = self.rotated_fill if placement.rotated else self.item_fill

        rect = (
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{fill}" stroke="{self.item_stroke}"/>'
        )
        font_size = min(12, min(w, h) / 4)
        if not self.show_labels or font_size < 6:
            return f"  {rect}"

        label = token_label(placement.item_token, placement.item_index)
        if placement.rotated:
            label += " (R)"
        return "\n".join(
            [
                "  <g>",
                f"    {rect}",
                f'    <text x="{x + w / 2}" y="{y + h / 2}" text-anchor="middle" '
                f'dominant-baseline="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size}" fill="{self.text_color}">{html.escape(label)}</text>',
                "  </g>",
            ]
        )
