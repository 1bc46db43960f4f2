"""Host adapter for plain dictionary records.

Items are dicts with ``id``, ``x``, ``y``, ``width`` and ``height`` keys;
a document is a dict whose ``bins`` entry lists bin records with the same
keys plus optional ``guides``. Placing an item rewrites its record in
place, which is what the command line front end writes back out.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from blockpack.contracts.dtos import Placement
from blockpack.domain import BinSpec, Guide, GuideOrientation, Rect

logger = logging.getLogger(__name__)


class RecordHost:
    """HostAdapter over dict records, such as a parsed job file.

    Attributes:
        record_rotation: Also record ``bin`` and ``rotated`` on placed items.
    """

    def __init__(self, record_rotation: bool = True) -> None:
        self.record_rotation = record_rotation

    def get_bounds(self, item: dict[str, Any]) -> Rect:
        return Rect.from_xywh(
            float(item.get("x", 0.0)),
            float(item.get("y", 0.0)),
            float(item["width"]),
            float(item["height"]),
        )

    def place_item(self, item: dict[str, Any], placement: Placement) -> None:
        """Move the record to its placement, swapping its size if rotated."""
        item["x"] = placement.document_x
        item["y"] = placement.document_y
        item["width"] = placement.width
        item["height"] = placement.height
        if self.record_rotation:
            item["bin"] = placement.bin_token
            item["rotated"] = placement.rotated
        logger.debug("Placed %s at (%g, %g)", item.get("id"), item["x"], item["y"])

    def resolve_bins(self, document: dict[str, Any]) -> Sequence[BinSpec]:
        return [
            BinSpec(
                width=float(record["width"]),
                height=float(record["height"]),
                x=float(record.get("x", 0.0)),
                y=float(record.get("y", 0.0)),
                token=record.get("id"),
                guides=tuple(
                    Guide(
                        orientation=GuideOrientation(guide["orientation"]),
                        location=float(guide["location"]),
                    )
                    for guide in record.get("guides", ())
                ),
            )
            for record in document.get("bins", ())
        ]
