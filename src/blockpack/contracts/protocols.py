"""Protocols for the collaborators around the packing core.

The core only ever sees abstract rectangles. Whatever owns the real
objects (a page-layout document, a drawing, a list of records) implements
``HostAdapter`` once; the core never branches on which host it runs in.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from blockpack.contracts.dtos import Placement, ProgressEvent
    from blockpack.domain.geometry import Rect
    from blockpack.domain.value_objects import BinSpec


@runtime_checkable
class HostAdapter(Protocol):
    """Capability interface to the application that owns items and bins.

    Example:
        ```python
        class MyHost:
            def get_bounds(self, item) -> Rect: ...
            def place_item(self, item, placement) -> None: ...
            def resolve_bins(self, document) -> list[BinSpec]: ...
        ```
    """

    def get_bounds(self, item: Any) -> Rect:
        """Return the item's bounding box in the host's coordinate space.

        Args:
            item: A host item.

        Returns:
            The bounding rectangle, y growing downwards.
        """
        ...

    def place_item(self, item: Any, placement: Placement) -> None:
        """Move (and, if ``placement.rotated``, turn) a host item.

        Args:
            item: The host item the placement belongs to.
            placement: Where the item goes.
        """
        ...

    def resolve_bins(self, document: Any) -> Sequence[BinSpec]:
        """Return the bins a document offers, in fill order.

        Args:
            document: The host document.

        Returns:
            Bins with their host handles as tokens.
        """
        ...


class ProgressCallback(Protocol):
    """Receives progress events; must not touch packing state."""

    def __call__(self, event: ProgressEvent) -> None: ...
