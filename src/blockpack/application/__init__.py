"""Application layer - use cases and orchestration."""

from blockpack.contracts.dtos import (
    PackingOutput,
    PackingSummary,
    Placement,
    ProgressEvent,
    UnpackedItem,
    UnpackedReason,
)

from .orchestrator import (
    PackingOrchestrator,
    default_max_attempt_count,
    pack_items,
    pack_with_host,
)

__all__ = [
    "PackingOrchestrator",
    "PackingOutput",
    "PackingSummary",
    "Placement",
    "ProgressEvent",
    "UnpackedItem",
    "UnpackedReason",
    "default_max_attempt_count",
    "pack_items",
    "pack_with_host",
]
