"""Contracts shared between layers: DTOs and protocols."""

from .dtos import (
    PackingOutput,
    PackingSummary,
    Placement,
    ProgressEvent,
    UnpackedItem,
    UnpackedReason,
)
from .protocols import HostAdapter, ProgressCallback

__all__ = [
    "HostAdapter",
    "PackingOutput",
    "PackingSummary",
    "Placement",
    "ProgressCallback",
    "ProgressEvent",
    "UnpackedItem",
    "UnpackedReason",
]
