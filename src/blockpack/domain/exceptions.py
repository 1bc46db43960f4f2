"""Exceptions raised by the packing core."""

from __future__ import annotations


class PackingError(Exception):
    """Base class for packing failures caused by caller input."""


class NoBinsAvailableError(PackingError):
    """Raised when a packing run is given no bins at all."""

    def __init__(self, message: str = "No bins available: at least one bin is required") -> None:
        super().__init__(message)


class PackingCancelled(Exception):
    """Raised inside an attempt when the caller asked to stop."""

    def __init__(self, attempt_index: int) -> None:
        self.attempt_index = attempt_index
        super().__init__(f"Packing cancelled during attempt {attempt_index}")
