"""Infrastructure layer - host adapters, formatters and renderers."""

from .formatters import (
    JsonExporter,
    PlacementTableFormatter,
    ResultsFormatter,
    token_label,
)
from .layout_renderer import LayoutRenderer
from .record_host import RecordHost

__all__ = [
    # Host adapters
    "RecordHost",
    # Formatters
    "JsonExporter",
    "PlacementTableFormatter",
    "ResultsFormatter",
    "token_label",
    # Rendering
    "LayoutRenderer",
]
