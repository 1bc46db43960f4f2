"""Job file schema and loading system.

This package provides JSON-based job file loading and validation:
Pydantic models for the schema, a loader with comprehensive error
handling, and adapters to domain objects.

Public API:
    - PackingJobConfiguration: Root job model
    - SettingsConfigSchema: Packing settings model
    - BinConfigSchema: Bin model
    - GuideConfigSchema: Bin guide model
    - ItemConfigSchema: Item model
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for job file errors
    - config_to_settings / config_to_bins / config_to_items: Domain adapters

Example:
    >>> from pathlib import Path
    >>> from blockpack.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("job.json"))
    ...     print(f"{len(config.items)} items, {len(config.bins)} bins")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from blockpack.application.config.adapter import (
    config_to_bins,
    config_to_items,
    config_to_settings,
)
from blockpack.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from blockpack.application.config.schema import (
    SUPPORTED_VERSIONS,
    BinConfigSchema,
    GuideConfigSchema,
    ItemConfigSchema,
    PackingJobConfiguration,
    SettingsConfigSchema,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "BinConfigSchema",
    "ConfigError",
    "GuideConfigSchema",
    "ItemConfigSchema",
    "PackingJobConfiguration",
    "SettingsConfigSchema",
    "config_to_bins",
    "config_to_items",
    "config_to_settings",
    "load_config",
    "load_config_from_dict",
]
