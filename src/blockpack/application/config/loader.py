"""Job file loader with comprehensive error handling.

This module loads and parses JSON packing job files. It handles file system
errors, JSON parsing errors, and Pydantic validation errors with clear,
actionable error messages.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from blockpack.application.config.schema import PackingJobConfiguration

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised for job file errors.

    Attributes:
        message: The primary error message
        error_type: Category of error (file_not_found, permission_denied,
            file_read_error, json_parse, validation, version)
        path: Path to the job file (if applicable)
        details: Additional error details (line/column for JSON, validation errors, etc.)
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("settings", "padding"))
        'settings.padding'
        >>> _format_json_path(("bins", 0, "guides", 1, "location"))
        'bins[0].guides[1].location'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _extract_validation_errors(
    error: PydanticValidationError,
) -> list[dict[str, Any]]:
    """Flatten a Pydantic ValidationError into path/message/value/error_type dicts."""
    details: list[dict[str, Any]] = []
    for err in error.errors():
        details.append(
            {
                "path": _format_json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
        )
    return details


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Job file validation failed:"]
    for detail in details:
        path = detail["path"] or "(root)"
        message = detail["message"]
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {path}: {message} (got: {value!r})")
        else:
            lines.append(f"  - {path}: {message}")
    return "\n".join(lines)


def _validation_error(
    error: PydanticValidationError, path: Path | None = None
) -> ConfigError:
    details = _extract_validation_errors(error)
    # A bad version makes every other message meaningless.
    if details and all(d["path"] == "schema_version" for d in details):
        error_type = "version"
    else:
        error_type = "validation"
    return ConfigError(
        message=_format_validation_error_message(details),
        error_type=error_type,
        path=path,
        details=details,
    )


def load_config(path: Path) -> PackingJobConfiguration:
    """Load and validate a packing job from a JSON file.

    Args:
        path: Path to the JSON job file

    Returns:
        A validated PackingJobConfiguration instance

    Raises:
        ConfigError: If the file cannot be loaded or validated.
            The error_type attribute indicates the specific error category:
            - "file_not_found": File does not exist
            - "permission_denied": File cannot be read
            - "file_read_error": Any other read failure
            - "json_parse": Invalid JSON syntax
            - "version": Unsupported schema_version
            - "validation": Schema validation failed

    Example:
        >>> try:
        ...     config = load_config(Path("job.json"))
        ... except ConfigError as e:
        ...     for detail in e.details:
        ...         print(f"  {detail['path']}: {detail['message']}")
    """
    if not path.exists():
        raise ConfigError(
            message=f"Job file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            message=f"Permission denied reading job file: {path}",
            error_type="permission_denied",
            path=path,
        )
    except OSError as e:
        raise ConfigError(
            message=f"Error reading job file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        )

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in job file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[
                {
                    "line": e.lineno,
                    "column": e.colno,
                    "message": e.msg,
                }
            ],
        )

    try:
        config = PackingJobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e, path)

    logger.debug(
        "Loaded job %s: %d bins, %d items", path, len(config.bins), len(config.items)
    )
    return config


def load_config_from_dict(data: dict[str, Any]) -> PackingJobConfiguration:
    """Load and validate a packing job from a dictionary.

    Args:
        data: Dictionary containing job data

    Returns:
        A validated PackingJobConfiguration instance

    Raises:
        ConfigError: If the data fails validation.
    """
    try:
        return PackingJobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e)
