"""CLI command implementations for the blockpack application.

This package contains subcommands for the blockpack CLI, including:
- validate: Validate a job file
"""

from blockpack.cli.commands.validate import (
    collect_warnings,
    display_load_error,
    validate_command,
)

__all__ = ["collect_warnings", "display_load_error", "validate_command"]
