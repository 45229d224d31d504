"""
CLI Error Handling Utilities

Maps exceptions raised by commands to exit codes and renders them either
as a one-line message on stderr or as a JSON document on stdout.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from kaocache.shared.constants import CLIDefaults
from kaocache.shared.errors import (
    CacheNotFoundError,
    CliError,
    ConfigInvalidError,
    DataKindInvalidError,
    ErrorCode,
    KaoCacheError,
    PathInvalidError,
    create_cli_error,
)

logger = logging.getLogger(__name__)


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> str:
    """Format a command result as JSON.

    Args:
        command: The command that was executed
        success: Whether the operation was successful
        errors: List of error messages
        data: Additional data to include

    Returns:
        JSON document
    """
    output: dict[str, Any] = {
        "success": success,
        "command": command,
    }
    if errors:
        output["errors"] = errors
    if data is not None:
        output["data"] = data
    return json.dumps(output, indent=2, default=str)


def _exit_code_for(error: KaoCacheError) -> int:
    if isinstance(error, CliError):
        return error.exit_code
    if isinstance(error, (CacheNotFoundError, PathInvalidError)):
        return CLIDefaults.EXIT_NOT_FOUND
    if isinstance(error, DataKindInvalidError):
        return CLIDefaults.EXIT_INVALID_ARGUMENTS
    if isinstance(error, ConfigInvalidError):
        return CLIDefaults.EXIT_CONFIG_ERROR
    return CLIDefaults.EXIT_ERROR


def _map_error_to_cli_error(error: Exception, command: str) -> CliError:
    """Map specific exception types to CLI errors."""
    if isinstance(error, CliError):
        return error

    if isinstance(error, KaoCacheError):
        return CliError(
            error.code,
            error.message,
            error.context,
            original_error=error,
            command=command,
            exit_code=_exit_code_for(error),
        )

    if isinstance(error, OSError):
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
        )

    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        code=ErrorCode.CLI_UNEXPECTED_ERROR,
        original_error=error,
    )


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    cli_error = _map_error_to_cli_error(error, command)
    log_context = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": cli_error.code.value,
    }

    if isinstance(error, KaoCacheError):
        logger.debug("Command %s failed: %s", command, cli_error.message, extra={"context": log_context})
    else:
        logger.exception("CLI error in %s: %s", command, cli_error.message, extra={"context": log_context})

    if json_output:
        sys.stdout.write(
            format_json_output(
                command,
                success=False,
                errors=[cli_error.message],
                data={
                    "error_code": cli_error.code.value,
                    "error_type": type(error).__name__,
                    "exit_code": cli_error.exit_code,
                    "context": cli_error.context.safe_dict(),
                },
            )
            + "\n",
        )
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code
