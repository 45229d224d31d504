"""
KaoCache Package Main Entry Point

Runs the command-line interface when the package is executed with
``python -m kaocache``.
"""

import logging
import sys

from kaocache.cli.error_handler import handle_cli_error
from kaocache.cli.typer_app import app
from kaocache.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_ERROR)
    except SystemExit:  # pylint: disable=try-except-raise
        raise
    except Exception as e:  # noqa: BLE001
        sys.exit(handle_cli_error(e, "kaocache-main"))
