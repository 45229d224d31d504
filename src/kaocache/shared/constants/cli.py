"""CLI constants."""


class CLIDefaults:
    """Default values and exit codes of the command-line interface."""

    EXIT_ERROR = 1
    EXIT_NOT_FOUND = 2
    EXIT_INVALID_ARGUMENTS = 3
    EXIT_CONFIG_ERROR = 4


class CLIHelp:
    """Help texts of the command-line interface."""

    APP_NAME = "kaocache"
    APP_DESCRIPTION = "Per-identifier generational file cache."
    VERSION_TEXT = "KaoCache v{version}"

    ROOT_HELP = "Cache root directory (overrides configuration)."
    CONFIG_HELP = "Path of a TOML configuration file."
    LOG_LEVEL_HELP = "Logging level."
    JSON_HELP = "Emit machine-readable JSON output."
    KIND_HELP = "Data kind of the cached content."
    FILTER_HELP = "Key or index step into structured content (repeatable)."
    MAX_AGE_HELP = "Remove generations older than this many seconds (default: one day)."


__all__ = ["CLIDefaults", "CLIHelp"]
