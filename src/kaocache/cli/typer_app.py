"""
KaoCache Typer CLI Application

Exposes the cache store on the command line: write generations, read the
latest one, inspect the pointer, prune by age and erase identifiers.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, List, Optional

import orjson
import typer
from rich.console import Console
from rich.table import Table

from kaocache import __version__
from kaocache.cli.context import CliContext, LogLevel, get_cli_context, set_cli_context
from kaocache.cli.error_handler import format_json_output, handle_cli_error
from kaocache.core import json_codec
from kaocache.shared.constants import Cache, CLIDefaults, CLIHelp
from kaocache.shared.errors import ErrorCode, create_cli_error
from kaocache.shared.logging import setup_structured_logger
from kaocache.shared.types import DataKind, FilterStep

console = Console()

app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=__version__))
        raise typer.Exit


@app.callback()
def main(
    root: Optional[Path] = typer.Option(None, "--root", "-r", help=CLIHelp.ROOT_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CLIHelp.CONFIG_HELP),
    log_level: Optional[LogLevel] = typer.Option(None, "--log-level", help=CLIHelp.LOG_LEVEL_HELP),
    json_output: bool = typer.Option(False, "--json", help=CLIHelp.JSON_HELP),
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Per-identifier generational file cache."""
    context = CliContext(root=root, config_path=config, json_output=json_output)
    set_cli_context(context)

    try:
        logging_settings = context.load().logging
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "main") from e

    context.log_level = log_level or LogLevel(logging_settings.level)
    setup_structured_logger(
        level=context.log_level.value,
        log_file=logging_settings.file,
        use_rich_console=logging_settings.rich_console,
    )


def parse_filter_steps(steps: list[str] | None) -> list[FilterStep]:
    """Turn ``--filter`` values into keys and indices (digits become ints)."""
    return [int(step) if step.isdigit() else step for step in steps or []]


def _emit(command: str, data: dict[str, Any], text: str | None = None) -> None:
    if get_cli_context().json_output:
        typer.echo(format_json_output(command, success=True, data=data))
    elif text is not None:
        typer.echo(text)


def _fail(error: Exception, command: str) -> typer.Exit:
    exit_code = handle_cli_error(error, command, json_output=get_cli_context().json_output)
    return typer.Exit(exit_code)


@app.command("write")
def write_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
    value: Optional[str] = typer.Option(None, "--value", "-v", help="Content to cache."),
    source: Optional[Path] = typer.Option(None, "--file", "-f", help="Read content from a file."),
    filter_steps: Optional[List[str]] = typer.Option(None, "--filter", "-F", help=CLIHelp.FILTER_HELP),
) -> None:
    """Write a new generation (from --value, --file or stdin)."""
    try:
        if value is not None and source is not None:
            raise create_cli_error(
                "Use either --value or --file, not both",
                command="write",
                code=ErrorCode.CLI_INVALID_ARGUMENTS,
                exit_code=CLIDefaults.EXIT_INVALID_ARGUMENTS,
            )
        store = get_cli_context().build_store()
        handle = store.handle(identifier, kind)
        steps = parse_filter_steps(filter_steps)

        if source is not None:
            path = store.write_from_file(handle, source, steps)
        else:
            raw: str | bytes = value if value is not None else sys.stdin.buffer.read()
            content: Any = raw
            if kind is DataKind.STRUCTURED_JSON:
                try:
                    content = json_codec.loads(raw)
                except ValueError as e:
                    raise create_cli_error(
                        f"Content for {kind.value} must be JSON text: {e}",
                        command="write",
                        code=ErrorCode.CLI_INVALID_ARGUMENTS,
                        original_error=e,
                        exit_code=CLIDefaults.EXIT_INVALID_ARGUMENTS,
                    ) from e
            path = store.write(handle, content, steps)
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "write") from e

    _emit("write", {"path": str(path), "identifier_hash": handle.identifier_hash}, str(path))


@app.command("read")
def read_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    """Print the latest generation."""
    try:
        store = get_cli_context().build_store()
        content = store.read_latest(store.handle(identifier, kind))
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "read") from e

    if get_cli_context().json_output:
        data = content.decode("utf-8", "replace") if isinstance(content, bytes) else content
        _emit("read", {"content": data})
    elif kind.is_structured:
        typer.echo(orjson.dumps(content, option=orjson.OPT_INDENT_2).decode("utf-8"))
    elif isinstance(content, bytes):
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.flush()
    else:
        typer.echo(content, nl=False)


@app.command("pointer")
def pointer_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    """Show the current pointer."""
    try:
        store = get_cli_context().build_store()
        pointer = store.read_pointer(store.handle(identifier, kind))
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "pointer") from e

    data = pointer.model_dump(mode="json", by_alias=True)
    if get_cli_context().json_output:
        _emit("pointer", data)
        return
    _print_table("Current pointer", data)


@app.command("prune")
def prune_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    max_age: float = typer.Option(
        float(Cache.DEFAULT_PRUNE_AGE),
        "--max-age",
        "-a",
        min=0,
        help=CLIHelp.MAX_AGE_HELP,
    ),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    """Remove generations older than --max-age seconds."""
    try:
        store = get_cli_context().build_store()
        removed = store.prune_older_than(store.handle(identifier, kind), max_age)
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "prune") from e

    _emit(
        "prune",
        {"removed": [str(path) for path in removed]},
        "\n".join(str(path) for path in removed) if removed else "Nothing to prune",
    )


@app.command("erase")
def erase_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    """Remove every generation and the pointer of an identifier."""
    try:
        store = get_cli_context().build_store()
        removed = store.erase_all(store.handle(identifier, kind))
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "erase") from e

    _emit(
        "erase",
        {"removed": [str(path) for path in removed]},
        "\n".join(str(path) for path in removed),
    )


@app.command("hash")
def hash_command(identifier: str = typer.Argument(..., help="Cache identifier.")) -> None:
    """Print the directory name an identifier maps to."""
    try:
        store = get_cli_context().build_store()
        identifier_hash = store.hash(identifier)
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "hash") from e

    _emit("hash", {"identifier_hash": identifier_hash}, identifier_hash)


@app.command("info")
def info_command(
    identifier: str = typer.Argument(..., help="Cache identifier."),
    kind: DataKind = typer.Option(DataKind.TEXT, "--kind", "-k", help=CLIHelp.KIND_HELP),
) -> None:
    """Summarize the generations of an identifier."""
    try:
        store = get_cli_context().build_store()
        info = store.get_cache_info(store.handle(identifier, kind))
    except Exception as e:  # noqa: BLE001
        raise _fail(e, "info") from e

    if get_cli_context().json_output:
        _emit("info", info)
        return
    _print_table("Cache info", info)


def _print_table(title: str, data: dict[str, Any]) -> None:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, val in data.items():
        table.add_row(key, "-" if val is None else str(val))
    console.print(table)
