"""Tests for the kaocache command-line interface."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from kaocache import __version__
from kaocache.cli.typer_app import app, parse_filter_steps
from kaocache.shared.constants import CLIDefaults

runner = CliRunner()


@pytest.fixture
def root(tmp_path, monkeypatch):
    """Cache root passed with --root; no configuration file is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path / "cli-cache"


def invoke(root, *args):
    return runner.invoke(app, ["--root", str(root), "--log-level", "CRITICAL", *args])


class TestParseFilterSteps:
    def test_digits_become_indices(self):
        assert parse_filter_steps(["items", "0", "name"]) == ["items", 0, "name"]

    def test_empty(self):
        assert parse_filter_steps(None) == []


class TestMainCallback:
    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestWriteAndRead:
    """Test write/read round trips through the CLI."""

    def test_text(self, root):
        result = invoke(root, "write", "greeting", "--value", "hello")

        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith(".cache")

        result = invoke(root, "read", "greeting")

        assert result.exit_code == 0
        assert result.output == "hello"

    def test_structured_json_with_filter(self, root):
        result = invoke(
            root,
            "write",
            "feed",
            "--kind",
            "structured_json",
            "--value",
            '{"items": [{"id": 1}, {"id": 2}]}',
            "--filter",
            "items",
            "--filter",
            "1",
        )
        assert result.exit_code == 0, result.output

        result = invoke(root, "--json", "read", "feed", "--kind", "structured_json")

        assert result.exit_code == 0
        assert json.loads(result.output)["data"]["content"] == {"id": 2}

    def test_invalid_json_value(self, root):
        result = invoke(root, "write", "feed", "--kind", "structured_json", "--value", "{nope")

        assert result.exit_code == CLIDefaults.EXIT_INVALID_ARGUMENTS
        assert "Error:" in result.output

    def test_oversized_integer_value(self, root):
        result = invoke(
            root,
            "write",
            "feed",
            "--kind",
            "structured_json",
            "--value",
            '{"n": 123456789012345678901234567890}',
        )

        assert result.exit_code == CLIDefaults.EXIT_INVALID_ARGUMENTS
        assert "64-bit range" in result.output
        assert invoke(root, "read", "feed").exit_code == CLIDefaults.EXIT_NOT_FOUND

    def test_value_and_file_are_exclusive(self, root, tmp_path):
        source = tmp_path / "in.txt"
        source.write_text("x")

        result = invoke(root, "write", "a", "--value", "x", "--file", str(source))

        assert result.exit_code == CLIDefaults.EXIT_INVALID_ARGUMENTS

    def test_write_from_file(self, root, tmp_path):
        source = tmp_path / "blob.bin"
        source.write_bytes(b"\x00\x01")

        result = invoke(root, "write", "blob", "--kind", "raw_bytes", "--file", str(source))
        assert result.exit_code == 0, result.output

        result = invoke(root, "read", "blob", "--kind", "raw_bytes")
        assert result.stdout_bytes == b"\x00\x01"

    def test_read_unknown_identifier(self, root):
        result = invoke(root, "read", "never-written")

        assert result.exit_code == CLIDefaults.EXIT_NOT_FOUND
        assert "Error:" in result.output

    def test_read_unknown_identifier_json(self, root):
        result = invoke(root, "--json", "read", "never-written")

        assert result.exit_code == CLIDefaults.EXIT_NOT_FOUND
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["data"]["error_code"] == "CACHE_NOT_FOUND"


class TestInspection:
    """Test pointer, hash and info commands."""

    def test_hash(self, root):
        result = invoke(root, "hash", "abc")

        assert result.exit_code == 0
        assert result.output.strip() == "f4c0128178a6a21b7a3dd76729725d91"

    def test_pointer_json(self, root):
        invoke(root, "write", "abc", "--value", "x")

        result = invoke(root, "--json", "pointer", "abc")

        assert result.exit_code == 0
        data = json.loads(result.output)["data"]
        assert data["dataType"] == "text"
        assert data["path"].startswith("f4c0128178a6a21b7a3dd76729725d91/")

    def test_info_table(self, root):
        invoke(root, "write", "abc", "--value", "x")

        result = invoke(root, "info", "abc")

        assert result.exit_code == 0
        assert "generation_count" in result.output


class TestPruneAndErase:
    def test_prune_nothing(self, root):
        invoke(root, "write", "abc", "--value", "x")

        result = invoke(root, "prune", "abc", "--max-age", "3600")

        assert result.exit_code == 0
        assert "Nothing to prune" in result.output

    def test_prune_missing_identifier(self, root):
        result = invoke(root, "prune", "never", "--max-age", "1")

        assert result.exit_code == CLIDefaults.EXIT_NOT_FOUND

    def test_erase(self, root):
        invoke(root, "write", "abc", "--value", "x")

        result = invoke(root, "--json", "erase", "abc")

        assert result.exit_code == 0
        removed = json.loads(result.output)["data"]["removed"]
        assert removed[0].endswith("f4c0128178a6a21b7a3dd76729725d91_current.json")
        assert invoke(root, "read", "abc").exit_code == CLIDefaults.EXIT_NOT_FOUND

    def test_erase_missing_identifier(self, root):
        result = invoke(root, "erase", "never")

        assert result.exit_code == CLIDefaults.EXIT_NOT_FOUND

    def test_invalid_kind_rejected_by_parser(self, root):
        result = invoke(root, "read", "abc", "--kind", "yaml")

        assert result.exit_code != 0


class TestConfiguration:
    def test_missing_config_file(self, root, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "absent.toml"), "hash", "abc"])

        assert result.exit_code == CLIDefaults.EXIT_CONFIG_ERROR

    def test_config_file_algorithm(self, root, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text('[cache]\nhash_algorithm = "sha256"\n', encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config), "--root", str(root), "hash", "abc"])

        assert result.exit_code == 0
        assert len(result.output.strip()) == 64

    def test_logging_section_applied(self, root, tmp_path):
        log_file = tmp_path / "kaocache.log"
        config = tmp_path / "logging.toml"
        config.write_text(
            f'[logging]\nlevel = "debug"\nfile = "{log_file.as_posix()}"\nrich_console = false\n',
            encoding="utf-8",
        )

        result = runner.invoke(app, ["--config", str(config), "--root", str(root), "hash", "abc"])

        assert result.exit_code == 0
        assert log_file.exists()
