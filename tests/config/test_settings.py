"""Tests for configuration models and the settings loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from kaocache.config import CacheSettings, LoggingSettings, Settings, load_settings
from kaocache.shared.errors import ConfigInvalidError, ErrorCode, KaoCacheWarning


class TestCacheSettings:
    """Test cache settings validation and fallbacks."""

    def test_defaults(self):
        settings = CacheSettings()

        assert settings.root_dir == Path("cache").resolve()
        assert settings.hash_algorithm == "md5"
        assert settings.return_path_type == "absolute"
        assert settings.relative_paths is False
        assert settings.dir_mode == 0o750

    def test_default_root_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert CacheSettings().root_dir == tmp_path.resolve() / "cache"
        assert Settings().cache.root_dir.is_absolute()

    def test_root_dir_is_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        settings = CacheSettings(root_dir="relative/root")

        assert settings.root_dir == tmp_path.resolve() / "relative" / "root"

    def test_empty_root_uses_default(self):
        assert CacheSettings(root_dir="").root_dir == Path("cache").resolve()

    def test_unknown_algorithm_falls_back(self):
        with pytest.warns(KaoCacheWarning):
            settings = CacheSettings(hash_algorithm="whirlpool-9000")

        assert settings.hash_algorithm == "md5"

    def test_algorithm_is_normalized(self):
        assert CacheSettings(hash_algorithm="SHA256").hash_algorithm == "sha256"

    def test_relative_path_type(self):
        settings = CacheSettings(return_path_type="Relative")

        assert settings.return_path_type == "relative"
        assert settings.relative_paths is True

    def test_invalid_path_type_falls_back(self):
        with pytest.warns(KaoCacheWarning, match="invalid"):
            settings = CacheSettings(return_path_type="sideways")

        assert settings.return_path_type == "absolute"

    @pytest.mark.parametrize(("value", "expected"), [("755", 0o755), ("0o700", 0o700), (0o770, 0o770)])
    def test_dir_mode_values(self, value, expected):
        assert CacheSettings(dir_mode=value).dir_mode == expected

    def test_dir_mode_out_of_range_warns(self):
        with pytest.warns(KaoCacheWarning, match="outside"):
            assert CacheSettings(dir_mode=0o500).dir_mode == 0o500

    @pytest.mark.parametrize("value", ["rwx", 7.5, True])
    def test_dir_mode_rejects_garbage(self, value):
        with pytest.raises(ValidationError):
            CacheSettings(dir_mode=value)

    def test_frozen(self):
        settings = CacheSettings()

        with pytest.raises(ValidationError):
            settings.hash_algorithm = "sha1"


class TestLoggingSettings:
    def test_level_normalized(self):
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")


class TestLoadSettings:
    """Test TOML and environment loading."""

    def test_explicit_toml_file(self, tmp_path):
        config = tmp_path / "kaocache.toml"
        config.write_text(
            '[cache]\nroot_dir = "/tmp/kao"\nhash_algorithm = "sha1"\n'
            'return_path_type = "relative"\n\n[logging]\nlevel = "info"\n',
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.cache.root_dir == Path("/tmp/kao").resolve()
        assert settings.cache.hash_algorithm == "sha1"
        assert settings.cache.relative_paths is True
        assert settings.logging.level == "INFO"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigInvalidError) as exc_info:
            load_settings(tmp_path / "absent.toml")

        assert exc_info.value.code == ErrorCode.CONFIG_MISSING

    def test_malformed_toml(self, tmp_path):
        config = tmp_path / "broken.toml"
        config.write_text("[cache\nroot_dir = ", encoding="utf-8")

        with pytest.raises(ConfigInvalidError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_invalid_value_in_file(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text('[cache]\ndir_mode = "rwx"\n', encoding="utf-8")

        with pytest.raises(ConfigInvalidError):
            load_settings(config)

    def test_default_file_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "kaocache.toml").write_text('[cache]\nhash_algorithm = "sha512"\n', encoding="utf-8")

        assert load_settings().cache.hash_algorithm == "sha512"

    def test_environment_override(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("KAOCACHE_CACHE__ROOT_DIR", str(tmp_path / "from-env"))

        settings = load_settings()

        assert settings.cache.root_dir == (tmp_path / "from-env").resolve()

    def test_round_trip_through_toml(self, tmp_path):
        path = tmp_path / "out" / "kaocache.toml"
        original = Settings(cache=CacheSettings(root_dir=tmp_path, hash_algorithm="sha1"))

        original.to_toml_file(path)

        assert load_settings(path).cache == original.cache
