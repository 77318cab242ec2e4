"""Tests for configuration loading and precedence."""

from pathlib import Path

import pytest

from livepeer_transcode.config.loader import (
    DEFAULT_CONFIG_FILE,
    clear_config_cache,
    get_config,
    get_default_config_path,
    load_config_file,
)


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Write a config file covering every section."""
    path = temp_dir / "config.toml"
    path.write_text(
        """\
[api]
api_key = "file-key"
api_host = "file.livepeer.example"
timeout_seconds = 60

[segmenting]
segment_length = "10s"
queue_size = 4

[logging]
level = "debug"
format = "json"
"""
    )
    return path


class TestGetDefaultConfigPath:
    """Tests for get_default_config_path()."""

    def test_default_location(self) -> None:
        assert get_default_config_path(env={}) == DEFAULT_CONFIG_FILE

    def test_env_override(self, temp_dir: Path) -> None:
        path = temp_dir / "other.toml"
        env = {"LIVEPEER_TRANSCODE_CONFIG_PATH": str(path)}
        assert get_default_config_path(env=env) == path


class TestLoadConfigFile:
    """Tests for load_config_file()."""

    def test_missing_file_returns_empty(self, temp_dir: Path) -> None:
        assert load_config_file(temp_dir / "missing.toml") == {}

    def test_invalid_toml_returns_empty(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.toml"
        path.write_text("[api\nkey = ")
        assert load_config_file(path) == {}

    def test_parses_sections(self, config_file: Path) -> None:
        data = load_config_file(config_file)
        assert data["api"]["api_key"] == "file-key"
        assert data["segmenting"]["queue_size"] == 4

    def test_cached_until_cleared(self, config_file: Path) -> None:
        first = load_config_file(config_file)
        assert load_config_file(config_file) is first
        clear_config_cache()
        assert load_config_file(config_file) is not first


class TestGetConfig:
    """Tests for get_config() precedence handling."""

    def test_defaults_without_file_or_env(self, temp_dir: Path) -> None:
        config = get_config(config_path=temp_dir / "missing.toml", env={})
        assert config.api.api_key is None
        assert config.api.api_host == "livepeer.com"
        assert config.api.timeout_seconds == 120.0
        assert config.segmenting.segment_length == 18.0
        assert config.segmenting.queue_size == 2
        assert config.logging.level == "info"

    def test_file_values(self, config_file: Path) -> None:
        config = get_config(config_path=config_file, env={})
        assert config.api.api_key == "file-key"
        assert config.api.api_host == "file.livepeer.example"
        assert config.api.timeout_seconds == 60.0
        assert config.segmenting.segment_length == 10.0
        assert config.segmenting.queue_size == 4
        assert config.logging.level == "debug"
        assert config.logging.format == "json"

    def test_env_overrides_file(self, config_file: Path) -> None:
        env = {
            "LIVEPEER_API_KEY": "env-key",
            "LIVEPEER_API_TIMEOUT": "30",
            "LIVEPEER_TRANSCODE_SEGMENT_LENGTH": "500ms",
            "LIVEPEER_TRANSCODE_LOG_LEVEL": "warning",
        }
        config = get_config(config_path=config_file, env=env)
        assert config.api.api_key == "env-key"
        assert config.api.api_host == "file.livepeer.example"
        assert config.api.timeout_seconds == 30.0
        assert config.segmenting.segment_length == 0.5
        assert config.logging.level == "warning"

    def test_cli_overrides_env(self, config_file: Path) -> None:
        env = {"LIVEPEER_API_KEY": "env-key", "LIVEPEER_API_HOST": "env.example"}
        config = get_config(
            config_path=config_file,
            env=env,
            api_key="cli-key",
            api_host="cli.example",
            segment_length=6.0,
        )
        assert config.api.api_key == "cli-key"
        assert config.api.api_host == "cli.example"
        assert config.segmenting.segment_length == 6.0

    def test_numeric_segment_length_in_env(self, temp_dir: Path) -> None:
        env = {"LIVEPEER_TRANSCODE_SEGMENT_LENGTH": "12"}
        config = get_config(config_path=temp_dir / "missing.toml", env=env)
        assert config.segmenting.segment_length == 12.0

    def test_invalid_duration_falls_back(self, temp_dir: Path) -> None:
        env = {"LIVEPEER_TRANSCODE_SEGMENT_LENGTH": "soon"}
        config = get_config(config_path=temp_dir / "missing.toml", env=env)
        assert config.segmenting.segment_length == 18.0

    def test_invalid_merged_value_raises(self, temp_dir: Path) -> None:
        env = {"LIVEPEER_TRANSCODE_QUEUE_SIZE": "0"}
        with pytest.raises(ValueError, match="queue_size"):
            get_config(config_path=temp_dir / "missing.toml", env=env)
