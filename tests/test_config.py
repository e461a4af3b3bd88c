"""Tests for configuration loading module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from objstore.config import (
    ClientSettings,
    ConfigError,
    load_from_env,
    load_from_json,
    load_settings,
)
from objstore.models import DEFAULT_REGION, DEFAULT_USER_AGENT


class TestLoadFromJson:
    """Tests for load_from_json function."""

    def test_valid_config_with_all_fields(self, tmp_path: Path):
        """Load a valid config file with all fields specified."""
        config_data = {
            "endpoint_url": "https://play.example.com:9000",
            "access_key": "test-key",
            "secret_key": "test-secret",
            "region": "eu-west-1",
            "user_agent": "backup-tool/2.0",
            "timeout": 15,
            "verify": False,
        }
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps(config_data))

        settings = load_from_json(str(config_file))

        assert settings.endpoint_url == "https://play.example.com:9000"
        assert settings.access_key == "test-key"
        assert settings.secret_key == "test-secret"
        assert settings.config.region == "eu-west-1"
        assert settings.config.user_agent == "backup-tool/2.0"
        assert settings.config.timeout == 15.0
        assert settings.config.verify is False

    def test_defaults_applied(self, tmp_path: Path):
        """Optional fields fall back to ClientConfig defaults."""
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"endpoint_url": "http://localhost:9000"}))

        settings = load_from_json(str(config_file))

        assert settings.access_key is None
        assert settings.secret_key is None
        assert settings.config.region == DEFAULT_REGION
        assert settings.config.user_agent == DEFAULT_USER_AGENT

    def test_missing_file_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file doesn't exist."""
        config_file = tmp_path / "nonexistent.json"

        with pytest.raises(ConfigError, match="Config file not found"):
            load_from_json(str(config_file))

    def test_malformed_json_raises_error(self, tmp_path: Path):
        """Raise ConfigError when config file contains invalid JSON."""
        config_file = tmp_path / "config.json"
        config_file.write_text("{ invalid json }")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_from_json(str(config_file))

    def test_non_object_raises_error(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text("[]")

        with pytest.raises(ConfigError, match="JSON object"):
            load_from_json(str(config_file))

    def test_missing_endpoint_raises_error(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"access_key": "k", "secret_key": "s"}))

        with pytest.raises(ConfigError, match="endpoint_url"):
            load_from_json(str(config_file))

    def test_half_credentials_raise_error(self, tmp_path: Path):
        """Access key without secret key is rejected."""
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"endpoint_url": "http://localhost:9000", "access_key": "k"})
        )

        with pytest.raises(ConfigError, match="together"):
            load_from_json(str(config_file))

    def test_invalid_timeout_raises_error(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"endpoint_url": "http://localhost:9000", "timeout": "soon"})
        )

        with pytest.raises(ConfigError, match="timeout"):
            load_from_json(str(config_file))

    def test_sizes_loaded(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "endpoint_url": "http://localhost:9000",
                    "part_size": 16 * 1024 * 1024,
                    "chunk_size": 8192,
                }
            )
        )

        settings = load_from_json(str(config_file))

        assert settings.config.part_size == 16 * 1024 * 1024
        assert settings.config.chunk_size == 8192

    @pytest.mark.parametrize("field", ["part_size", "chunk_size"])
    @pytest.mark.parametrize("value", [0, -5, "big", True])
    def test_invalid_size_raises_error(self, tmp_path: Path, field: str, value):
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"endpoint_url": "http://localhost:9000", field: value})
        )

        with pytest.raises(ConfigError, match=field):
            load_from_json(str(config_file))

    def test_verify_string_raises_error(self, tmp_path: Path):
        """A verify value that is not a boolean is rejected, not coerced."""
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps({"endpoint_url": "http://localhost:9000", "verify": "maybe"})
        )

        with pytest.raises(ConfigError, match="verify"):
            load_from_json(str(config_file))


class TestLoadFromEnv:
    """Tests for load_from_env function."""

    def test_full_environment(self):
        env = {
            "OBJSTORE_ENDPOINT": "https://play.example.com",
            "OBJSTORE_ACCESS_KEY": "env-key",
            "OBJSTORE_SECRET_KEY": "env-secret",
            "OBJSTORE_REGION": "ap-south-1",
            "OBJSTORE_USER_AGENT": "ci/1.0",
            "OBJSTORE_TIMEOUT": "2.5",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_from_env()

        assert settings.endpoint_url == "https://play.example.com"
        assert settings.access_key == "env-key"
        assert settings.secret_key == "env-secret"
        assert settings.config.region == "ap-south-1"
        assert settings.config.user_agent == "ci/1.0"
        assert settings.config.timeout == 2.5

    @pytest.mark.parametrize(
        "raw, expected",
        [("false", False), ("0", False), ("no", False), ("true", True), ("1", True)],
    )
    def test_verify_parsed(self, raw: str, expected: bool):
        env = {"OBJSTORE_ENDPOINT": "https://play.example.com", "OBJSTORE_VERIFY": raw}
        with patch.dict(os.environ, env, clear=True):
            settings = load_from_env()

        assert settings.config.verify is expected

    def test_sizes_parsed(self):
        env = {
            "OBJSTORE_ENDPOINT": "http://localhost:9000",
            "OBJSTORE_PART_SIZE": "10485760",
            "OBJSTORE_CHUNK_SIZE": "4096",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_from_env()

        assert settings.config.part_size == 10485760
        assert settings.config.chunk_size == 4096

    def test_invalid_verify(self):
        env = {"OBJSTORE_ENDPOINT": "http://localhost:9000", "OBJSTORE_VERIFY": "sometimes"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigError, match="verify"):
                load_from_env()

    def test_anonymous(self):
        with patch.dict(os.environ, {"OBJSTORE_ENDPOINT": "http://localhost:9000"}, clear=True):
            settings = load_from_env()

        assert settings.access_key is None
        assert settings.secret_key is None

    def test_missing_endpoint(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigError, match="OBJSTORE_ENDPOINT"):
                load_from_env()

    def test_missing_secret_key(self):
        env = {
            "OBJSTORE_ENDPOINT": "http://localhost:9000",
            "OBJSTORE_ACCESS_KEY": "env-key",
        }
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigError, match="together"):
                load_from_env()

    def test_negative_timeout(self):
        env = {"OBJSTORE_ENDPOINT": "http://localhost:9000", "OBJSTORE_TIMEOUT": "-1"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigError, match="positive"):
                load_from_env()


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_env_takes_priority(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"endpoint_url": "http://from-file:9000"}))

        with patch.dict(os.environ, {"OBJSTORE_ENDPOINT": "http://from-env:9000"}, clear=True):
            settings = load_settings(str(config_file))

        assert settings.endpoint_url == "http://from-env:9000"

    def test_falls_back_to_file(self, tmp_path: Path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"endpoint_url": "http://from-file:9000"}))

        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings(str(config_file))

        assert settings.endpoint_url == "http://from-file:9000"

    def test_nothing_configured(self, tmp_path: Path):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigError, match="No settings found"):
                load_settings(str(tmp_path / "missing.json"))


class TestClientSettings:
    """Tests for ClientSettings."""

    def test_secret_not_in_repr(self):
        settings = ClientSettings(
            endpoint_url="http://localhost:9000", access_key="AKID", secret_key="hunter2"
        )

        assert "hunter2" not in repr(settings)
