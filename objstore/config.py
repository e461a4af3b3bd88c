"""Configuration loading for the object-storage client.

Supports two configuration sources:
1. Environment variables - takes priority
2. config.json file

Environment Variable Format:
    OBJSTORE_ENDPOINT=https://play.example.com:9000
    OBJSTORE_ACCESS_KEY=xxx        (optional)
    OBJSTORE_SECRET_KEY=xxx        (optional, required with the access key)
    OBJSTORE_REGION=us-west-2      (optional)
    OBJSTORE_USER_AGENT=xxx        (optional)
    OBJSTORE_TIMEOUT=60            (optional, seconds)
    OBJSTORE_PART_SIZE=5242880     (optional, bytes)
    OBJSTORE_CHUNK_SIZE=65536      (optional, bytes)
    OBJSTORE_VERIFY=true           (optional, TLS verification)

JSON Format:
    {
        "endpoint_url": "https://play.example.com:9000",
        "access_key": "xxx",
        "secret_key": "xxx",
        "region": "us-west-2",
        "user_agent": "xxx",
        "timeout": 60,
        "part_size": 5242880,
        "chunk_size": 65536,
        "verify": true
    }
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from objstore.models import ClientConfig


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


ENV_PREFIX = "OBJSTORE_"
ENDPOINT_VAR = ENV_PREFIX + "ENDPOINT"

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class ClientSettings:
    """Everything needed to build a client."""

    endpoint_url: str
    access_key: Optional[str] = None
    secret_key: Optional[str] = field(default=None, repr=False)
    config: ClientConfig = field(default_factory=ClientConfig)


def _check_keys(access_key: Optional[str], secret_key: Optional[str], source: str) -> None:
    if bool(access_key) != bool(secret_key):
        raise ConfigError(
            f"Access key and secret key must be set together ({source})"
        )


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    if value is None:
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid timeout {value!r} ({source})") from e
    if timeout <= 0:
        raise ConfigError(f"Timeout must be positive, got {timeout} ({source})")
    return timeout


def _parse_size(value: Any, name: str, source: str) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid {name} {value!r} ({source})") from e
    if isinstance(value, bool) or size <= 0:
        raise ConfigError(f"{name} must be a positive integer, got {value!r} ({source})")
    return size


def _parse_bool(value: Any, name: str, source: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUE_VALUES:
        return True
    if isinstance(value, str) and value.strip().lower() in FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid {name} {value!r}, expected true or false ({source})")


def _build_config(values: dict[str, Any], source: str) -> ClientConfig:
    defaults = ClientConfig()
    timeout = defaults.timeout
    if values.get("timeout") is not None:
        timeout = _parse_timeout(values["timeout"], source)

    part_size = defaults.part_size
    if values.get("part_size") is not None:
        part_size = _parse_size(values["part_size"], "part_size", source)

    chunk_size = defaults.chunk_size
    if values.get("chunk_size") is not None:
        chunk_size = _parse_size(values["chunk_size"], "chunk_size", source)

    verify = defaults.verify
    if values.get("verify") is not None:
        verify = _parse_bool(values["verify"], "verify", source)

    return ClientConfig(
        region=values.get("region") or defaults.region,
        user_agent=values.get("user_agent") or defaults.user_agent,
        part_size=part_size,
        chunk_size=chunk_size,
        timeout=timeout,
        verify=verify,
    )


def load_from_json(config_path: str) -> ClientSettings:
    """Load client settings from a JSON file.

    Args:
        config_path: Path to the config.json file.

    Returns:
        The loaded ClientSettings.

    Raises:
        ConfigError: If file doesn't exist, contains invalid JSON,
                    or is missing the endpoint.
    """
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a JSON object")

    endpoint_url = data.get("endpoint_url")
    if not endpoint_url:
        raise ConfigError("Missing required field 'endpoint_url'")

    access_key = data.get("access_key") or None
    secret_key = data.get("secret_key") or None
    _check_keys(access_key, secret_key, config_path)

    return ClientSettings(
        endpoint_url=endpoint_url,
        access_key=access_key,
        secret_key=secret_key,
        config=_build_config(data, config_path),
    )


def load_from_env() -> ClientSettings:
    """Load client settings from OBJSTORE_* environment variables.

    Raises:
        ConfigError: If the endpoint is missing or only one key is set.
    """
    endpoint_url = os.environ.get(ENDPOINT_VAR)
    if not endpoint_url:
        raise ConfigError(f"Missing environment variable: {ENDPOINT_VAR}")

    access_key = os.environ.get(ENV_PREFIX + "ACCESS_KEY") or None
    secret_key = os.environ.get(ENV_PREFIX + "SECRET_KEY") or None
    _check_keys(access_key, secret_key, "environment")

    values = {
        "region": os.environ.get(ENV_PREFIX + "REGION"),
        "user_agent": os.environ.get(ENV_PREFIX + "USER_AGENT"),
        "timeout": os.environ.get(ENV_PREFIX + "TIMEOUT"),
        "part_size": os.environ.get(ENV_PREFIX + "PART_SIZE"),
        "chunk_size": os.environ.get(ENV_PREFIX + "CHUNK_SIZE"),
        "verify": os.environ.get(ENV_PREFIX + "VERIFY"),
    }

    return ClientSettings(
        endpoint_url=endpoint_url,
        access_key=access_key,
        secret_key=secret_key,
        config=_build_config(values, "environment"),
    )


def has_env_settings() -> bool:
    """Check if the endpoint environment variable is set."""
    return bool(os.environ.get(ENDPOINT_VAR))


def load_settings(config_path: str = "config.json") -> ClientSettings:
    """Load client settings with environment priority.

    Priority order:
    1. Environment variables (if OBJSTORE_ENDPOINT is set)
    2. config.json file

    Raises:
        ConfigError: If neither source is available.
    """
    if has_env_settings():
        return load_from_env()
    if Path(config_path).exists():
        return load_from_json(config_path)

    raise ConfigError(
        f"No settings found. Set {ENDPOINT_VAR} "
        "or create a config.json file with an endpoint_url."
    )
