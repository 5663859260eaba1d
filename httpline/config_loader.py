"""Config Loader - loads the optional client configuration file.

YAML with ${ENV_VAR} substitution, validated into ClientConfig. The file is
optional: without one, built-in defaults apply. Command-line flags always
take precedence over anything loaded here.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from httpline.errors import ConfigError
from httpline.models import ClientConfig

CONFIG_ENV_VAR = "HTTPLINE_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/httpline/config.yaml")

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def find_config_path(explicit: Path | None = None) -> tuple[Path | None, bool]:
    """Locate the config file.

    Returns:
        Tuple of (path or None, required). An explicit path or one named by
        $HTTPLINE_CONFIG must exist; the default location is optional.
    """
    if explicit is not None:
        return explicit, True
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env), True
    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.exists():
        return default, False
    return None, False


def load_client_config(config_path: Path | None = None) -> ClientConfig:
    """Load configuration from YAML with ${ENV_VAR} substitution.

    Raises:
        ConfigError: If a required file is missing, the YAML is invalid,
            an env var is unset, or the structure does not validate.
    """
    path, required = find_config_path(config_path)
    if path is None:
        return ClientConfig()

    if not path.exists():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return ClientConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if raw_config is None:
        return ClientConfig()
    if not isinstance(raw_config, dict):
        raise ConfigError("Config file must be a YAML mapping")

    raw_config = _substitute_env_vars(raw_config)

    try:
        return ClientConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e


def _substitute_env_vars(data: Any) -> Any:
    """Recursively substitute ${ENV_VAR} patterns in strings within data."""
    if isinstance(data, str):
        return _substitute_string(data)
    elif isinstance(data, dict):
        return {k: _substitute_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_substitute_env_vars(item) for item in data]
    return data


def _substitute_string(s: str) -> str:
    """Substitute ${ENV_VAR} patterns. Raises ConfigError if env var is not set."""

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(f"Environment variable '{var_name}' is not set")
        return value

    return _ENV_PATTERN.sub(replacer, s)
