# src/zipkin_quickstart/config.py
"""
Configuration loading for the installer.

Settings come from built-in defaults, an optional YAML file in the
platformdirs config directory, and ZIPKIN_QUICKSTART_* environment variables,
in increasing order of precedence.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs
import yaml

from zipkin_quickstart.constants import (
    APP_NAME,
    CONFIG_ENV_PREFIX,
    CONFIG_FILE_NAME,
    DEFAULT_REQUEST_TIMEOUT,
    GPG_BINARY,
    KEYSERVER,
    REGISTRY_DOWNLOAD_BASE,
    REGISTRY_SEARCH_URL,
    REGISTRY_SUBJECT,
    SIGNING_KEY_ID,
)
from zipkin_quickstart.exceptions import ConfigurationError
from zipkin_quickstart.log_utils import logger

DEFAULT_CONFIG: Dict[str, Any] = {
    "REGISTRY_SEARCH_URL": REGISTRY_SEARCH_URL,
    "REGISTRY_DOWNLOAD_BASE": REGISTRY_DOWNLOAD_BASE,
    "REGISTRY_SUBJECT": REGISTRY_SUBJECT,
    "REQUEST_TIMEOUT": DEFAULT_REQUEST_TIMEOUT,
    "SIGNING_KEY_ID": SIGNING_KEY_ID,
    "KEYSERVER": KEYSERVER,
    "GPG_BINARY": GPG_BINARY,
}


def get_config_file_path() -> Path:
    """Return the platformdirs location of the optional YAML config file."""
    return Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILE_NAME


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Parse the YAML config file at `config_path`.

    Returns an empty dict when the file does not exist or is empty.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML, or
            does not contain a mapping at the top level.
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Could not read configuration file {config_path}", details=str(e)
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {config_path} must contain a mapping",
            details=f"got {type(data).__name__}",
        )
    return data


def _normalize(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate values and coerce them to the types the installer expects."""
    timeout = config["REQUEST_TIMEOUT"]
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            "REQUEST_TIMEOUT must be a number",
            key="REQUEST_TIMEOUT",
            details=repr(timeout),
        ) from e
    if timeout <= 0:
        raise ConfigurationError(
            "REQUEST_TIMEOUT must be positive",
            key="REQUEST_TIMEOUT",
            details=repr(timeout),
        )
    config["REQUEST_TIMEOUT"] = timeout

    for key, value in config.items():
        if key == "REQUEST_TIMEOUT":
            continue
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                f"{key} must be a non-empty string", key=key, details=repr(value)
            )
        config[key] = value.strip()

    # URLs are joined with "/" later on
    for key in ("REGISTRY_SEARCH_URL", "REGISTRY_DOWNLOAD_BASE"):
        config[key] = config[key].rstrip("/")
    return config


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Build the effective installer configuration.

    Parameters:
        config_path (Optional[Path]): Explicit YAML file to read; defaults to
            the platformdirs-managed location.

    Returns:
        Dict[str, Any]: Mapping with every key of DEFAULT_CONFIG.

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid.
    """
    config = dict(DEFAULT_CONFIG)
    path = config_path if config_path is not None else get_config_file_path()

    for key, value in _read_config_file(path).items():
        normalized_key = str(key).upper()
        if normalized_key not in DEFAULT_CONFIG:
            logger.debug(f"Ignoring unknown configuration key {key!r} in {path}")
            continue
        config[normalized_key] = value

    for key in DEFAULT_CONFIG:
        env_value = os.environ.get(f"{CONFIG_ENV_PREFIX}{key}")
        if env_value is not None:
            config[key] = env_value

    return _normalize(config)
