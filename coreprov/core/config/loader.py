"""
Configuration loader — reads coreprov.yml into ProvisionerSettings.

It reads YAML, validates against the Pydantic schema, and returns a
typed settings object. A missing file is not an error: the engine
runs on defaults until someone saves a download URL list.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from coreprov.core.models.settings import ProvisionerSettings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "coreprov.yml"
SYSTEM_CONFIG_PATH = Path("/etc/coreprov") / CONFIG_FILE
CONFIG_ENV_VAR = "COREPROV_CONFIG"


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


def find_config_file(explicit: Path | None = None) -> Path:
    """Decide which config file to use.

    Precedence: explicit path > ``$COREPROV_CONFIG`` > ./coreprov.yml
    (if present) > /etc/coreprov/coreprov.yml.

    The returned path may not exist yet; it is where settings are
    read from and saved to.
    """
    if explicit is not None:
        return explicit

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    local = Path.cwd() / CONFIG_FILE
    if local.is_file():
        return local

    return SYSTEM_CONFIG_PATH


def read_config_mapping(path: Path) -> dict[str, Any]:
    """Read the raw YAML mapping from ``path``.

    Returns an empty dict when the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not a mapping.
    """
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_settings(path: Path | None = None) -> ProvisionerSettings:
    """Load and validate provisioner settings.

    Args:
        path: Explicit config path. If None, uses ``find_config_file``.

    Returns:
        Validated ProvisionerSettings model.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    path = find_config_file(path)
    data = read_config_mapping(path)

    try:
        settings = ProvisionerSettings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded settings from %s (install_path=%s)", path, settings.install_path)
    return settings
