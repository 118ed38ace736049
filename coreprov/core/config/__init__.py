"""Configuration — settings loader and the persisted key-value store."""

from coreprov.core.config.loader import (
    CONFIG_ENV_VAR,
    CONFIG_FILE,
    ConfigError,
    find_config_file,
    load_settings,
)
from coreprov.core.config.store import DOWNLOAD_URLS_KEY, ConfigStore

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILE",
    "DOWNLOAD_URLS_KEY",
    "ConfigError",
    "ConfigStore",
    "find_config_file",
    "load_settings",
]
