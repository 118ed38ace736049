"""
Config store — persisted key-value settings backed by coreprov.yml.

The only state this subsystem owns is the ``download_urls`` template
text. Writes are atomic (write to temp file, then rename) and keep
every other key in the file as it was.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any

import yaml

from coreprov.core.config.loader import ConfigError, load_settings, read_config_mapping
from coreprov.core.models.settings import ProvisionerSettings

logger = logging.getLogger(__name__)

DOWNLOAD_URLS_KEY = "download_urls"


class ConfigStore:
    """Read and write the provisioner's configuration file."""

    def __init__(self, path: Path):
        self.path = path

    def __repr__(self) -> str:
        return f"<ConfigStore path={str(self.path)!r}>"

    def load(self) -> ProvisionerSettings:
        return load_settings(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return read_config_mapping(self.path).get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Persist one key, leaving the rest of the file intact."""
        data = read_config_mapping(self.path)
        data[key] = value

        # Refuse to persist something the loader would reject later.
        try:
            ProvisionerSettings.model_validate(data)
        except Exception as e:
            raise ConfigError(f"Invalid value for '{key}': {e}") from e

        self._write(data)
        logger.info("Saved '%s' to %s", key, self.path)

    def get_download_urls(self) -> str:
        """Raw template text; the built-in default if never saved."""
        return self.load().download_urls

    def set_download_urls(self, text: str) -> None:
        self.set(DOWNLOAD_URLS_KEY, text)

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=False)

        _fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".coreprov_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with open(_fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.replace(self.path)
        except Exception:
            tmp.unlink(missing_ok=True)
            logger.error("Failed to save config to %s", self.path)
            raise
