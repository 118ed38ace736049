"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import pytest

from coreprov.adapters.process import CommandResult
from coreprov.core.config.store import ConfigStore
from coreprov.core.models.settings import ProvisionerSettings


class FakeRunner:
    """Scripted stand-in for SubprocessRunner.

    Knobs:
        machine: ``uname -m`` output, or None to make uname fail.
        release: release-metadata body (dict is JSON-encoded), or None
            to make the metadata fetch fail.
        downloads: url → bytes written to the ``-O`` target; a missing
            url makes wget exit 8 after writing a partial file.
        installed_version: ``--version`` output, or None for "not found".
    """

    def __init__(self) -> None:
        self.machine: str | None = "x86_64\n"
        self.release: dict | str | None = {"tag_name": "v2.5.0"}
        self.downloads: dict[str, bytes] = {}
        self.installed_version: str | None = None
        self.calls: list[list[str]] = []

    @property
    def download_urls(self) -> list[str]:
        """URLs passed to ``wget -O``, in call order."""
        return [argv[-1] for argv in self.calls if "-O" in argv]

    @property
    def metadata_fetches(self) -> int:
        return sum(1 for argv in self.calls if "-qO-" in argv)

    @property
    def uname_calls(self) -> int:
        return sum(1 for argv in self.calls if argv[-1] == "-m")

    async def run(self, argv: Sequence[str], *, timeout: float | None = None) -> CommandResult:
        argv = [str(a) for a in argv]
        self.calls.append(argv)

        if argv[-1] == "-m":
            if self.machine is None:
                return CommandResult(argv=argv, error=f"Command not found: {argv[0]}")
            return CommandResult(argv=argv, returncode=0, stdout=self.machine)

        if "-qO-" in argv:
            if self.release is None:
                return CommandResult(argv=argv, returncode=4, stderr="network failure")
            body = self.release if isinstance(self.release, str) else json.dumps(self.release)
            return CommandResult(argv=argv, returncode=0, stdout=body)

        if "-O" in argv:
            target = Path(argv[argv.index("-O") + 1])
            url = argv[-1]
            if url in self.downloads:
                target.write_bytes(self.downloads[url])
                return CommandResult(argv=argv, returncode=0)
            target.write_bytes(b"partial")
            return CommandResult(argv=argv, returncode=8, stderr="server returned error 404")

        if argv[-1] == "--version":
            if self.installed_version is None:
                return CommandResult(argv=argv, error=f"Command not found: {argv[0]}")
            return CommandResult(argv=argv, returncode=0, stdout=self.installed_version)

        return CommandResult(argv=argv, error=f"Unexpected command: {argv}")


@pytest.fixture
def runner() -> FakeRunner:
    """A fresh scripted process runner."""
    return FakeRunner()


@pytest.fixture
def install_path(tmp_path: Path) -> Path:
    """Install target inside the temp dir."""
    return tmp_path / "bin" / "goauthing"


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "etc" / "coreprov.yml"


@pytest.fixture
def store(config_path: Path, install_path: Path) -> ConfigStore:
    """Config store whose install_path points into the temp dir."""
    s = ConfigStore(config_path)
    s.set("install_path", str(install_path))
    return s


@pytest.fixture
def settings(install_path: Path) -> ProvisionerSettings:
    return ProvisionerSettings(install_path=str(install_path))
