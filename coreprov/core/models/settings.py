"""
ProvisionerSettings — the configuration document for the engine.

Loaded from coreprov.yml by ``coreprov.core.config.loader``. Every
field has a default, so a missing file means "provision GoAuthing
into /usr/bin/goauthing from the TUNA mirror, then GitHub".
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

DEFAULT_RELEASE_API_URL = "https://api.github.com/repos/z4yx/GoAuthing/releases/latest"
DEFAULT_MIRROR_BASE = "https://mirrors.tuna.tsinghua.edu.cn/github-release/z4yx/GoAuthing/LatestRelease"
DEFAULT_UPSTREAM_BASE = "https://github.com/z4yx/GoAuthing/releases/download"
DEFAULT_ARTIFACT_PATTERN = "auth-thu.linux.${arch}"
DEFAULT_DOWNLOAD_URLS = f"{DEFAULT_MIRROR_BASE}/{DEFAULT_ARTIFACT_PATTERN}"


class ProvisionerSettings(BaseModel):
    """Where the core comes from and where it goes."""

    # ── Install target ───────────────────────────────────────────
    install_path: str = "/usr/bin/goauthing"
    staging_dir: str | None = None    # None → install_path's directory

    # ── Upstream release origin ──────────────────────────────────
    release_api_url: str = DEFAULT_RELEASE_API_URL
    mirror_base: str = DEFAULT_MIRROR_BASE
    upstream_base: str = DEFAULT_UPSTREAM_BASE
    artifact_pattern: str = DEFAULT_ARTIFACT_PATTERN

    # ── Candidate templates (one per line, ${version} / ${arch}) ─
    download_urls: str = DEFAULT_DOWNLOAD_URLS

    # ── Host tools ───────────────────────────────────────────────
    uname_path: str = "/bin/uname"
    wget_path: str = "/usr/bin/wget"

    # ── Timeouts (seconds, per process invocation) ───────────────
    query_timeout: float = Field(default=15.0, gt=0)
    download_timeout: float = Field(default=300.0, gt=0)

    @field_validator("mirror_base", "upstream_base")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("install_path")
    @classmethod
    def _install_path_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("install_path must not be empty")
        return v
