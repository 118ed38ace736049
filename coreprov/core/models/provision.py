"""
Provisioning models — the value types passed between engine layers.

Detection and resolution never raise; their outcomes are explicit
result types so callers can tell a confirmed value from a fallback.
A ProvisioningResult is built fresh for every orchestrator call and
is never persisted.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ARCH = "x86_64"

ProvisioningStatus = Literal[
    "installed",           # a candidate was downloaded and moved into place
    "no_candidates",       # nothing configured, no network activity
    "all_failed",          # every candidate failed, previous install untouched
    "expansion_failed",    # templates need a version that could not be resolved
    "generated",           # canonical URL list built
    "version_unresolved",  # URL list built with defaults only (mirror line)
]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ArchDetection(BaseModel):
    """Outcome of host architecture detection."""

    model_config = ConfigDict(frozen=True)

    arch: str = DEFAULT_ARCH
    raw: str | None = None      # machine string as reported by the host
    detected: bool = False      # False → ``arch`` is the fallback default
    reason: str = ""            # why detection degraded, if it did

    @property
    def degraded(self) -> bool:
        return not self.detected


class VersionResolution(BaseModel):
    """Outcome of a latest-release lookup."""

    model_config = ConfigDict(frozen=True)

    tag: str | None = None
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return bool(self.tag)


class CoreStatus(BaseModel):
    """Installed-core snapshot, as shown by the status display."""

    path: str
    installed: bool = False
    version: str = "Not installed"


class DownloadAttempt(BaseModel):
    """One candidate tried by the fallback downloader."""

    url: str
    ok: bool = False
    error: str | None = None
    elapsed_ms: int = 0


class ProvisioningResult(BaseModel):
    """Aggregate outcome of a generate or install operation."""

    status: ProvisioningStatus
    path: str | None = None
    arch: str | None = None
    version: str | None = None
    candidates: list[str] = Field(default_factory=list)
    attempts: list[DownloadAttempt] = Field(default_factory=list)
    messages: list[str] = Field(default_factory=list)

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)

    @property
    def ok(self) -> bool:
        """Whether the operation reached its intended end state."""
        return self.status in ("installed", "generated")

    @property
    def installed_url(self) -> str | None:
        """The candidate that ended up installed, if any."""
        for attempt in self.attempts:
            if attempt.ok:
                return attempt.url
        return None

    @property
    def text(self) -> str:
        """Candidate list rendered as editable configuration text."""
        return "\n".join(self.candidates)

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def finish(self) -> ProvisioningResult:
        """Stamp ``ended_at`` and return self for chaining."""
        self.ended_at = _now_iso()
        return self

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        data["ok"] = self.ok
        return data
