"""
L1 Domain — Download URL templates (pure).

Parses the user's newline-delimited template text and expands the
``${version}`` and ``${arch}`` placeholders. No I/O, no subprocess.

Line order is attempt order: earlier lines (fast/local mirrors) are
preferred over later ones (the canonical upstream origin).
"""

from __future__ import annotations

from coreprov.core.models.settings import ProvisionerSettings

VERSION_PLACEHOLDER = "${version}"
ARCH_PLACEHOLDER = "${arch}"
PLACEHOLDERS = (VERSION_PLACEHOLDER, ARCH_PLACEHOLDER)


class TemplateExpansionError(Exception):
    """Raised when templates reference a placeholder that cannot be filled."""


def parse_templates(text: str | None) -> list[str]:
    """Split template text into trimmed, non-empty lines, in order."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def has_placeholder(line: str) -> bool:
    return any(p in line for p in PLACEHOLDERS)


def uses_placeholders(lines: list[str]) -> bool:
    """Whether any line needs version/arch resolution."""
    return any(has_placeholder(line) for line in lines)


def substitute(line: str, *, version: str, arch: str) -> str:
    """Replace every occurrence of both placeholders in one line."""
    return line.replace(VERSION_PLACEHOLDER, version).replace(ARCH_PLACEHOLDER, arch)


def expand_templates(lines: list[str], version: str | None, arch: str) -> list[str]:
    """Expand placeholder lines into concrete candidate URLs.

    Lines without placeholders are returned verbatim. If any line has
    a placeholder, the version must be resolved: nothing is expanded
    otherwise, so a caller never sees a half-substituted list.

    Raises:
        TemplateExpansionError: If a placeholder is present and
            ``version`` is None or empty.
    """
    if not uses_placeholders(lines):
        return list(lines)

    if not version:
        raise TemplateExpansionError(
            "Failed to get latest version from upstream; "
            "configure download URLs manually without ${version}/${arch}"
        )

    return [
        substitute(line, version=version, arch=arch) if has_placeholder(line) else line
        for line in lines
    ]


def artifact_name(settings: ProvisionerSettings, arch: str) -> str:
    """Artifact filename for ``arch`` (e.g. ``auth-thu.linux.arm64``)."""
    return settings.artifact_pattern.replace(ARCH_PLACEHOLDER, arch)


def mirror_url(settings: ProvisionerSettings, arch: str) -> str:
    return f"{settings.mirror_base}/{artifact_name(settings, arch)}"


def upstream_url(settings: ProvisionerSettings, version: str, arch: str) -> str:
    return f"{settings.upstream_base}/{version}/{artifact_name(settings, arch)}"


def build_default_templates(
    settings: ProvisionerSettings,
    arch: str,
    version: str | None,
) -> list[str]:
    """Canonical fallback list: mirror first, upstream release last.

    Without a resolved version the upstream URL cannot be formed and
    only the mirror line is returned.
    """
    candidates = [mirror_url(settings, arch)]
    if version:
        candidates.append(upstream_url(settings, version, arch))
    return candidates


def render_templates(lines: list[str]) -> str:
    """Join lines back into storable configuration text."""
    return "\n".join(lines)
