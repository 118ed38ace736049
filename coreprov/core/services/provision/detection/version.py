"""
L3 Detection — Core versions.

Two read-only probes:
  - ``resolve_latest_version``: the latest release tag from the upstream
    release-metadata endpoint (GitHub ``releases/latest`` JSON).
  - ``get_installed_version``: what the installed core reports for
    ``--version``.

Neither raises. A single attempt is made per call; no retries, so an
interactive caller never waits on more than one metadata fetch.
"""

from __future__ import annotations

import json
import logging

from coreprov.adapters.process import ProcessRunner
from coreprov.core.models.provision import CoreStatus, VersionResolution

logger = logging.getLogger(__name__)


def parse_release_metadata(body: str) -> VersionResolution:
    """Extract ``tag_name`` from a release-metadata JSON document."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, ValueError) as e:
        return VersionResolution(error=f"Release metadata is not JSON: {e}")

    if not isinstance(data, dict):
        return VersionResolution(error="Release metadata is not a JSON object")

    tag = data.get("tag_name")
    if not isinstance(tag, str) or not tag.strip():
        return VersionResolution(error="Release metadata has no tag_name")

    return VersionResolution(tag=tag.strip())


async def resolve_latest_version(
    runner: ProcessRunner,
    api_url: str,
    *,
    wget_path: str = "/usr/bin/wget",
    timeout: float | None = None,
) -> VersionResolution:
    """Fetch the latest published release tag.

    Returns:
        A resolved VersionResolution, or an unresolved one with
        ``error`` describing the failure.
    """
    result = await runner.run([wget_path, "-qO-", api_url], timeout=timeout)
    if not result.ok:
        resolution = VersionResolution(
            error=f"Failed to fetch release metadata: {result.describe_failure()}",
        )
    elif not result.stdout.strip():
        resolution = VersionResolution(error="Release metadata response was empty")
    else:
        resolution = parse_release_metadata(result.stdout)

    if resolution.resolved:
        logger.info("Latest core release: %s", resolution.tag)
    else:
        logger.warning("Failed to get latest version: %s", resolution.error)
    return resolution


async def get_installed_version(
    runner: ProcessRunner,
    binary: str,
    *,
    timeout: float | None = None,
) -> CoreStatus:
    """Ask the installed core for its version.

    ``Not installed`` when the binary is missing or cannot run,
    ``Unknown`` when it runs but prints nothing.
    """
    result = await runner.run([binary, "--version"], timeout=timeout)
    if result.error is not None:
        logger.debug("Core not runnable at %s: %s", binary, result.error)
        return CoreStatus(path=binary)

    version = result.stdout.strip()
    return CoreStatus(path=binary, installed=True, version=version or "Unknown")
