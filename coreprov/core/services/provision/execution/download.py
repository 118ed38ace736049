"""
L4 Execution — Ordered fallback download and atomic install.

Walks the candidate URLs in order and installs the first one that
downloads. Every attempt is staged into a temp file; the live binary
is only replaced by a rename after the staged copy is complete and
executable, so a failed or interrupted attempt never touches it.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Sequence

from coreprov.adapters.process import ProcessRunner
from coreprov.core.models.provision import DownloadAttempt, ProvisioningResult
from coreprov.core.services.provision.domain.download_helpers import _fmt_size, _url_host

logger = logging.getLogger(__name__)

EXECUTABLE_MODE = 0o755


class _AttemptFailed(Exception):
    """One candidate failed; the loop moves on to the next."""


def _stage_file(install_path: Path, staging_dir: Path | None) -> Path:
    """Create an empty staging file for one attempt."""
    directory = staging_dir or install_path.parent
    directory.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{install_path.name}.", suffix=".part")
    os.close(fd)
    return Path(tmp_path)


def _commit(staged: Path, install_path: Path) -> None:
    """Move the staged file onto the install path atomically."""
    install_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        os.replace(staged, install_path)
        return
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    # Staged on another filesystem: copy next to the target first so the
    # final step is still a same-directory rename.
    fd, tmp_path = tempfile.mkstemp(
        dir=install_path.parent, prefix=f".{install_path.name}.", suffix=".part",
    )
    os.close(fd)
    tmp = Path(tmp_path)
    try:
        shutil.copy2(staged, tmp)
        os.replace(tmp, install_path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
    staged.unlink(missing_ok=True)


async def _attempt(
    url: str,
    install_path: Path,
    *,
    runner: ProcessRunner,
    wget_path: str,
    staging_dir: Path | None,
    timeout: float | None,
) -> int:
    """Download ``url`` and install it. Returns the installed size.

    Raises:
        _AttemptFailed: On any download or install-step failure. The
            staged file is removed before raising.
    """
    try:
        staged = _stage_file(install_path, staging_dir)
    except OSError as e:
        raise _AttemptFailed(f"Cannot create staging file: {e}") from e

    try:
        result = await runner.run([wget_path, "-q", "-O", str(staged), url], timeout=timeout)
        if not result.ok:
            raise _AttemptFailed(f"Download failed: {result.describe_failure()}")

        size = staged.stat().st_size
        if size == 0:
            raise _AttemptFailed("Downloaded file is empty")

        staged.chmod(EXECUTABLE_MODE)
        _commit(staged, install_path)
        return size
    except OSError as e:
        raise _AttemptFailed(f"Install step failed: {e}") from e
    finally:
        staged.unlink(missing_ok=True)


async def install_first_available(
    candidates: Sequence[str],
    install_path: Path,
    *,
    runner: ProcessRunner,
    wget_path: str = "/usr/bin/wget",
    staging_dir: Path | None = None,
    timeout: float | None = None,
) -> ProvisioningResult:
    """Install the first candidate that downloads successfully.

    Candidates are tried strictly in order, one at a time. Individual
    failures are logged and recorded as attempts; only the aggregate
    outcome is reported.

    Returns:
        ProvisioningResult with status ``installed``, ``no_candidates``
        or ``all_failed``.
    """
    result = ProvisioningResult(
        status="all_failed",
        path=str(install_path),
        candidates=list(candidates),
    )

    if not candidates:
        result.status = "no_candidates"
        result.add_message("Please configure download URLs first")
        return result.finish()

    for index, url in enumerate(candidates, start=1):
        logger.info("Downloading core [%d/%d] from %s", index, len(candidates), _url_host(url))
        start = time.monotonic()
        try:
            size = await _attempt(
                url,
                install_path,
                runner=runner,
                wget_path=wget_path,
                staging_dir=staging_dir,
                timeout=timeout,
            )
        except _AttemptFailed as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.warning("Download failed from %s: %s", url, e)
            result.attempts.append(
                DownloadAttempt(url=url, ok=False, error=str(e), elapsed_ms=elapsed_ms)
            )
            continue

        elapsed_ms = int((time.monotonic() - start) * 1000)
        result.attempts.append(DownloadAttempt(url=url, ok=True, elapsed_ms=elapsed_ms))
        result.status = "installed"
        result.add_message("Core downloaded successfully")
        logger.info("Installed %s (%s) from %s", install_path, _fmt_size(size), url)
        return result.finish()

    result.add_message("All download attempts failed")
    logger.error("All %d download attempts failed; %s left unchanged",
                 len(candidates), install_path)
    return result.finish()
