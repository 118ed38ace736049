"""
Process adapter — the single place external commands are spawned.

Every probe and transfer the provisioning engine performs (``uname``,
``wget``, ``<core> --version``) goes through :class:`SubprocessRunner`.
The runner NEVER raises: missing executables, OS errors and timeouts
are captured in the returned :class:`CommandResult`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from typing import Protocol, Sequence

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Keep captured output bounded; release metadata is a few KB.
_MAX_CAPTURE = 256 * 1024


class CommandResult(BaseModel):
    """Outcome of one external process invocation."""

    argv: list[str] = Field(default_factory=list)
    returncode: int = -1
    stdout: str = ""
    stderr: str = ""
    elapsed_ms: int = 0
    error: str | None = None   # set when the process could not run / timed out

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited 0."""
        return self.error is None and self.returncode == 0

    def describe_failure(self) -> str:
        """Short human-readable reason for a failed invocation."""
        if self.error:
            return self.error
        stderr = self.stderr.strip()
        if stderr:
            return f"exit {self.returncode}: {stderr.splitlines()[-1]}"
        return f"exit {self.returncode}"


class ProcessRunner(Protocol):
    """Anything that can run an argv and report its outcome."""

    async def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult: ...


class SubprocessRunner:
    """Run commands with ``asyncio`` subprocesses.

    One command at a time per call; the caller awaits each invocation
    before starting the next.
    """

    def __init__(self, default_timeout: float = 60.0) -> None:
        self.default_timeout = default_timeout

    async def run(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        argv = [str(a) for a in argv]
        timeout = self.default_timeout if timeout is None else timeout

        logger.debug("Executing: %s (timeout=%ss)", " ".join(argv), timeout)
        start = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            return CommandResult(argv=argv, error=f"Command not found: {argv[0]}")
        except OSError as e:
            return CommandResult(argv=argv, error=f"Cannot execute {argv[0]}: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            with contextlib.suppress(ProcessLookupError):
                proc.kill()
            await proc.wait()
            elapsed_ms = int((time.monotonic() - start) * 1000)
            return CommandResult(
                argv=argv,
                returncode=-1,
                elapsed_ms=elapsed_ms,
                error=f"Command timed out ({timeout}s)",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        result = CommandResult(
            argv=argv,
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
            elapsed_ms=elapsed_ms,
        )
        logger.debug("%s exited %d in %dms", argv[0], result.returncode, elapsed_ms)
        return result


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    if len(data) > _MAX_CAPTURE:
        logger.debug(
            "Output truncated to last %d of %d bytes", _MAX_CAPTURE, len(data),
        )
    return data[-_MAX_CAPTURE:].decode("utf-8", errors="replace")
