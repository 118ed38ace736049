"""
L3 Detection — Host architecture.

Read-only probe: runs ``uname -m`` and maps the machine string to the
architecture suffix used in core artifact names.
"""

from __future__ import annotations

import logging

from coreprov.adapters.process import ProcessRunner
from coreprov.core.models.provision import DEFAULT_ARCH, ArchDetection

logger = logging.getLogger(__name__)

# uname -m → artifact arch. Exact, case-sensitive.
ARCH_MAP: dict[str, str] = {
    "armv7l":      "arm",
    "aarch64":     "arm64",
    "armv5tel":    "armv5",
    "armv6l":      "armv6",
    "loongarch64": "loong64",
    "mips":        "mipsbe",
    "mipsel":      "mipsle",
    "ppc64le":     "ppc64le",
    "riscv64":     "riscv64",
    "x86_64":      "x86_64",
}


def map_machine(raw: str | None) -> ArchDetection:
    """Map a raw machine-type string to an ArchDetection.

    Unknown or empty input falls back to ``x86_64`` with
    ``detected=False``.
    """
    machine = (raw or "").strip()
    if not machine:
        return ArchDetection(raw=raw, reason="empty machine type")

    arch = ARCH_MAP.get(machine)
    if arch is None:
        return ArchDetection(raw=machine, reason=f"unrecognized machine type '{machine}'")

    return ArchDetection(arch=arch, raw=machine, detected=True)


async def detect_arch(
    runner: ProcessRunner,
    *,
    uname_path: str = "/bin/uname",
    timeout: float | None = None,
) -> ArchDetection:
    """Detect the host architecture. Never raises.

    Any failure to obtain the machine string (command missing, non-zero
    exit, empty output) degrades to the default architecture.
    """
    result = await runner.run([uname_path, "-m"], timeout=timeout)
    if not result.ok:
        reason = f"uname failed: {result.describe_failure()}"
        logger.warning("Failed to detect arch (%s), defaulting to %s", reason, DEFAULT_ARCH)
        return ArchDetection(reason=reason)

    detection = map_machine(result.stdout)
    if detection.degraded:
        logger.warning("Arch detection degraded (%s), defaulting to %s",
                       detection.reason, DEFAULT_ARCH)
    else:
        logger.debug("Detected arch %s (uname -m: %s)", detection.arch, detection.raw)
    return detection
