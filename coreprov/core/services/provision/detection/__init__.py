"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system or upstream state but never WRITE.
"""

from coreprov.core.services.provision.detection.arch import (  # noqa: F401
    ARCH_MAP,
    detect_arch,
    map_machine,
)
from coreprov.core.services.provision.detection.version import (  # noqa: F401
    get_installed_version,
    parse_release_metadata,
    resolve_latest_version,
)
