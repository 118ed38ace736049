"""
Domain models — Pydantic types for the provisioning engine.

All models are re-exported here for convenient access:

    from coreprov.core.models import ArchDetection, ProvisioningResult
"""

from coreprov.core.models.provision import (
    DEFAULT_ARCH,
    ArchDetection,
    CoreStatus,
    DownloadAttempt,
    ProvisioningResult,
    ProvisioningStatus,
    VersionResolution,
)
from coreprov.core.models.settings import ProvisionerSettings

__all__ = [
    # provision.py
    "DEFAULT_ARCH",
    "ArchDetection",
    "CoreStatus",
    "DownloadAttempt",
    "ProvisioningResult",
    "ProvisioningStatus",
    "VersionResolution",
    # settings.py
    "ProvisionerSettings",
]
