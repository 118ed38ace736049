"""
Provision — resolve, expand, download and install the core binary.

Layers (lower layers never import higher ones):
    L1 domain        — pure template and formatting functions
    L3 detection     — read-only probes (uname, release metadata, --version)
    L4 execution     — staged download and atomic install
    L5 orchestration — the Provisioner entry point
"""

from coreprov.core.services.provision.orchestration.orchestrator import Provisioner

__all__ = ["Provisioner"]
