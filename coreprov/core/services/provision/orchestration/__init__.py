"""
L5 Orchestration — top-level coordinators.
"""

from coreprov.core.services.provision.orchestration.orchestrator import Provisioner  # noqa: F401
