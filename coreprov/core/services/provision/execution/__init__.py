"""
L4 Execution — functions that WRITE to the system.
"""

from coreprov.core.services.provision.execution.download import (  # noqa: F401
    EXECUTABLE_MODE,
    install_first_available,
)
