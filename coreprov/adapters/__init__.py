"""Adapters — bindings to external processes.

Public re-exports for convenient access.
"""

from coreprov.adapters.process import CommandResult, ProcessRunner, SubprocessRunner

__all__ = [
    "CommandResult",
    "ProcessRunner",
    "SubprocessRunner",
]
