"""
Error taxonomy — the only exceptions allowed to escape the core.

Everything else (a tool exiting non-zero, a failed clone, a declined
prompt) is converted into an outcome at the boundary that detects it.
These exceptions mean the session cannot start at all, and the CLI
turns them into a non-zero exit.
"""

from __future__ import annotations


class AuditGateError(Exception):
    """Base class for fatal auditgate errors."""


class SetupError(AuditGateError):
    """Raised when the session cannot be set up.

    Examples: host identity cannot be resolved, a required directory
    cannot be created, git is missing while fetching was requested.
    """


class ConfigError(AuditGateError):
    """Raised when auditgate.yml is unreadable or invalid."""
