"""Adapters — bindings for the host side effects auditgate performs.

Public re-exports for convenient access.
"""

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.adapters.mock import MockAdapter
from auditgate.adapters.registry import AdapterRegistry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
]
