"""
Domain models — Pydantic types for auditgate.

All models are re-exported here for convenient access:

    from auditgate.core.models import RunConfiguration, ToolCatalogEntry, ExecutionOutcome
"""

from auditgate.core.models.action import Action, Receipt
from auditgate.core.models.catalog import CatalogPaths, ToolCatalogEntry
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.outcome import ExecutionOutcome, SyncOutcome
from auditgate.core.models.settings import AuditSettings, ToolSource

__all__ = [
    # action.py
    "Action",
    # settings.py
    "AuditSettings",
    # catalog.py
    "CatalogPaths",
    # outcome.py
    "ExecutionOutcome",
    "Receipt",
    # config.py
    "RunConfiguration",
    "SyncOutcome",
    "ToolCatalogEntry",
    "ToolSource",
]
