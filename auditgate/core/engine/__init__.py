"""Execution-gating engine — recorder, checklist runner and privilege router."""

from auditgate.core.engine.checklist import run_checklist
from auditgate.core.engine.recorder import ExecutionRecorder
from auditgate.core.engine.router import PrivilegeRouter, RouteDecision, RouteState

__all__ = [
    "ExecutionRecorder",
    "PrivilegeRouter",
    "RouteDecision",
    "RouteState",
    "run_checklist",
]
