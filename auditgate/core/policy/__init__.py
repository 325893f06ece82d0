"""Execution policy — whitelist matching and operator confirmation."""

from auditgate.core.policy.confirm import (
    Answer,
    ConsoleResponder,
    Responder,
    ScriptedResponder,
    confirm,
)
from auditgate.core.policy.whitelist import WhitelistSet, is_whitelisted, matching_entry

__all__ = [
    "Answer",
    "ConsoleResponder",
    "Responder",
    "ScriptedResponder",
    "WhitelistSet",
    "confirm",
    "is_whitelisted",
    "matching_entry",
]
