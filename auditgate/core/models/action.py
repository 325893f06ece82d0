"""
Action and Receipt — what the engine asks of an adapter, and the answer.

Every host side effect (a tool run, a clone, a chmod) is an Action
dispatched through the adapter registry. The answer is always a
Receipt, never an exception, so the checklist can keep walking after
any single failure.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

ReceiptStatus = Literal["ok", "skipped", "failed"]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """One side effect for one adapter.

    ``id`` is ``<tool>:<what>`` (``lynis:lynis.log``, ``LinEnum:clone``)
    so a receipt can be traced back to the catalog step that caused it.
    """

    id: str
    adapter: str                    # "shell", "filesystem", "git", "download"
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """What an adapter did with an Action."""

    adapter: str
    action_id: str
    status: ReceiptStatus = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""                # log path, git output, or a short summary
    error: str | None = None
    return_code: int | None = None  # child exit status, for shell and git

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """Declined without side effects; ``reason`` lands in ``output``."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
