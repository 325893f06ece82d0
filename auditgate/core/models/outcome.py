"""
ExecutionOutcome and SyncOutcome — what happened, never an exception.

An ExecutionOutcome is produced for every catalog entry the checklist
walks: executed, failed, skipped by policy, or only planned (dry-run).
A SyncOutcome is produced for every tool source the fetcher touches.
Neither ever aborts a session; they are collected for the summary.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


OutcomeStatus = Literal["ok", "failed", "skipped", "planned"]

# Skip reasons used by the checklist runner
REASON_NOT_PRESENT = "not-present"
REASON_NOT_WHITELISTED = "not-whitelisted"
REASON_REQUIRES_PRIVILEGE = "requires-privilege"


class ExecutionOutcome(BaseModel):
    """Result of submitting (or declining to submit) one tool command."""

    tool: str
    log_name: str = ""
    command: str = ""
    status: OutcomeStatus = "ok"

    attempted: bool = False
    succeeded: bool = False
    log_path: str | None = None
    return_code: int | None = None

    reason: str = ""                 # skip reason or dry-run note
    error: str | None = None

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, tool: str, log_path: str, **kwargs: Any) -> ExecutionOutcome:
        """The command ran and exited 0."""
        return cls(
            tool=tool,
            status="ok",
            attempted=True,
            succeeded=True,
            log_path=log_path,
            **kwargs,
        )

    @classmethod
    def failure(cls, tool: str, error: str, attempted: bool = True, **kwargs: Any) -> ExecutionOutcome:
        """The command ran and failed, or could not be launched.

        ``attempted`` is False when the command never got as far as launch.
        """
        return cls(
            tool=tool,
            status="failed",
            attempted=attempted,
            succeeded=False,
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(cls, tool: str, reason: str, **kwargs: Any) -> ExecutionOutcome:
        """Policy or presence check declined to run the tool."""
        return cls(tool=tool, status="skipped", reason=reason, **kwargs)

    @classmethod
    def planned(cls, tool: str, command: str, **kwargs: Any) -> ExecutionOutcome:
        """Dry-run: the command would have been executed."""
        return cls(
            tool=tool,
            status="planned",
            command=command,
            reason="dry-run",
            **kwargs,
        )


SyncStatus = Literal["fetched", "updated", "failed", "planned"]


class SyncOutcome(BaseModel):
    """Result of synchronizing one tool source."""

    name: str
    status: SyncStatus
    destination: str = ""
    detail: str = ""

    @property
    def failed(self) -> bool:
        return self.status == "failed"
