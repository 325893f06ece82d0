"""
Audit session — one end-to-end invocation.

A session is named after the host and the start time
(``{hostname}-{timestamp}-audit``) and owns one directory under the
logs root. The directory is created lazily, on the first real write,
and never under dry-run. Outcomes are appended as the checklist
progresses; nothing else about a session changes after creation.
"""

from __future__ import annotations

import logging
import platform
import socket
from datetime import datetime
from pathlib import Path

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.errors import SetupError
from auditgate.core.models.action import Action
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.outcome import ExecutionOutcome
from auditgate.core.models.settings import AuditSettings
from auditgate.core.persistence.ledger import LedgerEntry, LedgerWriter

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


def resolve_hostname() -> str:
    """Host identity for the session name.

    Raises:
        SetupError: If neither the socket layer nor uname yields a name.
    """
    try:
        name = socket.gethostname()
    except OSError:
        name = ""
    name = name or platform.node()
    if not name:
        raise SetupError("Cannot determine hostname for the audit session.")
    return name


class AuditSession:
    """State for one audit run."""

    def __init__(
        self,
        name: str,
        directory: Path,
        config: RunConfiguration,
        settings: AuditSettings,
        hostname: str = "",
    ):
        self.name = name
        self.directory = directory
        self.config = config
        self.settings = settings
        self.hostname = hostname
        self._outcomes: list[ExecutionOutcome] = []
        self._ledger: LedgerWriter | None = None

    @classmethod
    def create(
        cls,
        config: RunConfiguration,
        settings: AuditSettings,
        hostname: str | None = None,
        now: datetime | None = None,
    ) -> AuditSession:
        """Build a session from the host identity and current time.

        Raises:
            SetupError: If the host identity cannot be resolved.
        """
        host = hostname if hostname is not None else resolve_hostname()
        if not host:
            raise SetupError("Cannot determine hostname for the audit session.")
        stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        name = f"{host}-{stamp}-audit"
        return cls(
            name=name,
            directory=settings.logs_path / name,
            config=config,
            settings=settings,
            hostname=host,
        )

    # ── Directory ───────────────────────────────────────────────

    @property
    def materialized(self) -> bool:
        return self._ledger is not None

    def ensure_directory(self, registry: AdapterRegistry) -> None:
        """Create the session directory owner-only; safe to call repeatedly.

        Does nothing under dry-run.

        Raises:
            SetupError: If the directory cannot be created or locked down.
        """
        if self.config.dry_run:
            return
        receipt = registry.execute_action(
            Action(
                id=f"{self.name}:mkdir",
                adapter="filesystem",
                params={"operation": "mkdir_private", "path": str(self.directory)},
            )
        )
        if receipt.failed:
            raise SetupError(f"Cannot create session directory {self.directory}: {receipt.error}")
        if self._ledger is None:
            self._ledger = LedgerWriter(self.directory)

    def log_path(self, log_name: str) -> Path:
        return self.directory / log_name

    # ── Outcomes ────────────────────────────────────────────────

    @property
    def outcomes(self) -> tuple[ExecutionOutcome, ...]:
        return tuple(self._outcomes)

    def record(self, outcome: ExecutionOutcome) -> None:
        """Append an outcome; also to the ledger once the directory exists."""
        self._outcomes.append(outcome)
        if self._ledger is not None:
            self._ledger.write(LedgerEntry.from_outcome(self.name, outcome))

    def counts(self) -> dict[str, int]:
        """Outcome totals by status."""
        totals = {"ok": 0, "failed": 0, "skipped": 0, "planned": 0}
        for outcome in self._outcomes:
            totals[outcome.status] += 1
        return totals

    def __repr__(self) -> str:
        return f"<AuditSession {self.name!r} dry_run={self.config.dry_run}>"
