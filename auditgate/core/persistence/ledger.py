"""
Session ledger — append-only record of every outcome in a session.

One NDJSON line per catalog step, written to ``summary.ndjson`` inside
the session directory as each step finishes, so an interrupted run
still documents what it got through. The file is owner-only before
its first byte is written.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from auditgate.core.models.outcome import ExecutionOutcome

logger = logging.getLogger(__name__)

LEDGER_FILE = "summary.ndjson"
LEDGER_FILE_MODE = 0o600


class LedgerEntry(BaseModel):
    """A single ledger line."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    session: str = ""
    tool: str = ""
    log_name: str = ""
    status: str = ""               # ok, failed, skipped
    reason: str = ""
    return_code: int | None = None
    log_path: str | None = None
    duration_ms: int = 0
    error: str | None = None

    @classmethod
    def from_outcome(cls, session: str, outcome: ExecutionOutcome) -> LedgerEntry:
        return cls(
            session=session,
            tool=outcome.tool,
            log_name=outcome.log_name,
            status=outcome.status,
            reason=outcome.reason,
            return_code=outcome.return_code,
            log_path=outcome.log_path,
            duration_ms=outcome.duration_ms,
            error=outcome.error,
        )


class LedgerWriter:
    """Append-only ledger writer for one session directory."""

    def __init__(self, directory: Path):
        self._path = directory / LEDGER_FILE

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: LedgerEntry) -> None:
        """Append an entry. A write failure is logged, never raised."""
        line = json.dumps(entry.model_dump(mode="json"), ensure_ascii=False) + "\n"
        try:
            fd = os.open(self._path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, LEDGER_FILE_MODE)
            with os.fdopen(fd, "a", encoding="utf-8") as f:
                os.fchmod(f.fileno(), LEDGER_FILE_MODE)
                f.write(line)
            logger.debug("Ledger entry written: %s/%s", entry.tool, entry.log_name)
        except OSError as e:
            logger.error("Failed to write ledger entry: %s", e)

    def read_all(self) -> list[LedgerEntry]:
        """Read all entries, oldest first. Corrupt lines are skipped."""
        if not self._path.is_file():
            return []

        entries = []
        try:
            with self._path.open("r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(LedgerEntry.model_validate(json.loads(line)))
                    except ValueError as e:
                        logger.warning("Skipping corrupt ledger entry at line %d: %s", line_num, e)
        except OSError as e:
            logger.error("Failed to read ledger: %s", e)

        return entries
