"""
Execution recorder — run one tool command under the session's rules.

The recorder is where the dry-run contract is enforced for tool
execution: under dry-run it only reports. Otherwise it (re)creates the
owner-only session directory, dispatches the command to the shell
adapter, which tees output into ``<session>/<log_name>``, and turns the
receipt into an ExecutionOutcome. Failures of any kind come back as
outcomes; the recorder never raises into the checklist.
"""

from __future__ import annotations

import logging

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.errors import SetupError
from auditgate.core.models.action import Action
from auditgate.core.models.outcome import ExecutionOutcome
from auditgate.core.session import AuditSession

logger = logging.getLogger(__name__)


class ExecutionRecorder:
    """Runs commands through the adapter registry and records outcomes."""

    def __init__(self, registry: AdapterRegistry):
        self._registry = registry

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def run(
        self,
        command: str,
        log_name: str,
        session: AuditSession,
        tool: str = "",
    ) -> ExecutionOutcome:
        """Execute ``command`` and log its combined output as ``log_name``.

        Args:
            command: Shell command line.
            log_name: File name inside the session directory.
            session: The current audit session.
            tool: Catalog identifier, for reporting.

        Returns:
            ExecutionOutcome. ``planned`` under dry-run, otherwise
            ``ok`` on exit code 0 and ``failed`` for anything else.
        """
        tool = tool or log_name
        log_path = session.log_path(log_name)
        logger.info("Running: %s", command)

        if session.config.dry_run:
            logger.info("(dry-run) would run: %s -> %s", command, log_path)
            return ExecutionOutcome.planned(tool=tool, command=command, log_name=log_name)

        try:
            session.ensure_directory(self._registry)
        except SetupError as e:
            logger.warning("%s: %s", tool, e)
            return ExecutionOutcome.failure(
                tool=tool,
                error=str(e),
                attempted=False,
                command=command,
                log_name=log_name,
            )

        receipt = self._registry.execute_action(
            Action(
                id=f"{tool}:{log_name}",
                adapter="shell",
                params={"command": command, "log_path": str(log_path)},
            )
        )

        common = {
            "command": command,
            "log_name": log_name,
            "return_code": receipt.return_code,
            "started_at": receipt.started_at,
            "ended_at": receipt.ended_at,
            "duration_ms": receipt.duration_ms,
        }
        if receipt.ok:
            logger.debug("%s finished, log at %s", tool, log_path)
            return ExecutionOutcome.success(tool=tool, log_path=str(log_path), **common)

        logger.warning("%s failed: %s (log: %s)", tool, receipt.error, log_path)
        return ExecutionOutcome.failure(
            tool=tool,
            error=receipt.error or "unknown error",
            log_path=str(log_path) if log_path.exists() else None,
            **common,
        )
