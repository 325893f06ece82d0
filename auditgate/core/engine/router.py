"""
Privilege router — choose the checklist for this identity and mode.

States:

    START → DETERMINE_PRIVILEGE ─┬─────────────────────────────→ UNPRIVILEGED → DONE
                                 └→ CONFIRM_ESCALATION ─┬──────→ PRIVILEGED   → DONE
                                                        └──────→ UNPRIVILEGED → DONE

Declining escalation is always safe: it falls back to the unprivileged
checklist, so an elevated run never silently loses audit coverage.
The only path to the privileged checklist without a prompt is an
explicit ``--run-as-root --no-interactive``.
"""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from auditgate.core.data.catalog import PRIVILEGED_CATALOG, UNPRIVILEGED_CATALOG
from auditgate.core.engine.checklist import run_checklist
from auditgate.core.engine.recorder import ExecutionRecorder
from auditgate.core.models.catalog import ToolCatalogEntry
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.outcome import ExecutionOutcome
from auditgate.core.policy.confirm import Answer, Responder, confirm
from auditgate.core.policy.whitelist import WhitelistSet
from auditgate.core.session import AuditSession

logger = logging.getLogger(__name__)

ENABLE_PRIVILEGED_QUESTION = (
    "Enable privileged checks now? (runs as root and may collect sensitive data)"
)
CONFIRM_RUN_AS_ROOT_QUESTION = "You passed --run-as-root. Proceed with privileged checks?"


class RouteState(enum.Enum):
    START = "start"
    DETERMINE_PRIVILEGE = "determine-privilege"
    CONFIRM_ESCALATION = "confirm-escalation"
    UNPRIVILEGED = "unprivileged"
    PRIVILEGED = "privileged"
    DONE = "done"


@dataclass
class RouteDecision:
    """Where the router ended up, and how it got there."""

    path: RouteState = RouteState.UNPRIVILEGED
    elevated: bool = False
    prompted: bool = False
    trail: list[RouteState] = field(default_factory=list)

    @property
    def privileged(self) -> bool:
        return self.path is RouteState.PRIVILEGED


def _effective_uid_is_root() -> bool:
    return os.geteuid() == 0


class PrivilegeRouter:
    """Decides between the privileged and unprivileged checklists."""

    def __init__(
        self,
        responder: Responder | None = None,
        is_elevated: Callable[[], bool] | None = None,
        unprivileged_catalog: Sequence[ToolCatalogEntry] = UNPRIVILEGED_CATALOG,
        privileged_catalog: Sequence[ToolCatalogEntry] = PRIVILEGED_CATALOG,
    ):
        self._responder = responder
        self._is_elevated = is_elevated or _effective_uid_is_root
        self.unprivileged_catalog = unprivileged_catalog
        self.privileged_catalog = privileged_catalog

    def route(self, config: RunConfiguration) -> RouteDecision:
        """Walk the state machine up to (not including) running a checklist."""
        decision = RouteDecision(trail=[RouteState.START, RouteState.DETERMINE_PRIVILEGE])
        decision.elevated = self._is_elevated()

        if not decision.elevated:
            return self._settle(decision, RouteState.UNPRIVILEGED)

        if not config.run_privileged:
            logger.warning("You are root. Privileged checks are disabled by default for safety.")
            decision.trail.append(RouteState.CONFIRM_ESCALATION)
            decision.prompted = config.interactive
            if confirm(ENABLE_PRIVILEGED_QUESTION, Answer.NO, config, self._responder):
                logger.info("Privileged checks approved interactively.")
                return self._settle(decision, RouteState.PRIVILEGED)
            logger.info("Privileged checks skipped.")
            return self._settle(decision, RouteState.UNPRIVILEGED)

        if config.interactive:
            decision.trail.append(RouteState.CONFIRM_ESCALATION)
            decision.prompted = True
            if not confirm(CONFIRM_RUN_AS_ROOT_QUESTION, Answer.NO, config, self._responder):
                logger.info("Privileged checks aborted by user.")
                return self._settle(decision, RouteState.UNPRIVILEGED)

        return self._settle(decision, RouteState.PRIVILEGED)

    def run(
        self,
        session: AuditSession,
        recorder: ExecutionRecorder,
        whitelist: WhitelistSet,
    ) -> tuple[RouteDecision, list[ExecutionOutcome]]:
        """Route, then run the selected checklist to completion."""
        decision = self.route(session.config)

        if decision.privileged:
            logger.info("Running privileged checks (as root)...")
            outcomes = run_checklist(self.privileged_catalog, session, recorder, whitelist, privileged=True)
            logger.info("Privileged automatic checks finished.")
        else:
            logger.info("Running unprivileged checks...")
            outcomes = run_checklist(self.unprivileged_catalog, session, recorder, whitelist)
            logger.info(
                "Unprivileged automatic checks finished. For more tools present in %s "
                "run them manually after inspection.",
                session.settings.tools_path,
            )

        decision.trail.append(RouteState.DONE)
        return decision, outcomes

    @staticmethod
    def _settle(decision: RouteDecision, path: RouteState) -> RouteDecision:
        decision.path = path
        decision.trail.append(path)
        return decision
