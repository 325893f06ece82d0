"""
Audit use case — one full session, from setup to summary.

    setup dirs → fetch tools (opt-in) → [tools-only: stop] → session dir → route → checklist

Fatal setup problems (host identity, directory creation, missing git
when fetching) end the session with ``result.error``. Everything after
setup is contained: tool failures are outcomes, never errors.
"""

from __future__ import annotations

import logging
import os
import platform
import pwd
from dataclasses import dataclass, field
from datetime import datetime

import distro

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.engine.recorder import ExecutionRecorder
from auditgate.core.engine.router import PrivilegeRouter, RouteDecision
from auditgate.core.errors import SetupError
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.outcome import ExecutionOutcome, SyncOutcome
from auditgate.core.models.settings import AuditSettings
from auditgate.core.policy.whitelist import WhitelistSet
from auditgate.core.services.tool_sources import setup_directories, setup_tools
from auditgate.core.session import AuditSession

logger = logging.getLogger(__name__)


@dataclass
class AuditResult:
    """Result of one audit invocation."""

    session_name: str = ""
    session_dir: str = ""
    dry_run: bool = False
    tools_only: bool = False
    route: RouteDecision | None = None
    synced: list[SyncOutcome] = field(default_factory=list)
    outcomes: list[ExecutionOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def completed(self) -> bool:
        return self.error is None

    def counts(self) -> dict[str, int]:
        totals = {"ok": 0, "failed": 0, "skipped": 0, "planned": 0}
        for outcome in self.outcomes:
            totals[outcome.status] += 1
        return totals

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result

        result["session"] = self.session_name
        result["session_dir"] = self.session_dir
        result["dry_run"] = self.dry_run
        result["tools_only"] = self.tools_only
        if self.route is not None:
            result["route"] = {
                "path": self.route.path.value,
                "elevated": self.route.elevated,
                "prompted": self.route.prompted,
            }
        result["synced"] = [s.model_dump(mode="json") for s in self.synced]
        result["counts"] = self.counts()
        result["outcomes"] = [o.model_dump(mode="json") for o in self.outcomes]
        return result


def describe_user() -> str:
    """Rough equivalent of ``id`` for the session header."""
    uid, euid = os.getuid(), os.geteuid()
    try:
        name = pwd.getpwuid(euid).pw_name
    except KeyError:
        name = "?"
    return f"uid={uid} euid={euid}({name}) gid={os.getgid()}"


def describe_distribution() -> str:
    """Pretty distribution name, e.g. 'Debian GNU/Linux 12 (bookworm)'."""
    return distro.name(pretty=True) or "unknown"


def run_audit(
    config: RunConfiguration,
    settings: AuditSettings,
    registry: AdapterRegistry | None = None,
    router: PrivilegeRouter | None = None,
    hostname: str | None = None,
    now: datetime | None = None,
) -> AuditResult:
    """Run one audit session.

    Args:
        config: Mode flags for this invocation.
        settings: Operator settings (paths, whitelist, sources).
        registry: Adapter registry; the host adapters by default.
        router: Privilege router; a console-prompting one by default.
        hostname: Override host identity (tests).
        now: Override the session timestamp (tests).

    Returns:
        AuditResult. ``error`` is set only for fatal setup failures.
    """
    result = AuditResult(dry_run=config.dry_run, tools_only=config.tools_only)
    registry = registry or AdapterRegistry.default()
    router = router or PrivilegeRouter()

    try:
        session = AuditSession.create(config, settings, hostname=hostname, now=now)
        result.session_name = session.name
        result.session_dir = str(session.directory)

        setup_directories(settings, registry, dry_run=config.dry_run)

        if config.skip_tools:
            logger.info("Skipping tools fetch/update as requested (--skip-tools)")
        else:
            result.synced = setup_tools(settings, config, registry)

        if config.tools_only:
            logger.info("Tools fetch/update complete (tools-only mode). Exiting.")
            return result

        session.ensure_directory(registry)
    except SetupError as e:
        logger.error("%s", e)
        result.error = str(e)
        return result

    uname = platform.uname()
    logger.info("Date:     %s", (now or datetime.now()).strftime("%c"))
    logger.info("Hostname: %s", session.hostname)
    logger.info("System:   %s %s %s %s", uname.system, uname.node, uname.release, uname.machine)
    logger.info("Distro:   %s", describe_distribution())
    logger.info("User:     %s", describe_user())
    logger.info("Log:      %s", session.directory)

    whitelist = WhitelistSet.of(settings.whitelist, strict=settings.whitelist_strict)
    recorder = ExecutionRecorder(registry)
    result.route, result.outcomes = router.run(session, recorder, whitelist)

    logger.info("Complete")
    return result
