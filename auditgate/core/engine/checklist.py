"""
Checklist runner — walk a catalog, one entry at a time.

For each entry, in order:

    privilege check → presence check → whitelist check → (ownership pre-step) → build command → record

Absent tools and tools that are present but not whitelisted are normal
outcomes, not errors: fetching a tool never implies running it. No
entry's failure stops the walk; the whole catalog is always processed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from auditgate.core.engine.recorder import ExecutionRecorder
from auditgate.core.models.action import Action
from auditgate.core.models.catalog import CatalogPaths, ToolCatalogEntry
from auditgate.core.models.outcome import (
    REASON_NOT_PRESENT,
    REASON_NOT_WHITELISTED,
    REASON_REQUIRES_PRIVILEGE,
    ExecutionOutcome,
)
from auditgate.core.policy.whitelist import WhitelistSet, is_whitelisted
from auditgate.core.session import AuditSession

logger = logging.getLogger(__name__)


def run_checklist(
    catalog: Iterable[ToolCatalogEntry],
    session: AuditSession,
    recorder: ExecutionRecorder,
    whitelist: WhitelistSet,
    privileged: bool = False,
) -> list[ExecutionOutcome]:
    """Process every catalog entry and return one outcome per entry.

    Each outcome is also recorded on the session. Entries that require
    privilege are skipped unless ``privileged`` is set.
    """
    paths = CatalogPaths(
        tools_dir=session.settings.tools_path,
        audit_dir=session.directory,
    )
    outcomes: list[ExecutionOutcome] = []

    for entry in catalog:
        outcome = _process_entry(entry, paths, session, recorder, whitelist, privileged)
        session.record(outcome)
        outcomes.append(outcome)

    return outcomes


def _process_entry(
    entry: ToolCatalogEntry,
    paths: CatalogPaths,
    session: AuditSession,
    recorder: ExecutionRecorder,
    whitelist: WhitelistSet,
    privileged: bool,
) -> ExecutionOutcome:
    if entry.requires_privilege and not privileged:
        logger.info("%s requires privilege; skipped on the unprivileged path.", entry.identifier)
        return ExecutionOutcome.skip(
            tool=entry.identifier,
            reason=REASON_REQUIRES_PRIVILEGE,
            log_name=entry.log_name,
        )

    if not entry.is_present(paths.tools_dir):
        logger.warning(
            "%s not present (run with --update to fetch it); skipped.",
            entry.identifier,
        )
        return ExecutionOutcome.skip(
            tool=entry.identifier,
            reason=REASON_NOT_PRESENT,
            log_name=entry.log_name,
        )

    # Must stay ahead of render_command: nothing is built for an untrusted tool
    if not is_whitelisted(entry.identifier, whitelist):
        logger.info(
            "%s present but not whitelisted; skip automatic run.",
            entry.identifier,
        )
        return ExecutionOutcome.skip(
            tool=entry.identifier,
            reason=REASON_NOT_WHITELISTED,
            log_name=entry.log_name,
        )

    if entry.chown_tree:
        _chown_tree(entry, paths, session, recorder)

    command = entry.render_command(paths)
    return recorder.run(command, entry.log_name, session, tool=entry.identifier)


def _chown_tree(
    entry: ToolCatalogEntry,
    paths: CatalogPaths,
    session: AuditSession,
    recorder: ExecutionRecorder,
) -> None:
    """Hand the tool tree to the configured owner before running it.

    Under dry-run this is only reported. A failure is a warning: the
    tool still runs, and complains itself if ownership matters.
    """
    target = entry.resolve_path(paths.tools_dir)
    owner = session.settings.chown_owner

    if session.config.dry_run:
        logger.info("(dry-run) would chown -R %s %s", owner, target)
        return

    receipt = recorder.registry.execute_action(
        Action(
            id=f"{entry.identifier}:chown",
            adapter="filesystem",
            params={"operation": "chown_tree", "path": str(target), "owner": owner},
        )
    )
    if receipt.failed:
        logger.warning("Could not chown %s to %s: %s", target, owner, receipt.error)
    else:
        logger.debug(receipt.output)
