"""
Tool sources — fetch and update third-party tools.

Fetching is opt-in (``--update``): by default nothing is cloned or
pulled. A fetched tool is never trusted by virtue of being fetched;
whether it runs is decided later by the whitelist. Failures for one
source are warnings, and the remaining sources are still processed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.errors import SetupError
from auditgate.core.models.action import Action
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.outcome import SyncOutcome
from auditgate.core.models.settings import AuditSettings, ToolSource

logger = logging.getLogger(__name__)


def setup_directories(
    settings: AuditSettings,
    registry: AdapterRegistry,
    dry_run: bool = False,
) -> None:
    """Create the tools and logs roots, owner-only.

    Raises:
        SetupError: If either directory cannot be created.
    """
    for directory in (settings.tools_path, settings.logs_path):
        if dry_run:
            logger.info("(dry-run) would create %s (mode 700)", directory)
            continue
        receipt = registry.execute_action(
            Action(
                id=f"setup:{directory.name}",
                adapter="filesystem",
                params={"operation": "mkdir_private", "path": str(directory)},
            )
        )
        if receipt.failed:
            raise SetupError(f"Cannot create {directory}: {receipt.error}")


def synchronize(
    source: ToolSource,
    tools_dir: Path,
    registry: AdapterRegistry,
    dry_run: bool = False,
) -> SyncOutcome:
    """Clone, update or download one tool source.

    Returns:
        SyncOutcome with status fetched / updated / failed (planned under dry-run).
    """
    if source.kind == "download":
        return _download(source, tools_dir, registry, dry_run)

    dest = tools_dir / source.name

    if dest.is_dir():
        logger.info("Updating %s ...", source.name)
        if dry_run:
            logger.info("(dry-run) would run: cd %s && git pull --ff-only", dest)
            return SyncOutcome(name=source.name, status="planned", destination=str(dest))
        receipt = registry.execute_action(
            Action(id=f"{source.name}:pull", adapter="git", params={"operation": "pull", "dest": str(dest)})
        )
        if receipt.failed:
            logger.warning("git pull failed for %s; manual inspection recommended.", source.name)
            return SyncOutcome(name=source.name, status="failed", destination=str(dest), detail=receipt.error or "")
        return SyncOutcome(name=source.name, status="updated", destination=str(dest), detail=receipt.output)

    logger.info("Cloning %s ...", source.name)
    if dry_run:
        logger.info("(dry-run) would run: git clone --depth 1 %s %s", source.url, dest)
        return SyncOutcome(name=source.name, status="planned", destination=str(dest))

    receipt = registry.execute_action(
        Action(
            id=f"{source.name}:clone",
            adapter="git",
            params={"operation": "clone", "url": source.url, "dest": str(dest)},
        )
    )
    if receipt.failed:
        logger.warning("git clone failed for %s", source.url)
        return SyncOutcome(name=source.name, status="failed", destination=str(dest), detail=receipt.error or "")

    _lock_down(dest, registry)
    return SyncOutcome(name=source.name, status="fetched", destination=str(dest))


def _download(
    source: ToolSource,
    tools_dir: Path,
    registry: AdapterRegistry,
    dry_run: bool,
) -> SyncOutcome:
    dest = tools_dir / source.target_name
    logger.info("Fetching %s (if available)...", source.target_name)
    if dry_run:
        logger.info("(dry-run) would fetch %s", source.target_name)
        return SyncOutcome(name=source.name, status="planned", destination=str(dest))

    existed = dest.exists()
    receipt = registry.execute_action(
        Action(id=f"{source.name}:download", adapter="download", params={"url": source.url, "dest": str(dest)})
    )
    if receipt.failed:
        logger.warning("%s download failed", source.target_name)
        return SyncOutcome(name=source.name, status="failed", destination=str(dest), detail=receipt.error or "")
    return SyncOutcome(
        name=source.name,
        status="updated" if existed else "fetched",
        destination=str(dest),
        detail=receipt.output,
    )


def _lock_down(dest: Path, registry: AdapterRegistry) -> None:
    receipt = registry.execute_action(
        Action(
            id=f"{dest.name}:chmod",
            adapter="filesystem",
            params={"operation": "chmod_tree", "path": str(dest), "mode": 0o700},
        )
    )
    if receipt.failed:
        logger.warning("Could not restrict permissions on %s: %s", dest, receipt.error)


def setup_tools(
    settings: AuditSettings,
    config: RunConfiguration,
    registry: AdapterRegistry,
) -> list[SyncOutcome]:
    """Synchronize every configured source, if updating is enabled.

    Raises:
        SetupError: If git sources are configured but git is not on PATH.
    """
    if not config.update_deps:
        logger.info(
            "Tool fetching/updating is disabled by default. "
            "Use --update to allow fetching/updating tools."
        )
        return []

    needs_git = any(s.kind == "git" for s in settings.sources)
    if needs_git and not registry.is_available("git"):
        raise SetupError("git is not in $PATH; cannot fetch tools. Install git or run with --skip-tools.")

    results: list[SyncOutcome] = []
    for source in settings.sources:
        if source.kind == "download" and not registry.is_available("download"):
            logger.warning("No downloader available; %s not downloaded.", source.target_name)
            results.append(SyncOutcome(name=source.name, status="failed", detail="downloader unavailable"))
            continue
        results.append(synchronize(source, settings.tools_path, registry, config.dry_run))

    failed = sum(1 for r in results if r.failed)
    if failed:
        logger.warning("%d of %d tool sources failed to synchronize.", failed, len(results))
    return results
