"""
Adapter registry — the one door from the engine to the host.

The engine never calls an adapter directly. It hands the registry an
Action; the registry finds the adapter named by ``action.adapter``,
validates, executes (or declines under dry-run) and always answers
with a Receipt, whatever the adapter did.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Action, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name → adapter map plus Receipt-only dispatch."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    @classmethod
    def default(cls) -> AdapterRegistry:
        """Registry wired with the host adapters."""
        from auditgate.adapters.net.download import DownloadAdapter
        from auditgate.adapters.shell.command import ShellCommandAdapter
        from auditgate.adapters.shell.filesystem import FilesystemAdapter
        from auditgate.adapters.vcs.git import GitAdapter

        registry = cls()
        for adapter in (ShellCommandAdapter(), FilesystemAdapter(), GitAdapter(), DownloadAdapter()):
            registry.register(adapter)
        return registry

    # ── Registration ────────────────────────────────────────────

    def register(self, adapter: Adapter) -> None:
        """Add ``adapter``; an existing one with the same name is replaced."""
        if adapter.name in self._adapters:
            logger.debug("Replacing adapter %s with %r", adapter.name, adapter)
        self._adapters[adapter.name] = adapter

    def unregister(self, name: str) -> None:
        self._adapters.pop(name, None)

    def get(self, name: str) -> Adapter | None:
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        return list(self._adapters)

    def is_available(self, name: str) -> bool:
        """Registered and backed by something usable on this host."""
        adapter = self._adapters.get(name)
        if adapter is None:
            return False
        try:
            return adapter.is_available()
        except Exception as e:
            logger.debug("Availability check for %s raised: %s", name, e)
            return False

    def adapter_status(self) -> dict[str, dict[str, Any]]:
        return {
            name: {
                "name": name,
                "available": self.is_available(name),
                "type": type(adapter).__name__,
            }
            for name, adapter in self._adapters.items()
        }

    # ── Dispatch ────────────────────────────────────────────────

    def execute_action(
        self,
        action: Action,
        working_dir: str | None = None,
        dry_run: bool = False,
    ) -> Receipt:
        """Run ``action`` through its adapter. Never raises.

        Missing adapters and failed validation come back as failed
        receipts; under dry-run a validated action is skipped.
        """
        started = time.monotonic()

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(action.adapter, action.id, f"No adapter registered for '{action.adapter}'")

        context = ExecutionContext(
            action=action,
            working_dir=working_dir,
            dry_run=dry_run,
            params=action.params,
        )

        problem = self._validate(adapter, context)
        if problem:
            return Receipt.failure(action.adapter, action.id, problem)

        if dry_run:
            return Receipt.skip(
                action.adapter,
                action.id,
                f"[dry-run] Would execute {action.adapter}:{action.id}",
                metadata={"dry_run": True},
            )

        logger.debug("Dispatching %s to %s", action.id, action.adapter)
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            logger.error("Adapter %s raised during %s: %s", action.adapter, action.id, e)
            receipt = Receipt.failure(action.adapter, action.id, f"Unexpected error: {e}")

        receipt.duration_ms = int((time.monotonic() - started) * 1000)
        return receipt

    @staticmethod
    def _validate(adapter: Adapter, context: ExecutionContext) -> str:
        """Empty string if valid, else the failure message."""
        try:
            valid, message = adapter.validate(context)
        except Exception as e:
            return f"Validation error: {e}"
        return "" if valid else f"Validation failed: {message}"
