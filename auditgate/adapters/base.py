"""
Adapter base — how the engine reaches the host.

Running a tool, cloning a repository, creating the owner-only session
directory: each is an adapter operation. The engine builds an Action,
the registry wraps it in an ExecutionContext and hands it to the
adapter named by ``action.adapter``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from auditgate.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """An Action plus the circumstances it runs under."""

    action: Action
    working_dir: str | None = None    # cwd for child processes
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)


class Adapter(ABC):
    """One kind of host side effect.

    ``execute`` reports every failure through the Receipt it returns;
    the registry additionally converts anything that escapes into a
    failed Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, matched against ``Action.adapter``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing binary or facility exists on this host."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Check params before anything touches the host.

        Returns:
            ``(True, "")`` or ``(False, reason)``.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Perform the side effect."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
