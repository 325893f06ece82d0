"""
Catalog entry model — a statically known, auditable tool.

Each entry says where the tool lives under the tools directory, what
command to run once it is present and trusted, and where its output
goes. Adding a tool is a data change in ``core/data/catalog.py``, not
a logic change in the checklist runner.
"""

from __future__ import annotations

import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class CatalogPaths:
    """Paths a command template may embed."""

    tools_dir: Path
    audit_dir: Path


class ToolCatalogEntry(BaseModel):
    """Static descriptor of one catalog step.

    Command templates use ``str.format`` placeholders, substituted with
    shell-quoted paths:

        {tool}       the resolved presence path of this entry
        {tools_dir}  the tools directory
        {audit_dir}  the session log directory
    """

    model_config = ConfigDict(frozen=True)

    identifier: str                  # whitelist token and filesystem name
    path: str = ""                   # relative to tools_dir; defaults to identifier
    kind: Literal["dir", "file"] = "dir"
    requires_commands: tuple[str, ...] = Field(default_factory=tuple)
    command: str
    log_name: str
    requires_privilege: bool = False
    chown_tree: bool = False         # privileged pre-step: chown the tree before running
    description: str = ""

    def resolve_path(self, tools_dir: Path) -> Path:
        return tools_dir / (self.path or self.identifier)

    def is_present(self, tools_dir: Path) -> bool:
        """Presence check: the expected path exists and helper commands are on PATH."""
        target = self.resolve_path(tools_dir)
        exists = target.is_dir() if self.kind == "dir" else target.is_file()
        if not exists:
            return False
        return all(shutil.which(cmd) is not None for cmd in self.requires_commands)

    def render_command(self, paths: CatalogPaths) -> str:
        """Build the shell command line for this entry."""
        return self.command.format(
            tool=shlex.quote(str(self.resolve_path(paths.tools_dir))),
            tools_dir=shlex.quote(str(paths.tools_dir)),
            audit_dir=shlex.quote(str(paths.audit_dir)),
        )
