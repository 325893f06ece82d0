"""
Settings model — the operator's auditgate.yml.

Settings say *where* things live and *what* is trusted; the
RunConfiguration says *how* this particular invocation behaves.
Both are loaded once and never mutated afterwards.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auditgate.core.data.sources import DEFAULT_SOURCES
from auditgate.core.data.whitelist import DEFAULT_WHITELIST


class ToolSource(BaseModel):
    """A remote location a tool is fetched from."""

    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    kind: Literal["git", "download"] = "git"
    filename: str = ""    # download target name (defaults to name)

    @property
    def target_name(self) -> str:
        return self.filename or self.name


def _default_sources() -> list[ToolSource]:
    return [ToolSource.model_validate(s) for s in DEFAULT_SOURCES]


class AuditSettings(BaseModel):
    """Operator settings loaded from auditgate.yml."""

    model_config = ConfigDict(frozen=True)

    base_dir: Path = Path(".")
    tools_dir: str = "tools"
    logs_dir: str = "logs"

    whitelist: list[str] = Field(default_factory=lambda: list(DEFAULT_WHITELIST))
    whitelist_strict: bool = False

    # Identity the privileged pre-step chowns tool trees to ("uid:gid" or "user:group")
    chown_owner: str = "0:0"

    sources: list[ToolSource] = Field(default_factory=_default_sources)

    @field_validator("whitelist")
    @classmethod
    def _no_empty_tokens(cls, v: list[str]) -> list[str]:
        # An empty token is a substring of every identifier
        if any(not token for token in v):
            raise ValueError("whitelist entries must be non-empty strings")
        return v

    @field_validator("chown_owner")
    @classmethod
    def _owner_format(cls, v: str) -> str:
        user, _, group = v.partition(":")
        if not user or (":" in v and not group):
            raise ValueError(f"chown_owner must look like 'user' or 'user:group', got {v!r}")
        return v

    @property
    def tools_path(self) -> Path:
        return (self.base_dir / self.tools_dir).resolve()

    @property
    def logs_path(self) -> Path:
        return (self.base_dir / self.logs_dir).resolve()
