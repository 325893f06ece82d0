"""
RunConfiguration — the immutable mode flags for one invocation.

Built once at startup from defaults overridden by CLI flags, then
passed explicitly to every component. The model is frozen: assigning
an attribute after construction raises a ValidationError.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RunConfiguration(BaseModel):
    """Mode flags controlling what a session is allowed to do."""

    model_config = ConfigDict(frozen=True)

    dry_run: bool = False
    interactive: bool = True
    run_privileged: bool = False
    tools_only: bool = False
    skip_tools: bool = False
    update_deps: bool = False

    def describe(self) -> str:
        """One-line summary used in the startup banner."""
        return (
            f"dry-run={str(self.dry_run).lower()} "
            f"interactive={str(self.interactive).lower()} "
            f"update_deps={str(self.update_deps).lower()} "
            f"run_privileged={str(self.run_privileged).lower()} "
            f"tools_only={str(self.tools_only).lower()} "
            f"skip_tools={str(self.skip_tools).lower()}"
        )
