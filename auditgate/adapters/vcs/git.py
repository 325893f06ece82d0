"""
Git adapter — fetch and update tool trees.

Only the two operations the tool fetcher needs: a shallow clone of a
new source and a fast-forward-only pull of an existing one. Uses the
git CLI — never raw API calls.
"""

from __future__ import annotations

import logging
import shutil
import subprocess

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GitAdapter(Adapter):
    """Git clone / pull for tool sources.

    Action params:
        operation (str): 'clone' or 'pull'.
        url (str): Repository URL (for 'clone').
        dest (str): Destination directory.
        timeout (int): Timeout in seconds (default: 300).
    """

    @property
    def name(self) -> str:
        return "git"

    def is_available(self) -> bool:
        return shutil.which("git") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if operation not in {"clone", "pull"}:
            return False, f"Unknown operation '{operation}'. Valid: clone, pull"

        if not context.action.params.get("dest"):
            return False, "Missing required param: 'dest'"

        if operation == "clone" and not context.action.params.get("url"):
            return False, "Missing required param: 'url' for clone operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]
        dest = context.action.params["dest"]
        timeout = context.action.params.get("timeout", 300)

        if operation == "clone":
            args = ["clone", "--depth", "1", context.action.params["url"], dest]
            cwd = None
        else:
            args = ["pull", "--ff-only"]
            cwd = dest

        try:
            output = self._git(args, cwd, timeout)
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"git {operation} timed out after {timeout}s",
                metadata={"dest": dest},
            )
        except (OSError, RuntimeError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Git error: {e}",
                metadata={"dest": dest},
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=output.strip(),
            metadata={"operation": operation, "dest": dest},
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _git(self, args: list[str], cwd: str | None, timeout: int) -> str:
        """Run a git command and return stdout."""
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        if result.returncode != 0:
            raise RuntimeError(result.stderr.strip() or f"git {args[0]} failed")
        return result.stdout
