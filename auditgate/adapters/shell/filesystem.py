"""
Filesystem adapter — permission and ownership operations.

Provides a receipt-returning interface for the directory and
permission changes the engine makes, so they can be dry-run and
reported like every other side effect.
"""

from __future__ import annotations

import grp
import logging
import os
import pwd
from pathlib import Path

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Receipt

logger = logging.getLogger(__name__)

PRIVATE_DIR_MODE = 0o700


def parse_owner(owner: str) -> tuple[int, int]:
    """Resolve ``user[:group]`` (names or numeric ids) to ``(uid, gid)``.

    A missing group yields gid -1 (leave unchanged).

    Raises:
        KeyError: If a user or group name is unknown.
    """
    user, _, group = owner.partition(":")
    uid = int(user) if user.isdigit() else pwd.getpwnam(user).pw_uid
    if not group:
        return uid, -1
    gid = int(group) if group.isdigit() else grp.getgrnam(group).gr_gid
    return uid, gid


class FilesystemAdapter(Adapter):
    """Directory and permission operations with receipts.

    Action params:
        operation (str): One of 'mkdir_private', 'chmod_tree', 'chown_tree'.
        path (str): Target path.
        mode (int): Permission bits (for 'chmod_tree', default 0o700).
        owner (str): ``user[:group]`` (for 'chown_tree').
    """

    _OPERATIONS = {"mkdir_private", "chmod_tree", "chown_tree"}

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True  # filesystem is always available

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in self._OPERATIONS:
            return False, f"Unknown operation '{operation}'. Valid: {', '.join(sorted(self._OPERATIONS))}"

        if not context.action.params.get("path", ""):
            return False, "Missing required param: 'path'"

        if operation == "chown_tree" and not context.action.params.get("owner"):
            return False, "Missing required param: 'owner' for chown_tree operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]
        target = Path(context.action.params["path"])

        try:
            if operation == "mkdir_private":
                return self._mkdir_private(context, target)
            elif operation == "chmod_tree":
                return self._chmod_tree(context, target)
            elif operation == "chown_tree":
                return self._chown_tree(context, target)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except (OSError, KeyError, ValueError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Filesystem error: {e}",
                metadata={"operation": operation, "path": str(target)},
            )

    def _mkdir_private(self, ctx: ExecutionContext, target: Path) -> Receipt:
        # chmod every time: mkdir's mode is masked by umask and skipped if the dir exists
        target.mkdir(mode=PRIVATE_DIR_MODE, parents=True, exist_ok=True)
        target.chmod(PRIVATE_DIR_MODE)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Private directory ready: {target}",
            metadata={"path": str(target)},
        )

    def _chmod_tree(self, ctx: ExecutionContext, target: Path) -> Receipt:
        mode = int(ctx.action.params.get("mode", PRIVATE_DIR_MODE))
        count = 0
        for path in self._walk(target):
            if not path.is_symlink():
                path.chmod(mode)
                count += 1
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Mode {oct(mode)} applied to {count} paths under {target}",
            metadata={"path": str(target), "count": count},
        )

    def _chown_tree(self, ctx: ExecutionContext, target: Path) -> Receipt:
        owner = ctx.action.params["owner"]
        uid, gid = parse_owner(owner)
        count = 0
        errors: list[str] = []
        for path in self._walk(target):
            try:
                os.chown(path, uid, gid, follow_symlinks=False)
                count += 1
            except OSError as e:
                errors.append(f"{path}: {e.strerror}")

        if errors:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"chown {owner} failed on {len(errors)} paths (first: {errors[0]})",
                metadata={"path": str(target), "count": count},
            )
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=f"Owner {owner} applied to {count} paths under {target}",
            metadata={"path": str(target), "count": count},
        )

    @staticmethod
    def _walk(target: Path):
        """Yield ``target`` and, for directories, everything beneath it."""
        if not target.exists() and not target.is_symlink():
            raise FileNotFoundError(f"No such file or directory: {target}")
        yield target
        if target.is_dir() and not target.is_symlink():
            for root, dirs, files in os.walk(target):
                for name in dirs + files:
                    yield Path(root) / name
