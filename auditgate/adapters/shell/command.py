"""
Shell command adapter — run a tool and tee its output to a log.

Output is streamed: each chunk the child writes is appended to the log
file and flushed as soon as it arrives, so a killed or hung tool never
loses what it already printed. The log file is owner-only from the
moment it is opened, and the tool itself runs under umask 077 so any
report files it creates are owner-only too.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Callable
from pathlib import Path

from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Receipt

logger = logging.getLogger(__name__)

LOG_FILE_MODE = 0o600
# Reports a tool writes next to its log get no group or world bits
TOOL_UMASK = 0o077


class ShellCommandAdapter(Adapter):
    """Execute a shell command, streaming combined output to a log file.

    Action params:
        command (str): The command line to execute.
        log_path (str): File receiving combined stdout/stderr.
        cwd (str): Override working directory (default: context.working_dir).
    """

    def __init__(self, echo: Callable[[str], None] | None = None):
        self._echo = echo

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command", "")
        if not command:
            return False, "Missing required param: 'command'"

        log_path = context.action.params.get("log_path", "")
        if not log_path:
            return False, "Missing required param: 'log_path'"

        if not Path(log_path).parent.is_dir():
            return False, f"Log directory does not exist: {Path(log_path).parent}"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command = context.action.params["command"]
        log_path = Path(context.action.params["log_path"])
        cwd = context.action.params.get("cwd", context.working_dir)

        logger.debug("Executing: %s (log=%s)", command, log_path)
        start = time.monotonic()

        try:
            fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, LOG_FILE_MODE)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Cannot open log file {log_path}: {e}",
                metadata={"command": command},
            )

        with os.fdopen(fd, "wb") as log:
            # O_CREAT's mode is ignored for a pre-existing file
            os.fchmod(log.fileno(), LOG_FILE_MODE)
            try:
                proc = subprocess.Popen(
                    command,
                    shell=True,
                    executable=shutil.which("bash"),
                    cwd=cwd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    umask=TOOL_UMASK,
                )
            except OSError as e:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Command failed to launch: {e}",
                    metadata={"command": command, "log_path": str(log_path)},
                )

            assert proc.stdout is not None
            with proc.stdout:
                for chunk in iter(proc.stdout.readline, b""):
                    log.write(chunk)
                    log.flush()
                    if self._echo is not None:
                        self._echo(chunk.decode("utf-8", errors="replace").rstrip("\n"))
            return_code = proc.wait()

        os.chmod(log_path, LOG_FILE_MODE)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if return_code == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                output=str(log_path),
                duration_ms=elapsed_ms,
                return_code=return_code,
                metadata={"command": command, "log_path": str(log_path)},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=f"Command exited with code {return_code}",
            duration_ms=elapsed_ms,
            return_code=return_code,
            metadata={"command": command, "log_path": str(log_path)},
        )
