"""
Download adapter — fetch a single-file tool over HTTPS.

Used for tools distributed as a release asset rather than a git tree
(linpeas.sh). The file is written to a temporary sibling, made
owner-only, then moved into place so a partial download never
replaces a good copy.
"""

from __future__ import annotations

import logging
import os
import shutil
import urllib.request
from pathlib import Path

from auditgate import __version__
from auditgate.adapters.base import Adapter, ExecutionContext
from auditgate.core.models.action import Receipt

logger = logging.getLogger(__name__)

TOOL_FILE_MODE = 0o700


class DownloadAdapter(Adapter):
    """HTTP(S) file download.

    Action params:
        url (str): Source URL.
        dest (str): Destination file path.
        timeout (int): Timeout in seconds (default: 60).
    """

    @property
    def name(self) -> str:
        return "download"

    def is_available(self) -> bool:
        return True  # urllib ships with the interpreter

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        url = context.action.params.get("url", "")
        if not url.startswith(("https://", "http://")):
            return False, f"Unsupported URL: {url!r}"
        if not context.action.params.get("dest"):
            return False, "Missing required param: 'dest'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        url = context.action.params["url"]
        dest = Path(context.action.params["dest"])
        timeout = context.action.params.get("timeout", 60)
        partial = dest.with_name(dest.name + ".part")

        req = urllib.request.Request(url, headers={"User-Agent": f"auditgate/{__version__}"})
        try:
            fd = os.open(partial, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOOL_FILE_MODE)
            with os.fdopen(fd, "wb") as out, urllib.request.urlopen(req, timeout=timeout) as resp:
                shutil.copyfileobj(resp, out)
            os.chmod(partial, TOOL_FILE_MODE)
            os.replace(partial, dest)
        except Exception as e:
            partial.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Download failed: {e}",
                metadata={"url": url, "dest": str(dest)},
            )

        size = dest.stat().st_size
        logger.debug("Downloaded %s (%d bytes) to %s", url, size, dest)
        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=f"Downloaded {size} bytes to {dest}",
            metadata={"url": url, "dest": str(dest), "size": size},
        )
