"""
Default whitelist.

Tools trusted for unattended execution. Vet a tool by hand before
adding it here or to ``whitelist:`` in auditgate.yml.
"""

from __future__ import annotations

DEFAULT_WHITELIST: tuple[str, ...] = (
    "linpeas.sh",
    "lynis",
    "LinEnum",
    "linux-exploit-suggester",
    "linux-smart-enumeration",
)
