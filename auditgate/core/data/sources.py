"""
Default tool sources.

Plain data, validated into ``ToolSource`` models by the settings
layer. Operators override the whole list with ``sources:`` in
auditgate.yml.
"""

from __future__ import annotations

_GITHUB = "https://github.com"

DEFAULT_SOURCES: list[dict[str, str]] = [
    {"name": "linux-exploit-suggester", "url": f"{_GITHUB}/mzet-/linux-exploit-suggester"},
    {"name": "lynis", "url": f"{_GITHUB}/CISOfy/lynis"},
    {"name": "so-check", "url": f"{_GITHUB}/bcoles/so-check"},
    {"name": "uptux", "url": f"{_GITHUB}/initstring/uptux"},
    {"name": "lunar", "url": f"{_GITHUB}/lateralblast/lunar"},
    {"name": "linux-smart-enumeration", "url": f"{_GITHUB}/diego-treitos/linux-smart-enumeration"},
    {"name": "kernel-hardening-checker", "url": f"{_GITHUB}/a13xp0p0v/kernel-hardening-checker"},
    {"name": "jalesc", "url": f"{_GITHUB}/bcoles/jalesc"},
    {"name": "LinEnum", "url": f"{_GITHUB}/rebootuser/LinEnum"},
    {"name": "otseca", "url": f"{_GITHUB}/trimstray/otseca"},
    {"name": "checksec.sh", "url": f"{_GITHUB}/slimm609/checksec.sh"},
    {
        "name": "linpeas",
        "kind": "download",
        "filename": "linpeas.sh",
        "url": f"{_GITHUB}/carlospolop/PEASS-ng/releases/latest/download/linpeas.sh",
    },
]
