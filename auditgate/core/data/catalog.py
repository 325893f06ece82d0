"""
Tool catalogs — the fixed, ordered checklists.

Two catalogs exist: one for unprivileged runs and one for runs with an
elevated identity. Order matters: entries are processed strictly in
sequence. Tools that are fetched but absent from the whitelist still
appear here so the operator sees them reported as present but not
auto-run.

Plain data. No logic beyond model construction.
"""

from __future__ import annotations

from auditgate.core.models.catalog import ToolCatalogEntry

UNPRIVILEGED_CATALOG: tuple[ToolCatalogEntry, ...] = (
    ToolCatalogEntry(
        identifier="linux-exploit-suggester",
        command="bash {tool}/linux-exploit-suggester.sh --checksec",
        log_name="les-checksec.log",
        description="Kernel hardening features (checksec mode)",
    ),
    ToolCatalogEntry(
        identifier="linux-exploit-suggester",
        command="bash {tool}/linux-exploit-suggester.sh",
        log_name="les.log",
        description="Candidate kernel exploits for this host",
    ),
    ToolCatalogEntry(
        identifier="lynis",
        command=(
            "{tool}/lynis --pentest --quick"
            " --log-file {audit_dir}/lynis-audit.log"
            " --report-file {audit_dir}/lynis.report"
            " audit system"
        ),
        log_name="lynis.log",
        description="Lynis system audit (pentest mode)",
    ),
    ToolCatalogEntry(
        identifier="so-check",
        command="bash {tool}/so-check.sh",
        log_name="so-check.log",
        description="Shared object search path issues",
    ),
    ToolCatalogEntry(
        identifier="linpeas.sh",
        kind="file",
        command="bash {tool}",
        log_name="linpeas.log",
        description="Privilege escalation enumeration",
    ),
    ToolCatalogEntry(
        identifier="LinEnum",
        command="bash {tool}/LinEnum.sh -t -r {audit_dir}/LinEnum-report",
        log_name="LinEnum.log",
        description="Local enumeration (thorough)",
    ),
    ToolCatalogEntry(
        identifier="linux-smart-enumeration",
        command="bash {tool}/lse.sh -i -l 1",
        log_name="lse.log",
        description="Linux smart enumeration, level 1",
    ),
    ToolCatalogEntry(
        identifier="uptux",
        requires_commands=("python3",),
        command="python3 {tool}/uptux.py",
        log_name="uptux.log",
        description="Privilege escalation checks (python)",
    ),
    ToolCatalogEntry(
        identifier="jalesc",
        command="bash {tool}/jalesc.sh",
        log_name="jalesc.log",
        description="Just another Linux exploit suggester",
    ),
)


PRIVILEGED_CATALOG: tuple[ToolCatalogEntry, ...] = (
    ToolCatalogEntry(
        identifier="lynis",
        command=(
            "{tool}/lynis --quick"
            " --log-file {audit_dir}/lynis-audit.log"
            " --report-file {audit_dir}/lynis.report"
            " audit system"
        ),
        log_name="lynis-priv.log",
        requires_privilege=True,
        chown_tree=True,   # lynis refuses to run from a tree not owned by the invoking user
        description="Lynis full system audit",
    ),
    ToolCatalogEntry(
        identifier="lunar",
        command="bash {tool}/lunar.sh -a",
        log_name="lunar.log",
        requires_privilege=True,
        description="Lunar security compliance audit",
    ),
    ToolCatalogEntry(
        identifier="kernel-hardening-checker",
        requires_commands=("python3",),
        command=(
            "python3 {tool}/bin/kernel-hardening-checker"
            ' -l /proc/cmdline -c "/boot/config-$(uname -r)"'
        ),
        log_name="kernel-hardening-checker.log",
        requires_privilege=True,
        description="Kernel config and cmdline hardening",
    ),
    ToolCatalogEntry(
        identifier="checksec.sh",
        command="bash {tool}/checksec --proc-all",
        log_name="checksec-proc-all.log",
        requires_privilege=True,
        description="Binary hardening of running processes",
    ),
)
