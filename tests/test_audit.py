"""
End-to-end tests for the audit use case — setup, routing, permissions.
"""

import json
import os
import stat
from datetime import datetime

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.engine.router import PrivilegeRouter, RouteState
from auditgate.core.models.catalog import ToolCatalogEntry
from auditgate.core.models.settings import AuditSettings, ToolSource
from auditgate.core.persistence.ledger import LEDGER_FILE
from auditgate.core.policy.confirm import ScriptedResponder
from auditgate.core.use_cases.audit import run_audit

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5)

UNPRIV = (
    ToolCatalogEntry(identifier="alpha", command="echo alpha", log_name="alpha.log"),
    ToolCatalogEntry(identifier="beta", command="echo beta >&2; exit 4", log_name="beta.log"),
    ToolCatalogEntry(identifier="rogue", command="echo rogue", log_name="rogue.log"),
    ToolCatalogEntry(identifier="ghost", command="echo ghost", log_name="ghost.log"),
)
PRIV = (
    ToolCatalogEntry(
        identifier="alpha",
        command="echo privileged",
        log_name="alpha-priv.log",
        requires_privilege=True,
    ),
)


def _router(elevated: bool = False, replies=()) -> PrivilegeRouter:
    return PrivilegeRouter(
        responder=ScriptedResponder(replies),
        is_elevated=lambda: elevated,
        unprivileged_catalog=UNPRIV,
        privileged_catalog=PRIV,
    )


def _run(settings, config, **kwargs):
    return run_audit(
        config,
        settings,
        registry=kwargs.pop("registry", AdapterRegistry.default()),
        router=kwargs.pop("router", _router()),
        hostname="testhost",
        now=FIXED_NOW,
        **kwargs,
    )


class TestRunAudit:
    def test_full_unprivileged_session(self, settings, make_config, make_tool):
        for name in ("alpha", "beta", "rogue"):
            make_tool(name)

        result = _run(settings, make_config(skip_tools=True))

        assert result.completed
        assert result.session_name == "testhost-20240102030405-audit"
        assert result.route.path is RouteState.UNPRIVILEGED
        assert [o.status for o in result.outcomes] == ["ok", "failed", "skipped", "skipped"]
        assert [o.reason for o in result.outcomes[2:]] == ["not-whitelisted", "not-present"]
        assert result.counts() == {"ok": 1, "failed": 1, "skipped": 2, "planned": 0}

        session_dir = settings.logs_path / result.session_name
        assert (session_dir / "beta.log").read_text() == "beta\n"
        ledger = (session_dir / LEDGER_FILE).read_text().splitlines()
        assert len(ledger) == 4

    def test_permission_invariant(self, settings, make_config, make_tool):
        for name in ("alpha", "beta"):
            make_tool(name)

        _run(settings, make_config(skip_tools=True))

        for root, dirs, files in os.walk(settings.logs_path):
            assert stat.S_IMODE(os.stat(root).st_mode) == 0o700, root
            for name in files:
                path = os.path.join(root, name)
                assert stat.S_IMODE(os.stat(path).st_mode) == 0o600, path
        assert stat.S_IMODE(settings.tools_path.stat().st_mode) == 0o700

    def test_tool_written_reports_are_private(self, settings, make_config, make_tool):
        make_tool("alpha")
        catalog = (
            ToolCatalogEntry(
                identifier="alpha",
                command="echo r > {audit_dir}/alpha.report",
                log_name="alpha.log",
            ),
        )
        router = PrivilegeRouter(
            responder=ScriptedResponder(),
            is_elevated=lambda: False,
            unprivileged_catalog=catalog,
            privileged_catalog=PRIV,
        )

        previous = os.umask(0o022)
        try:
            result = _run(settings, make_config(skip_tools=True), router=router)
        finally:
            os.umask(previous)

        assert result.outcomes[0].ok
        report = settings.logs_path / result.session_name / "alpha.report"
        assert report.read_text() == "r\n"
        assert stat.S_IMODE(report.stat().st_mode) == 0o600

    def test_dry_run_touches_nothing(self, tmp_path, make_config):
        settings = AuditSettings(base_dir=tmp_path, whitelist=["alpha"], sources=[])

        result = _run(settings, make_config(dry_run=True, skip_tools=True))

        assert result.completed
        assert list(tmp_path.iterdir()) == []
        assert all(o.status == "skipped" for o in result.outcomes)

    def test_dry_run_plans_present_tools(self, settings, make_config, make_tool):
        make_tool("alpha")

        result = _run(settings, make_config(dry_run=True, skip_tools=True))

        assert result.outcomes[0].status == "planned"
        assert not settings.logs_path.exists()

    def test_elevated_privileged_non_interactive(self, settings, make_config, make_tool):
        make_tool("alpha")

        result = _run(
            settings,
            make_config(run_privileged=True, skip_tools=True),
            router=_router(elevated=True),
        )

        assert result.route.privileged
        assert result.route.prompted is False
        assert [o.log_name for o in result.outcomes] == ["alpha-priv.log"]

    def test_elevated_declined_still_audits(self, settings, make_config, make_tool):
        make_tool("alpha")

        result = _run(
            settings,
            make_config(interactive=True, skip_tools=True),
            router=_router(elevated=True, replies=["n"]),
        )

        assert not result.route.privileged
        assert result.route.prompted is True
        assert result.outcomes[0].ok

    def test_tools_only_stops_before_checks(self, settings, make_config):
        result = _run(settings, make_config(tools_only=True))

        assert result.completed
        assert result.route is None
        assert result.outcomes == []
        assert not (settings.logs_path / result.session_name).exists()

    def test_missing_git_is_fatal(self, tmp_path, make_config):
        from auditgate.adapters.mock import MockAdapter

        settings = AuditSettings(
            base_dir=tmp_path,
            sources=[ToolSource(name="lynis", url="https://example.invalid/lynis.git")],
        )
        registry = AdapterRegistry.default()
        registry.register(MockAdapter("git", available=False))

        result = _run(settings, make_config(update_deps=True), registry=registry)

        assert not result.completed
        assert "git" in result.error
        assert result.to_dict() == {"error": result.error}

    def test_to_dict_is_json_serializable(self, settings, make_config, make_tool):
        make_tool("alpha")
        result = _run(settings, make_config(dry_run=True, skip_tools=True))

        data = json.loads(json.dumps(result.to_dict()))

        assert data["route"]["path"] == "unprivileged"
        assert data["counts"]["planned"] == 1


class TestSessionHeader:
    def test_describe_user(self):
        from auditgate.core.use_cases.audit import describe_user

        assert f"euid={os.geteuid()}" in describe_user()

    def test_describe_distribution(self):
        from auditgate.core.use_cases.audit import describe_distribution

        assert describe_distribution()
