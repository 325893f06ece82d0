"""
Tests for the privilege router state machine.
"""

import pytest

from auditgate.core.engine.router import (
    CONFIRM_RUN_AS_ROOT_QUESTION,
    ENABLE_PRIVILEGED_QUESTION,
    PrivilegeRouter,
    RouteState,
)
from auditgate.core.models.catalog import ToolCatalogEntry
from auditgate.core.policy.confirm import ScriptedResponder
from auditgate.core.policy.whitelist import WhitelistSet

UNPRIV = (ToolCatalogEntry(identifier="alpha", command="echo a", log_name="alpha.log"),)
PRIV = (
    ToolCatalogEntry(
        identifier="beta",
        command="echo b",
        log_name="beta-priv.log",
        requires_privilege=True,
    ),
)


def _router(elevated: bool, replies=()) -> tuple[PrivilegeRouter, ScriptedResponder]:
    responder = ScriptedResponder(replies)
    router = PrivilegeRouter(
        responder=responder,
        is_elevated=lambda: elevated,
        unprivileged_catalog=UNPRIV,
        privileged_catalog=PRIV,
    )
    return router, responder


# ── Routing decisions ───────────────────────────────────────────────


class TestRoute:
    def test_not_elevated_is_unprivileged(self, make_config):
        router, responder = _router(elevated=False)

        decision = router.route(make_config(run_privileged=True, interactive=True))

        assert decision.path is RouteState.UNPRIVILEGED
        assert decision.elevated is False
        assert decision.prompted is False
        assert RouteState.CONFIRM_ESCALATION not in decision.trail
        assert responder.prompts == []

    def test_elevated_not_privileged_non_interactive(self, make_config):
        router, responder = _router(elevated=True, replies=["yes"])

        decision = router.route(make_config(run_privileged=False, interactive=False))

        assert decision.path is RouteState.UNPRIVILEGED
        assert decision.prompted is False
        assert responder.prompts == []

    def test_elevated_privileged_non_interactive(self, make_config):
        router, responder = _router(elevated=True, replies=["no"])

        decision = router.route(make_config(run_privileged=True, interactive=False))

        assert decision.path is RouteState.PRIVILEGED
        assert decision.privileged
        assert decision.prompted is False
        assert responder.prompts == []
        assert decision.trail == [
            RouteState.START,
            RouteState.DETERMINE_PRIVILEGE,
            RouteState.PRIVILEGED,
        ]

    @pytest.mark.parametrize("reply, expected", [("y", RouteState.PRIVILEGED), ("n", RouteState.UNPRIVILEGED)])
    def test_elevated_not_privileged_interactive(self, make_config, reply, expected):
        router, responder = _router(elevated=True, replies=[reply])

        decision = router.route(make_config(run_privileged=False, interactive=True))

        assert decision.path is expected
        assert decision.prompted is True
        assert responder.prompts[0].startswith(ENABLE_PRIVILEGED_QUESTION)

    @pytest.mark.parametrize("reply, expected", [("yes", RouteState.PRIVILEGED), ("", RouteState.UNPRIVILEGED)])
    def test_run_as_root_interactive_confirms(self, make_config, reply, expected):
        router, responder = _router(elevated=True, replies=[reply])

        decision = router.route(make_config(run_privileged=True, interactive=True))

        assert decision.path is expected
        assert RouteState.CONFIRM_ESCALATION in decision.trail
        assert responder.prompts[0].startswith(CONFIRM_RUN_AS_ROOT_QUESTION)

    def test_closed_channel_declines(self, make_config):
        router, _ = _router(elevated=True, replies=[None])

        decision = router.route(make_config(run_privileged=True, interactive=True))

        assert decision.path is RouteState.UNPRIVILEGED


# ── Running the selected checklist ──────────────────────────────────


class TestRun:
    def test_privileged_catalog_selected(self, make_session, make_tool, recorder):
        make_tool("alpha")
        make_tool("beta")
        router, _ = _router(elevated=True)
        session = make_session(run_privileged=True, dry_run=True)

        decision, outcomes = router.run(session, recorder, WhitelistSet.of(["alpha", "beta"]))

        assert decision.privileged
        assert decision.trail[-1] is RouteState.DONE
        assert [o.log_name for o in outcomes] == ["beta-priv.log"]

    def test_declined_escalation_runs_unprivileged(self, make_session, make_tool, recorder):
        make_tool("alpha")
        make_tool("beta")
        router, _ = _router(elevated=True)
        session = make_session(run_privileged=False, dry_run=True)

        decision, outcomes = router.run(session, recorder, WhitelistSet.of(["alpha", "beta"]))

        assert not decision.privileged
        assert [o.log_name for o in outcomes] == ["alpha.log"]
        assert outcomes[0].status == "planned"
