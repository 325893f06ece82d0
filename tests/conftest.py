"""
Shared test fixtures and configuration.
"""

from datetime import datetime
from pathlib import Path

import pytest

from auditgate.adapters.registry import AdapterRegistry
from auditgate.core.engine.recorder import ExecutionRecorder
from auditgate.core.models.config import RunConfiguration
from auditgate.core.models.settings import AuditSettings
from auditgate.core.session import AuditSession

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture
def settings(tmp_path: Path) -> AuditSettings:
    """Settings rooted in a temporary directory, no tool sources."""
    return AuditSettings(
        base_dir=tmp_path,
        whitelist=["alpha", "beta", "gamma"],
        sources=[],
    )


@pytest.fixture
def make_config():
    """Factory for RunConfiguration; non-interactive unless told otherwise."""

    def _make(**overrides) -> RunConfiguration:
        values = {"interactive": False}
        values.update(overrides)
        return RunConfiguration(**values)

    return _make


@pytest.fixture
def make_session(settings: AuditSettings, make_config):
    """Factory for an AuditSession under the temporary logs directory."""

    def _make(**overrides) -> AuditSession:
        return AuditSession.create(
            make_config(**overrides),
            settings,
            hostname="testhost",
            now=FIXED_NOW,
        )

    return _make


@pytest.fixture
def registry() -> AdapterRegistry:
    """Registry wired with the real host adapters."""
    return AdapterRegistry.default()


@pytest.fixture
def recorder(registry: AdapterRegistry) -> ExecutionRecorder:
    return ExecutionRecorder(registry)


@pytest.fixture
def make_tool(settings: AuditSettings):
    """Create a fake tool directory (or file) under the tools directory."""

    def _make(name: str, kind: str = "dir") -> Path:
        target = settings.tools_path / name
        if kind == "dir":
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text("#!/bin/sh\necho fake\n")
        return target

    return _make
