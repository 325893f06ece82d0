"""
Tests for CLI commands — run, catalog, whitelist, config check, and global options.
"""

import json
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from auditgate.main import cli


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "auditgate.yml"
    path.write_text(
        textwrap.dedent("""\
            whitelist: [lynis, LinEnum, linux-exploit-suggester]
            sources: []
        """)
    )
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "audit tools" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_run_help_lists_flags(self):
        result = CliRunner().invoke(cli, ["run", "--help"])
        assert result.exit_code == 0
        for flag in ("--dry-run", "--no-interactive", "--update", "--run-as-root", "--tools-only", "--skip-tools"):
            assert flag in result.output


class TestRunCommand:
    def test_dry_run_creates_nothing(self, tmp_path, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--dry-run", "--no-interactive", "--skip-tools"],
        )

        assert result.exit_code == 0, result.output
        assert "auditgate v0.1.0" in result.output
        assert "[dry-run]" in result.output
        assert not (tmp_path / "logs").exists()
        assert not (tmp_path / "tools").exists()

    def test_unknown_arguments_ignored(self, tmp_path, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--dry-run", "--no-interactive", "--skip-tools", "--bogus", "x"],
        )

        assert result.exit_code == 0, result.output
        assert not (tmp_path / "logs").exists()

    def test_unknown_argument_ends_flag_parsing(self, tmp_path, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--no-interactive", "--skip-tools", "--bogus", "--dry-run", "--json"],
        )

        assert result.exit_code == 0, result.output
        # --dry-run came after --bogus, so this was a real run
        assert (tmp_path / "logs").is_dir()
        assert "auditgate v0.1.0" in result.output

    def test_flags_after_unknown_argument_cannot_escalate(self, tmp_path, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--dry-run", "--skip-tools", "--bogus", "--run-as-root", "--no-interactive"],
        )

        assert result.exit_code == 0, result.output
        assert "[dry-run]" in result.output
        assert "(unprivileged checks)" in result.output
        assert not (tmp_path / "logs").exists()

    def test_bad_config_exits_1(self, tmp_path):
        path = tmp_path / "auditgate.yml"
        path.write_text("whitelist: [unclosed\n")

        result = CliRunner().invoke(cli, ["--config", str(path), "run", "--dry-run", "--no-interactive"])

        assert result.exit_code == 1
        assert "Invalid YAML" in result.output

    def test_tools_only_real_run(self, tmp_path, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--no-interactive", "--tools-only"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "tools").is_dir()
        assert (tmp_path / "logs").is_dir()
        assert list((tmp_path / "logs").iterdir()) == []


class TestWhitelistCommand:
    @pytest.mark.parametrize(
        "identifier, code",
        [
            ("lynis", 0),
            ("linux-exploit-suggester-2", 0),
            ("checksec.sh", 1),
        ],
    )
    def test_check_exit_codes(self, config_file, identifier, code):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "whitelist", "check", identifier])
        assert result.exit_code == code

    def test_check_strict_override(self, config_file):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "whitelist", "check", "--strict", "lynis-fake"],
        )
        assert result.exit_code == 1

    def test_list(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "whitelist", "list"])
        assert result.exit_code == 0
        assert "LinEnum" in result.output
        assert "substring match" in result.output


class TestCatalogCommand:
    def test_reports_presence(self, tmp_path, config_file):
        (tmp_path / "tools" / "lynis").mkdir(parents=True)
        (tmp_path / "tools" / "lunar").mkdir()

        result = CliRunner().invoke(cli, ["--config", str(config_file), "catalog", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        unpriv = {row["log_name"]: row for row in data["catalogs"]["unprivileged"]}
        priv = {row["log_name"]: row for row in data["catalogs"]["privileged"]}
        assert unpriv["lynis.log"]["present"] is True
        assert unpriv["lynis.log"]["whitelisted_by"] == "lynis"
        assert unpriv["les.log"]["present"] is False
        assert priv["lunar.log"]["present"] is True
        assert priv["lunar.log"]["whitelisted_by"] is None

    def test_human_output(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "catalog", "--unprivileged"])
        assert result.exit_code == 0
        assert "not present" in result.output
        assert "privileged:" not in result.output.replace("unprivileged:", "")


class TestConfigCheck:
    def test_valid_json(self, config_file):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "config", "check", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["source_count"] == 0

    def test_invalid(self, tmp_path):
        path = tmp_path / "auditgate.yml"
        path.write_text("chown_owner: ':'\n")

        result = CliRunner().invoke(cli, ["--config", str(path), "config", "check"])

        assert result.exit_code == 1
        assert "Configuration errors" in result.output
