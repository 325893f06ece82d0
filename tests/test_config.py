"""
Tests for the settings loader and the config check use case.
"""

import textwrap
from pathlib import Path

import pytest

from auditgate.core.config.loader import ConfigError, find_settings_file, load_settings
from auditgate.core.data.whitelist import DEFAULT_WHITELIST
from auditgate.core.use_cases.config_check import check_config


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "auditgate.yml"
    path.write_text(textwrap.dedent(body))
    return path


class TestLoadSettings:
    def test_minimal_file_uses_defaults(self, tmp_path):
        path = _write(tmp_path, "whitelist_strict: false\n")

        settings = load_settings(path)

        assert settings.whitelist == list(DEFAULT_WHITELIST)
        assert settings.tools_path == (tmp_path / "tools").resolve()
        assert settings.logs_path == (tmp_path / "logs").resolve()
        assert any(s.name == "lynis" for s in settings.sources)

    def test_empty_file(self, tmp_path):
        path = _write(tmp_path, "")
        assert load_settings(path).chown_owner == "0:0"

    def test_full_file(self, tmp_path):
        path = _write(
            tmp_path,
            """\
            base_dir: audit
            tools_dir: t
            logs_dir: l
            whitelist: [lynis]
            whitelist_strict: true
            chown_owner: "root:root"
            sources:
              - name: lynis
                url: https://example.invalid/lynis.git
              - name: linpeas
                url: https://example.invalid/linpeas.sh
                kind: download
                filename: linpeas.sh
            """,
        )

        settings = load_settings(path)

        assert settings.tools_path == (tmp_path / "audit" / "t").resolve()
        assert settings.logs_path == (tmp_path / "audit" / "l").resolve()
        assert settings.whitelist_strict is True
        assert [s.target_name for s in settings.sources] == ["lynis", "linpeas.sh"]

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = _write(tmp_path, "whitelist: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_non_mapping(self, tmp_path):
        path = _write(tmp_path, "- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    @pytest.mark.parametrize(
        "body",
        [
            'whitelist: ["lynis", ""]\n',
            'chown_owner: "root:"\n',
            "sources:\n  - name: x\n    url: y\n    kind: ftp\n",
        ],
    )
    def test_invalid_values(self, tmp_path, body):
        path = _write(tmp_path, body)
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)

    def test_no_file_no_search(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings(search=False)
        assert settings.tools_path == (tmp_path / "tools").resolve()


class TestFindSettingsFile:
    def test_walks_upward(self, tmp_path):
        path = _write(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_settings_file(nested) == path.resolve()


class TestCheckConfig:
    def test_valid(self, tmp_path):
        path = _write(tmp_path, "whitelist: [lynis, LinEnum]\n")

        result = check_config(path)

        assert result.valid
        assert result.errors == []

    def test_invalid_reported_not_raised(self, tmp_path):
        path = _write(tmp_path, "whitelist: 12\n")

        result = check_config(path)

        assert not result.valid
        assert result.errors

    def test_short_token_warns(self, tmp_path):
        path = _write(tmp_path, "whitelist: [so]\n")

        result = check_config(path)

        assert result.valid
        assert any("'so'" in w and "short" in w for w in result.warnings)

    def test_substring_admission_warns(self, tmp_path):
        path = _write(tmp_path, "whitelist: [check]\n")

        result = check_config(path)

        assert any("checksec" in w and "substring" in w for w in result.warnings)

    def test_duplicate_sources(self, tmp_path):
        path = _write(
            tmp_path,
            """\
            sources:
              - {name: lynis, url: a}
              - {name: lynis, url: b}
            """,
        )

        result = check_config(path)

        assert not result.valid
        assert "lynis" in result.errors[0]
