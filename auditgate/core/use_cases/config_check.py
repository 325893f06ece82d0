"""
Config check use case — validate auditgate.yml and report issues.

Besides schema validation, this flags the permissive side of the
substring whitelist: tokens short enough to match almost anything, and
catalog identifiers admitted by a token other than their own name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from auditgate.core.config.loader import ConfigError, find_settings_file, load_settings
from auditgate.core.data.catalog import PRIVILEGED_CATALOG, UNPRIVILEGED_CATALOG
from auditgate.core.models.settings import AuditSettings
from auditgate.core.policy.whitelist import WhitelistSet, matching_entry

_SHORT_TOKEN = 4


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    settings: AuditSettings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "tools_dir": str(self.settings.tools_path) if self.settings else None,
            "logs_dir": str(self.settings.logs_path) if self.settings else None,
            "whitelist": self.settings.whitelist if self.settings else [],
            "whitelist_strict": self.settings.whitelist_strict if self.settings else False,
            "source_count": len(self.settings.sources) if self.settings else 0,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate settings and report issues.

    Args:
        config_path: Optional explicit path to auditgate.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_settings_file()
    result.config_path = config_path

    try:
        settings = load_settings(config_path, search=False)
        result.settings = settings
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    if config_path is None:
        result.warnings.append("No auditgate.yml found; using built-in defaults.")

    if not settings.whitelist:
        result.warnings.append("Whitelist is empty; no tool will run automatically.")

    names = [s.name for s in settings.sources]
    dupes = {n for n in names if names.count(n) > 1}
    if dupes:
        result.errors.append(f"Duplicate source names: {', '.join(sorted(dupes))}")

    if not settings.whitelist_strict:
        for token in settings.whitelist:
            if len(token) < _SHORT_TOKEN:
                result.warnings.append(
                    f"Whitelist token '{token}' is very short and matches any identifier "
                    "containing it. Consider whitelist_strict: true."
                )

    whitelist = WhitelistSet.of(settings.whitelist, strict=settings.whitelist_strict)
    identifiers = sorted({e.identifier for e in (*UNPRIVILEGED_CATALOG, *PRIVILEGED_CATALOG)})
    for identifier in identifiers:
        token = matching_entry(identifier, whitelist)
        if token is not None and token != identifier:
            result.warnings.append(
                f"Catalog tool '{identifier}' is admitted by substring token '{token}'."
            )

    for token in settings.whitelist:
        if not any(token in identifier for identifier in identifiers):
            result.warnings.append(f"Whitelist token '{token}' matches no catalog tool.")

    result.valid = len(result.errors) == 0
    return result
