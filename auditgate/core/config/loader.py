"""
Configuration loader — reads auditgate.yml into AuditSettings.

The file is optional: without one, auditgate uses the built-in
whitelist and tool sources with ``tools/`` and ``logs/`` under the
current directory. Relative paths in the file resolve against the
directory that contains it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from auditgate.core.errors import ConfigError
from auditgate.core.models.settings import AuditSettings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "auditgate.yml"

__all__ = ["SETTINGS_FILE", "ConfigError", "find_settings_file", "load_settings"]


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for auditgate.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to auditgate.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, search: bool = True) -> AuditSettings:
    """Load and validate settings.

    Args:
        path: Explicit path to auditgate.yml.
        search: When no path is given, look for one upward from the cwd.

    Returns:
        Validated AuditSettings; defaults rooted at the cwd if no file exists.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_settings_file()

    if path is None:
        logger.debug("No %s found, using defaults", SETTINGS_FILE)
        return AuditSettings(base_dir=Path.cwd())

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # base_dir in the file is relative to the file itself
    base = Path(data.pop("base_dir", "."))
    data["base_dir"] = base if base.is_absolute() else (path.parent / base).resolve()

    try:
        settings = AuditSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug(
        "Loaded settings: %d whitelisted, %d sources",
        len(settings.whitelist),
        len(settings.sources),
    )
    return settings
