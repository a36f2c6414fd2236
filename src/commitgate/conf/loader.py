"""Locate and load the configuration file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from commitgate.conf.ini import ParseError
from commitgate.conf.schema import Configuration

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(".commitgate") / "conf"


class ConfigError(Exception):
    """Raised when the config file is missing, unreadable, or malformed."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = root / CONFIG_PATH
    return candidate if candidate.is_file() else None


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc


def load_config(root: Path, config_override: Optional[str] = None) -> Configuration:
    """Load and validate the configuration. No file means no checks enabled."""
    config_path = find_config_file(root, config_override)
    if config_path is None:
        logger.debug("No configuration under %s, using defaults", root)
        return Configuration()

    try:
        conf = Configuration.parse(_read_lines(config_path))
    except ParseError as exc:
        raise ConfigError(f"Failed to parse {config_path}: {exc}") from exc

    logger.debug("Loaded %s: enabled checks %s", config_path, ", ".join(conf.checks.enabled) or "none")
    return conf
