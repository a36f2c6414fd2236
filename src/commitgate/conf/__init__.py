"""Configuration parsing, schema, loading, and defaults."""

from commitgate.conf.ini import ParseError
from commitgate.conf.loader import ConfigError, load_config
from commitgate.conf.schema import (
    BinaryConfiguration,
    ChecksConfiguration,
    Configuration,
    GeneralConfiguration,
    Severity,
    parse,
    parse_size,
    severity_at_or_above,
)

__all__ = [
    "BinaryConfiguration",
    "ChecksConfiguration",
    "ConfigError",
    "Configuration",
    "GeneralConfiguration",
    "ParseError",
    "Severity",
    "load_config",
    "parse",
    "parse_size",
    "severity_at_or_above",
]
