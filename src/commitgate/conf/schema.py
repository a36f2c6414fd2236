"""Configuration schema — typed, read-only views over the parsed sections."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from commitgate.conf import ini
from commitgate.conf.ini import ParseError


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


SEVERITY_ORDER: dict[str, int] = {
    "warning": 0,
    "error": 1,
}


def _rank(severity: str) -> int:
    return SEVERITY_ORDER.get(getattr(severity, "value", severity), 0)


def severity_at_or_above(severity: str, threshold: str) -> bool:
    """Return True if *severity* is at or above *threshold*."""
    return _rank(severity) >= _rank(threshold)


_SIZE_RE = re.compile(r"^(?P<amount>\d+)\s*(?P<unit>[bkmBKM]?)$")
_SIZE_UNITS = {"": 1, "b": 1, "k": 1024, "m": 1024 * 1024}

_EMPTY: Mapping[str, str] = MappingProxyType({})


def parse_size(text: str) -> int:
    """Parse ``123``, ``1b``, ``4k`` or ``2m`` into a number of bytes."""
    m = _SIZE_RE.match(text.strip())
    if m is None:
        raise ParseError(f"invalid size {text!r}, expected a number with optional b/k/m suffix")
    return int(m.group("amount")) * _SIZE_UNITS[m.group("unit").lower()]


def _split_names(value: str) -> Tuple[str, ...]:
    return tuple(n.strip() for n in value.split(",") if n.strip())


@dataclass(frozen=True)
class GeneralConfiguration:
    project: Optional[str] = None
    extras: Mapping[str, str] = field(default_factory=lambda: _EMPTY)


@dataclass(frozen=True)
class BinaryConfiguration:
    """Ordered ``(pattern, limit)`` pairs; the first full match wins."""

    limits: Tuple[Tuple[re.Pattern[str], int], ...] = ()

    @classmethod
    def parse(cls, section: Mapping[str, str]) -> "BinaryConfiguration":
        limits = []
        for pattern, size in section.items():
            try:
                compiled = re.compile(pattern)
            except re.error as exc:
                raise ParseError(f"invalid binary file pattern {pattern!r}: {exc}") from exc
            limits.append((compiled, parse_size(size)))
        return cls(tuple(limits))

    def limit_for(self, path: str) -> Optional[int]:
        for pattern, limit in self.limits:
            if pattern.fullmatch(path):
                return limit
        return None


@dataclass(frozen=True)
class ChecksConfiguration:
    error: Tuple[str, ...] = ()
    warning: Tuple[str, ...] = ()
    binary: BinaryConfiguration = field(default_factory=BinaryConfiguration)

    @property
    def enabled(self) -> Tuple[str, ...]:
        return self.error + tuple(n for n in self.warning if n not in self.error)

    def severity_of(self, name: str) -> Optional[Severity]:
        if name in self.error:
            return Severity.ERROR
        if name in self.warning:
            return Severity.WARNING
        return None


@dataclass(frozen=True)
class Configuration:
    """Parsed configuration. Read-only once built."""

    general: GeneralConfiguration = field(default_factory=GeneralConfiguration)
    checks: ChecksConfiguration = field(default_factory=ChecksConfiguration)
    sections: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: _EMPTY)

    @classmethod
    def parse(cls, lines: Iterable[str]) -> "Configuration":
        raw = ini.parse(lines)
        sections: Dict[str, Mapping[str, str]] = {
            name: MappingProxyType(dict(entries)) for name, entries in raw.items()
        }

        general_section = dict(sections.get("general", _EMPTY))
        project = general_section.pop("project", None)
        general = GeneralConfiguration(project=project, extras=MappingProxyType(general_section))

        checks_section = sections.get("checks", _EMPTY)
        error = _split_names(checks_section.get("error", ""))
        warning = _split_names(checks_section.get("warning", ""))
        both = sorted(set(error) & set(warning))
        if both:
            raise ParseError(f"check(s) listed as both error and warning: {', '.join(both)}")

        binary = BinaryConfiguration.parse(sections.get(ini.section_key("checks", "binary"), _EMPTY))

        return cls(
            general=general,
            checks=ChecksConfiguration(error=error, warning=warning, binary=binary),
            sections=MappingProxyType(sections),
        )

    def get(self, check_name: str) -> Mapping[str, str]:
        """The ``[checks "NAME"]`` section, or an empty mapping."""
        return self.sections.get(ini.section_key("checks", check_name), _EMPTY)


def parse(lines: Iterable[str]) -> Configuration:
    return Configuration.parse(lines)
