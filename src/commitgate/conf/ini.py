"""INI-like configuration text parser.

Grammar::

    # comment            ; comment
    [section]
    [section "subsection"]
    key = value

Keys are split from values at the first ``=``, so keys may hold regular
expressions (``.*\\.bin=1b``, ``[a-z]+\\.o=1k``). A line is a section header
only when it is bracketed and has no ``=`` outside its quoted subsection.
Keys keep their insertion order.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable

_SECTION_RE = re.compile(r'^\[\s*(?P<name>[A-Za-z0-9_.-]+)(?:\s+"(?P<sub>[^"]*)")?\s*\]$')
_QUOTED_RE = re.compile(r'"[^"]*"')


class ParseError(Exception):
    """Raised when configuration text violates the syntax or a value is invalid."""

    def __init__(self, message: str, line_no: int | None = None) -> None:
        self.line_no = line_no
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)


Section = Dict[str, str]


def section_key(name: str, sub: str | None = None) -> str:
    """Canonical key of a section: ``checks`` or ``checks "binary"``."""
    return f'{name} "{sub}"' if sub is not None else name


def _is_section_header(line: str) -> bool:
    # Regex keys such as [a-z]+\.bin=1k also start with a bracket
    return line.startswith("[") and line.endswith("]") and "=" not in _QUOTED_RE.sub("", line)


def parse(lines: Iterable[str]) -> Dict[str, Section]:
    """Parse configuration lines into ``{section key: {key: value}}``."""
    sections: Dict[str, Section] = {}
    current: Section | None = None

    for line_no, raw in enumerate(lines, 1):
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith(";"):
            continue

        if _is_section_header(line):
            m = _SECTION_RE.match(line)
            if m is None:
                raise ParseError(f"malformed section header {line!r}", line_no)
            current = sections.setdefault(section_key(m.group("name"), m.group("sub")), {})
            continue

        if current is None:
            raise ParseError(f"entry outside of any section: {line!r}", line_no)
        if "=" not in line:
            raise ParseError(f"expected 'key = value', got {line!r}", line_no)

        key, value = line.split("=", 1)
        key, value = key.strip(), value.strip()
        if not key:
            raise ParseError(f"empty key in {line!r}", line_no)
        if key in current:
            raise ParseError(f"duplicate key {key!r}", line_no)
        current[key] = value

    return sections
