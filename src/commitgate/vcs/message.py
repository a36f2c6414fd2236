"""Commit message model and version-tagged parsers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from commitgate.vcs.models import Commit

_TRAILER_RE = re.compile(r"^(?P<key>[A-Za-z][A-Za-z0-9-]*):\s+(?P<value>\S.*)$")


@dataclass(frozen=True)
class CommitMessage:
    title: str
    body: Tuple[str, ...] = ()
    trailers: Tuple[Tuple[str, str], ...] = ()

    def trailer_values(self, key: str) -> List[str]:
        """Values of every trailer named *key* (case-insensitive)."""
        return [v for k, v in self.trailers if k.lower() == key.lower()]


def _strip_blank(lines: Sequence[str]) -> List[str]:
    out = list(lines)
    while out and not out[0].strip():
        out.pop(0)
    while out and not out[-1].strip():
        out.pop()
    return out


def _parse_v1(lines: Sequence[str]) -> CommitMessage:
    """Title line, free-form body, and an optional trailing block of trailers."""
    lines = _strip_blank(lines)
    if not lines:
        return CommitMessage(title="")

    title, rest = lines[0].strip(), _strip_blank(lines[1:])

    # Trailers: the last paragraph, when every line in it is ``Key: value``
    trailers: List[Tuple[str, str]] = []
    split = len(rest)
    while split > 0 and rest[split - 1].strip():
        split -= 1
    last_paragraph = rest[split:]
    if last_paragraph and all(_TRAILER_RE.match(l.strip()) for l in last_paragraph):
        for l in last_paragraph:
            m = _TRAILER_RE.match(l.strip())
            assert m is not None
            trailers.append((m.group("key"), m.group("value").strip()))
        rest = _strip_blank(rest[:split])

    return CommitMessage(title=title, body=tuple(rest), trailers=tuple(trailers))


PARSERS: Dict[str, Callable[[Sequence[str]], CommitMessage]] = {
    "v1": _parse_v1,
}


def parse_message(commit: Commit, version: str = "v1") -> CommitMessage:
    """Parse *commit*'s message with the parser registered for *version*."""
    try:
        parser = PARSERS[version]
    except KeyError:
        raise ValueError(f"Unknown commit message parser version: {version!r}") from None
    return parser(commit.message)
