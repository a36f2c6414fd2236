"""Issue data models."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

from commitgate.conf.schema import Severity
from commitgate.vcs.message import CommitMessage
from commitgate.vcs.models import Commit

if TYPE_CHECKING:
    from commitgate.checks.base import CommitCheck


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class Issue:
    """A policy violation, tied to the commit and check that produced it.

    Issues compare, sort and hash by ``key`` so callers can order and
    deduplicate them across checks and commits.
    """

    commit: Commit
    message: CommitMessage
    check: "CommitCheck"
    severity: Severity

    @property
    def key(self) -> Tuple[str, str, str]:
        """Ordering and deduplication key: (commit hash, check name, path)."""
        return (self.commit.hash.hex, self.check.name, getattr(self, "path", ""))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.key == other.key

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Issue):
            return NotImplemented
        return self.key < other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @property
    def description(self) -> str:
        return f"{self.check.name} check failed"


def format_size(size: int) -> str:
    if size >= 1024 * 1024 and size % (1024 * 1024) == 0:
        return f"{size // (1024 * 1024)}m"
    if size >= 1024 and size % 1024 == 0:
        return f"{size // 1024}k"
    return f"{size}b"


@dataclass(frozen=True, eq=False)
class BinaryFileTooLargeIssue(Issue):
    path: str
    file_size: int
    limited_file_size: int

    @property
    def description(self) -> str:
        return (
            f"Binary file {self.path} is {self.file_size} bytes, "
            f"limit is {format_size(self.limited_file_size)}"
        )
