"""Check run result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from commitgate.checks.issues import Issue
from commitgate.conf.schema import Severity
from commitgate.vcs.models import Commit


@dataclass
class CheckReport:
    """Complete result of running the enabled checks over one commit."""

    commit: Commit
    issues: List[Issue] = field(default_factory=list)
    checks_run: List[str] = field(default_factory=list)
    blocked: bool = False
    duration_ms: float = 0.0

    @property
    def total_issues(self) -> int:
        return len(self.issues)

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]
