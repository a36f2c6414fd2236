"""Issue deduplication and severity mapping."""

from __future__ import annotations

import dataclasses
from typing import Dict, Iterable, List, Tuple

from commitgate.checks.issues import Issue
from commitgate.conf.schema import Configuration


def apply_severity(issue: Issue, configuration: Configuration) -> Issue:
    """Re-tag *issue* with the severity its check is listed under in ``[checks]``.

    Issues from a check that is not listed keep the severity the check gave them.
    """
    severity = configuration.checks.severity_of(issue.check.name)
    if severity is None or severity == issue.severity:
        return issue
    return dataclasses.replace(issue, severity=severity)


def deduplicate(issues: Iterable[Issue]) -> List[Issue]:
    """Drop repeated issues.

    Dedup key: (commit hash, check name, path). The first occurrence wins;
    a merge commit touching the same file against two parents reports it once.
    """
    merged: Dict[Tuple[str, str, str], Issue] = {}
    for issue in issues:
        merged.setdefault(issue.key, issue)
    return list(merged.values())
