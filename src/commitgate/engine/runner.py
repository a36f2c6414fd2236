"""Core check engine — runs the enabled checks over commits.

Checks never see each other's results. Issues from one check come out in
diff and patch order; the order between checks follows the ``[checks]``
directives but callers should not depend on it.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, List, Optional, Sequence, Tuple

from commitgate.checks.base import CheckContext
from commitgate.checks.issues import Issue
from commitgate.checks.registry import CheckRegistry
from commitgate.conf.schema import Configuration, Severity, severity_at_or_above
from commitgate.engine.aggregator import apply_severity, deduplicate
from commitgate.engine.models import CheckReport
from commitgate.vcs.message import CommitMessage
from commitgate.vcs.models import Commit

logger = logging.getLogger(__name__)


class CheckError(Exception):
    """Raised when a check fails for a reason other than a policy violation."""


def iter_issues(
    commit: Commit,
    message: CommitMessage,
    configuration: Configuration,
    registry: CheckRegistry,
    context: Optional[CheckContext] = None,
) -> Iterator[Issue]:
    """Lazily yield the issues of every enabled check, severity applied."""
    for check in registry.enabled_checks(configuration):
        try:
            issues = iter(check.check(commit, message, configuration, context))
            while True:
                try:
                    issue = next(issues)
                except StopIteration:
                    break
                yield apply_severity(issue, configuration)
        except Exception as exc:
            raise CheckError(
                f"Check {check.name!r} failed on commit {commit.hash.abbreviate()}: {exc}"
            ) from exc


def first_error(
    commit: Commit,
    message: CommitMessage,
    configuration: Configuration,
    registry: CheckRegistry,
    context: Optional[CheckContext] = None,
) -> Optional[Issue]:
    """Return the first ERROR issue, consuming no further than needed."""
    for issue in iter_issues(commit, message, configuration, registry, context):
        if severity_at_or_above(issue.severity, Severity.ERROR):
            return issue
    return None


def _until_first_error(issues: Iterator[Issue]) -> Iterator[Issue]:
    for issue in issues:
        yield issue
        if severity_at_or_above(issue.severity, Severity.ERROR):
            return


def run(
    commit: Commit,
    message: CommitMessage,
    configuration: Configuration,
    registry: CheckRegistry,
    context: Optional[CheckContext] = None,
    *,
    fail_fast: bool = False,
) -> CheckReport:
    """Run every enabled check over *commit*. Returns a CheckReport.

    With ``fail_fast`` the checks are consumed only up to the first ERROR;
    warnings seen before it are kept in the report.
    """
    start = time.perf_counter()
    checks_run = [c.name for c in registry.enabled_checks(configuration)]

    found = iter_issues(commit, message, configuration, registry, context)
    if fail_fast:
        found = _until_first_error(found)
    issues = deduplicate(found)
    blocked = any(severity_at_or_above(i.severity, Severity.ERROR) for i in issues)

    elapsed = (time.perf_counter() - start) * 1000
    logger.debug(
        "Commit %s: %d issue(s) from %s in %.1fms",
        commit.hash.abbreviate(), len(issues), ", ".join(checks_run) or "no checks", elapsed,
    )
    return CheckReport(
        commit=commit,
        issues=issues,
        checks_run=checks_run,
        blocked=blocked,
        duration_ms=round(elapsed, 2),
    )


def run_all(
    items: Sequence[Tuple[Commit, CommitMessage]],
    configuration: Configuration,
    registry: CheckRegistry,
    context: Optional[CheckContext] = None,
    *,
    max_workers: int = 1,
) -> List[CheckReport]:
    """Run the checks over many commits. Reports come back in input order.

    With ``max_workers > 1`` commits are checked on a thread pool; checks and
    commits are immutable so no locking is needed.
    """
    # Fail on unknown checks before any work is scheduled
    registry.enabled_checks(configuration)

    if max_workers <= 1 or len(items) <= 1:
        return [run(c, m, configuration, registry, context) for c, m in items]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(lambda item: run(item[0], item[1], configuration, registry, context), items))
