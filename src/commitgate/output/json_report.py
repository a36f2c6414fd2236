"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from commitgate.checks.issues import Issue
from commitgate.engine.models import CheckReport


def issue_to_dict(issue: Issue) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "commit": issue.commit.hash.hex,
        "check": issue.check.name,
        "severity": issue.severity.value,
    }
    for name in ("path", "file_size", "limited_file_size"):
        if hasattr(issue, name):
            data[name] = getattr(issue, name)
    data["description"] = issue.description
    return data


def to_dict(reports: Sequence[CheckReport]) -> Dict[str, Any]:
    """Convert check reports to a JSON-serialisable dict."""
    issues: List[Dict[str, Any]] = [issue_to_dict(i) for r in reports for i in r.issues]
    return {
        "version": "1.0",
        "commits": [r.commit.hash.hex for r in reports],
        "total_issues": len(issues),
        "blocked": any(r.blocked for r in reports),
        "issues": issues,
        "duration_ms": round(sum(r.duration_ms for r in reports), 2),
    }


def render(reports: Sequence[CheckReport]) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(reports), indent=2)
