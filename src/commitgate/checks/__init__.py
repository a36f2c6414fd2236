"""Check contract, issues, registry, built-in checks."""

from commitgate.checks.base import CheckContext, CommitCheck
from commitgate.checks.issues import BinaryFileTooLargeIssue, Issue
from commitgate.checks.registry import CheckRegistry, UnknownCheckError, build_registry

__all__ = [
    "BinaryFileTooLargeIssue",
    "CheckContext",
    "CheckRegistry",
    "CommitCheck",
    "Issue",
    "UnknownCheckError",
    "build_registry",
]
