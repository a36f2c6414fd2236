"""Built-in checks."""

from commitgate.checks.base import CommitCheck
from commitgate.checks.builtin.binary import BinaryCheck

ALL_BUILTIN_CHECKS: list[CommitCheck] = [
    BinaryCheck(),
]

__all__ = ["ALL_BUILTIN_CHECKS", "BinaryCheck"]
