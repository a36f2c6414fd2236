"""Check registry — explicit name to check table, filtered by configuration."""

from __future__ import annotations

from typing import Dict, List, Optional

from commitgate.checks.base import CommitCheck
from commitgate.conf.schema import Configuration


class UnknownCheckError(Exception):
    """Raised when the configuration enables a check nobody registered."""


class CheckRegistry:
    """Central store for all commit checks."""

    def __init__(self) -> None:
        self._checks: Dict[str, CommitCheck] = {}

    # ---- registration ----

    def register(self, check: CommitCheck) -> None:
        if not check.name:
            raise ValueError(f"{type(check).__name__} has no name")
        self._checks[check.name] = check

    def register_many(self, checks: list[CommitCheck]) -> None:
        for c in checks:
            self.register(c)

    # ---- queries ----

    @property
    def all_checks(self) -> List[CommitCheck]:
        return list(self._checks.values())

    @property
    def names(self) -> List[str]:
        return list(self._checks)

    def get(self, name: str) -> Optional[CommitCheck]:
        return self._checks.get(name)

    def enabled_checks(self, configuration: Configuration) -> List[CommitCheck]:
        """Checks named in ``[checks] error``/``warning``, in configuration order."""
        enabled: List[CommitCheck] = []
        for name in configuration.checks.enabled:
            check = self._checks.get(name)
            if check is None:
                known = ", ".join(sorted(self._checks)) or "none"
                raise UnknownCheckError(f"Unknown check {name!r} (known checks: {known})")
            enabled.append(check)
        return enabled


def build_registry() -> CheckRegistry:
    """Create a registry holding every built-in check."""
    from commitgate.checks.builtin import ALL_BUILTIN_CHECKS

    registry = CheckRegistry()
    registry.register_many(ALL_BUILTIN_CHECKS)
    return registry
