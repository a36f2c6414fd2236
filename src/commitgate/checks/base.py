"""Base class for all commit checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from commitgate.conf.schema import Configuration
from commitgate.vcs.message import CommitMessage
from commitgate.vcs.models import Commit

if TYPE_CHECKING:
    from commitgate.checks.issues import Issue


@dataclass(frozen=True)
class CheckContext:
    """Pass-through handle for checks that need more than the commit itself.

    The engine never inspects it.
    """

    root: Optional[Path] = None
    extras: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


class CommitCheck(ABC):
    """
    Abstract base class for all commit checks.

    A check is stateless: ``check`` depends only on its arguments, returns a
    lazy iterator of issues, and yields nothing when the commit complies.
    Policy violations are never raised as exceptions.

    ``name`` identifies the check in the ``[checks]`` directives, selects its
    ``[checks "NAME"]`` section, and tags every issue it reports.
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    def check(
        self,
        commit: Commit,
        message: CommitMessage,
        configuration: Configuration,
        context: Optional[CheckContext] = None,
    ) -> Iterator["Issue"]:
        """Yield the issues *commit* raises under this check."""

    # Stateless: every instance of a check class is interchangeable

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash((type(self).__module__, type(self).__qualname__))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
