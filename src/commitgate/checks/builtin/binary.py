"""Binary file size check."""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from commitgate.checks.base import CheckContext, CommitCheck
from commitgate.checks.issues import BinaryFileTooLargeIssue
from commitgate.conf.schema import Configuration, Severity
from commitgate.vcs.message import CommitMessage
from commitgate.vcs.models import BinaryPatch, Commit

logger = logging.getLogger(__name__)


class BinaryCheck(CommitCheck):
    """Flag binary changes larger than the limit configured for their path.

    Limits come from the ``[checks "binary"]`` section; the first pattern
    that matches the post-change path decides. Paths matching no pattern are
    not limited. Deleted files are never flagged.
    """

    name = "binary"
    description = "Binary files must not exceed their configured size limit"

    def check(
        self,
        commit: Commit,
        message: CommitMessage,
        configuration: Configuration,
        context: Optional[CheckContext] = None,
    ) -> Iterator[BinaryFileTooLargeIssue]:
        limits = configuration.checks.binary
        for diff in commit.parent_diffs:
            for patch in diff.patches:
                if not isinstance(patch, BinaryPatch):
                    continue
                if patch.status.is_deleted:
                    continue

                path = patch.target_path
                assert path is not None
                limit = limits.limit_for(path)
                if limit is None:
                    continue

                size = patch.inflated_size
                if size > limit:
                    logger.debug("%s: %s is %d bytes, limit %d", commit.hash.abbreviate(), path, size, limit)
                    yield BinaryFileTooLargeIssue(
                        commit=commit,
                        message=message,
                        check=self,
                        severity=Severity.ERROR,
                        path=path,
                        file_size=size,
                        limited_file_size=limit,
                    )
