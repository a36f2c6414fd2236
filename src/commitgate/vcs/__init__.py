"""Commit and diff model, diff text parsing, commit loading."""

from commitgate.vcs.diff_parser import DiffParseError, DiffParser
from commitgate.vcs.loader import CommitLoadError, commit_from_dict, load_commit, load_commits
from commitgate.vcs.message import CommitMessage, parse_message
from commitgate.vcs.models import (
    Author,
    BinaryHunk,
    BinaryPatch,
    Commit,
    CommitMetadata,
    Diff,
    FileType,
    Hash,
    Hunk,
    Patch,
    Range,
    Status,
    TextualPatch,
)

__all__ = [
    "Author",
    "BinaryHunk",
    "BinaryPatch",
    "Commit",
    "CommitLoadError",
    "CommitMessage",
    "CommitMetadata",
    "Diff",
    "DiffParseError",
    "DiffParser",
    "FileType",
    "Hash",
    "Hunk",
    "Patch",
    "Range",
    "Status",
    "TextualPatch",
    "commit_from_dict",
    "load_commit",
    "load_commits",
    "parse_message",
]
