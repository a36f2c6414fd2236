"""Load commits from YAML documents.

A document describes one commit::

    hash: 0123456789012345678901234567890123456789
    parents: [abcdefabcdefabcdefabcdefabcdefabcdefabcd]
    author: Jane Doe <jane@example.org>
    authored: 2024-03-01T10:00:00+00:00
    message: |
      Add firmware image
    diffs:
      - from: abcdefabcdefabcdefabcdefabcdefabcdefabcd
        to: 0123456789012345678901234567890123456789
        patch: |
          diff --git a/fw.bin b/fw.bin
          ...

``committer`` and ``committed`` default to the author values. ``from`` and
``to`` default to the parent and the commit hash.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import yaml

from commitgate.vcs.diff_parser import DiffParseError, DiffParser
from commitgate.vcs.models import Author, Commit, CommitMetadata, Diff, Hash

logger = logging.getLogger(__name__)


class CommitLoadError(Exception):
    """Raised when a commit document is missing fields or malformed."""


def _timestamp(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value)
        except ValueError as exc:
            raise CommitLoadError(f"Invalid {field_name} timestamp: {value!r}") from exc
    else:
        raise CommitLoadError(f"Invalid {field_name} timestamp: {value!r}")
    # YAML timestamps without an offset are UTC
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _message_lines(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.splitlines()
    if isinstance(value, list):
        return [str(v) for v in value]
    raise CommitLoadError(f"Invalid message: expected text or list, got {type(value).__name__}")


def commit_from_dict(data: Dict[str, Any]) -> Commit:
    """Build a Commit from a parsed YAML mapping."""
    if not isinstance(data, dict):
        raise CommitLoadError("Commit document must be a mapping")
    for required in ("hash", "author", "authored"):
        if required not in data:
            raise CommitLoadError(f"Commit document is missing '{required}'")

    try:
        commit_hash = Hash(str(data["hash"]))
        parents = [Hash(str(p)) for p in data.get("parents") or []]
        author = Author.from_string(str(data["author"]))
        committer = Author.from_string(str(data["committer"])) if data.get("committer") else author
    except ValueError as exc:
        raise CommitLoadError(str(exc)) from exc

    authored = _timestamp(data["authored"], "authored")
    committed = _timestamp(data["committed"], "committed") if data.get("committed") else authored

    diffs: List[Diff] = []
    for i, entry in enumerate(data.get("diffs") or []):
        if not isinstance(entry, dict):
            raise CommitLoadError(f"diffs[{i}] must be a mapping")
        default_from = parents[i] if i < len(parents) else Hash.zero()
        try:
            source = Hash(str(entry["from"])) if entry.get("from") else default_from
            target = Hash(str(entry["to"])) if entry.get("to") else commit_hash
            patches = DiffParser(entry.get("patch") or "").parse()
        except (ValueError, DiffParseError) as exc:
            raise CommitLoadError(f"diffs[{i}]: {exc}") from exc
        diffs.append(Diff(source, target, patches))

    metadata = CommitMetadata(
        hash=commit_hash,
        parents=tuple(parents),
        author=author,
        authored=authored,
        committer=committer,
        committed=committed,
        message=tuple(_message_lines(data.get("message"))),
    )
    try:
        commit = Commit(metadata, tuple(diffs))
    except ValueError as exc:
        raise CommitLoadError(str(exc)) from exc
    logger.debug("Loaded commit %s with %d diff(s)", commit.hash.abbreviate(), len(diffs))
    return commit


def load_commits(path: Path) -> List[Commit]:
    """Load every commit in a (possibly multi-document) YAML file."""
    try:
        with open(path, encoding="utf-8") as f:
            documents = [d for d in yaml.safe_load_all(f) if d is not None]
    except OSError as exc:
        raise CommitLoadError(f"Failed to read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CommitLoadError(f"Failed to parse {path}: {exc}") from exc
    return [commit_from_dict(d) for d in documents]


def load_commit(path: Path) -> Commit:
    """Load a file holding exactly one commit."""
    commits = load_commits(path)
    if len(commits) != 1:
        raise CommitLoadError(f"{path} holds {len(commits)} commits, expected 1")
    return commits[0]
