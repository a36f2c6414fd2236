"""Shared test fixtures — configuration text, commit builders, sample diffs."""

from __future__ import annotations

import textwrap
from datetime import datetime, timezone

import pytest

from commitgate.conf.schema import Configuration
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
    Range,
    Status,
    TextualPatch,
)

COMMIT_HASH = "0123456789012345678901234567890123456789"
PARENT_HASH = "abcdefabcdefabcdefabcdefabcdefabcdefabcd"

CONF_LINES = [
    "[general]",
    "project = test",
    "[checks]",
    "error = binary",
    '[checks "binary"]',
    r".*\.bin=1b",
    r".*\.o=1k",
]

CONF_TEXT = "\n".join(CONF_LINES) + "\n"


@pytest.fixture
def conf() -> Configuration:
    """Binary check enabled as error; .bin limited to 1 byte, .o to 1k."""
    return Configuration.parse(CONF_LINES)


@pytest.fixture
def make_commit():
    """Build a commit with one parent per diff (or a root commit with none)."""

    def _make(diffs, parents=None, message=("A commit",), commit_hash=COMMIT_HASH):
        diffs = list(diffs)
        if parents is None:
            parents = [Hash(PARENT_HASH)] * len(diffs)
        author = Author("foo", "foo@host.org")
        authored = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        metadata = CommitMetadata(
            hash=Hash(commit_hash),
            parents=tuple(parents),
            author=author,
            authored=authored,
            committer=author,
            committed=authored,
            message=tuple(message),
        )
        return Commit(metadata, tuple(diffs))

    return _make


@pytest.fixture
def textual_diff():
    """One modified text file with a single added line."""

    def _make(filename: str = "README", mode: str = "100644") -> Diff:
        hunk = Hunk(Range(1, 0), (), Range(1, 1), ("An additional line",))
        patch = TextualPatch(
            source_path=filename, source_type=FileType.from_octal("100644"), source_hash=Hash.zero(),
            target_path=filename, target_type=FileType.from_octal(mode), target_hash=Hash.zero(),
            status=Status.from_code("M"), hunks=(hunk,),
        )
        return Diff(Hash.zero(), Hash.zero(), (patch,))

    return _make


@pytest.fixture
def binary_diff():
    """One binary change of *inflated_size* bytes to *path*."""

    def _make(path: str, status: Status, inflated_size: int, data=("testtest",), hunks=None) -> Diff:
        if hunks is None:
            hunks = (BinaryHunk.of_literal(inflated_size, data),)
        if status.is_deleted:
            patch = BinaryPatch(
                source_path=path, source_type=FileType.from_octal("100644"), source_hash=Hash.zero(),
                target_path=None, target_type=None, target_hash=None,
                status=status, hunks=hunks,
            )
        else:
            patch = BinaryPatch(
                source_path=None, source_type=None, source_hash=None,
                target_path=path, target_type=FileType.from_octal("100644"), target_hash=Hash.zero(),
                status=status, hunks=hunks,
            )
        return Diff(Hash.zero(), Hash.zero(), (patch,))

    return _make


@pytest.fixture
def sample_diff_text() -> str:
    """A ``git diff --binary`` with a text change and a new binary file."""
    return textwrap.dedent("""\
        diff --git a/README b/README
        index 3b18e51..a042389 100644
        --- a/README
        +++ b/README
        @@ -1,2 +1,3 @@
         hello
        -world
        +there
        +world!
        diff --git a/fw.bin b/fw.bin
        new file mode 100644
        index 0000000000000000000000000000000000000000..5b1f2a8c5d3e7f9a0b1c2d3e4f5a6b7c8d9e0f1a
        GIT binary patch
        literal 9
        QcmYdEOi3&$&Cg{300G_rd;kCd

        literal 0
        HcmV?d00001

    """)


@pytest.fixture
def sample_commit_yaml(sample_diff_text: str) -> str:
    """A YAML commit document wrapping ``sample_diff_text``."""
    patch = textwrap.indent(sample_diff_text, " " * 6)
    return (
        f'hash: "{COMMIT_HASH}"\n'
        f'parents: ["{PARENT_HASH}"]\n'
        "author: foo <foo@host.org>\n"
        "authored: 2024-01-02T03:04:05+00:00\n"
        "message: |\n"
        "  Add firmware\n"
        "diffs:\n"
        "  - patch: |\n"
        f"{patch}"
    )


@pytest.fixture
def conf_file(tmp_path):
    path = tmp_path / "conf"
    path.write_text(CONF_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def commit_file(tmp_path, sample_commit_yaml: str):
    path = tmp_path / "commit.yaml"
    path.write_text(sample_commit_yaml, encoding="utf-8")
    return path
