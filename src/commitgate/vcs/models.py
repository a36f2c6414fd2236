"""Data models for commits, diffs, and patches."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

_HEX_RE = re.compile(r"^[0-9a-f]{4,64}$")
_AUTHOR_RE = re.compile(r"^(?P<name>.*?)\s*<(?P<email>[^<>]*)>$")
_STATUS_RE = re.compile(r"^(?P<letter>[AMDURC])(?P<score>\d{1,3})?$")


@dataclass(frozen=True, order=True)
class Hash:
    """Hex digest identifying a commit, tree, or blob."""

    hex: str

    ZERO: ClassVar[str] = "0" * 40

    def __post_init__(self) -> None:
        normalised = self.hex.lower()
        if not _HEX_RE.match(normalised):
            raise ValueError(f"Not a hex digest: {self.hex!r}")
        object.__setattr__(self, "hex", normalised)

    @classmethod
    def zero(cls) -> "Hash":
        return cls(cls.ZERO)

    @property
    def is_zero(self) -> bool:
        return set(self.hex) == {"0"}

    def abbreviate(self, length: int = 8) -> str:
        return self.hex[:length]

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True)
class Author:
    name: str
    email: str

    @classmethod
    def from_string(cls, text: str) -> "Author":
        """Parse ``Name <email>``."""
        m = _AUTHOR_RE.match(text.strip())
        if m is None:
            raise ValueError(f"Not an author: {text!r}")
        return cls(name=m.group("name"), email=m.group("email"))

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class FileKind(str, Enum):
    REGULAR = "regular"
    EXECUTABLE = "executable"
    SYMLINK = "symlink"
    GITLINK = "gitlink"
    DIRECTORY = "directory"
    NONE = "none"


_OCTAL_KINDS = {
    "100644": FileKind.REGULAR,
    "100664": FileKind.REGULAR,  # pre-1.0 git wrote group-writable blobs
    "100755": FileKind.EXECUTABLE,
    "120000": FileKind.SYMLINK,
    "160000": FileKind.GITLINK,
    "040000": FileKind.DIRECTORY,
    "000000": FileKind.NONE,
}


@dataclass(frozen=True)
class FileType:
    """Normalised file mode. Compares by effective kind, not by raw octal."""

    kind: FileKind
    octal: str = field(default="", compare=False)

    @classmethod
    def from_octal(cls, octal: str) -> "FileType":
        padded = octal.strip().rjust(6, "0")
        kind = _OCTAL_KINDS.get(padded)
        if kind is None:
            raise ValueError(f"Unknown file mode: {octal!r}")
        return cls(kind=kind, octal=padded)

    @property
    def is_regular(self) -> bool:
        return self.kind in (FileKind.REGULAR, FileKind.EXECUTABLE)

    @property
    def is_executable(self) -> bool:
        return self.kind == FileKind.EXECUTABLE

    @property
    def is_symlink(self) -> bool:
        return self.kind == FileKind.SYMLINK

    @property
    def is_gitlink(self) -> bool:
        return self.kind == FileKind.GITLINK

    @property
    def is_directory(self) -> bool:
        return self.kind == FileKind.DIRECTORY

    def __str__(self) -> str:
        return self.octal or self.kind.value


class StatusKind(str, Enum):
    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"


@dataclass(frozen=True)
class Status:
    """Change classification of a single patch.

    Renamed and copied patches carry a similarity score between 1 and 100;
    every other kind carries none.
    """

    kind: StatusKind
    score: int = 0

    def __post_init__(self) -> None:
        if self.kind in (StatusKind.RENAMED, StatusKind.COPIED):
            if not 1 <= self.score <= 100:
                raise ValueError(
                    f"{self.kind.name.lower()} status needs a similarity of 1-100, got {self.score}"
                )
        elif self.score:
            raise ValueError(f"{self.kind.name.lower()} status takes no similarity score")

    @classmethod
    def from_code(cls, code: str) -> "Status":
        """Parse a git status code such as ``A``, ``M`` or ``R100``."""
        m = _STATUS_RE.match(code.strip())
        if m is None:
            raise ValueError(f"Unknown status code: {code!r}")
        score = m.group("score")
        return cls(StatusKind(m.group("letter")), int(score) if score else 0)

    @classmethod
    def added(cls) -> "Status":
        return cls(StatusKind.ADDED)

    @classmethod
    def modified(cls) -> "Status":
        return cls(StatusKind.MODIFIED)

    @classmethod
    def deleted(cls) -> "Status":
        return cls(StatusKind.DELETED)

    @classmethod
    def renamed(cls, score: int) -> "Status":
        return cls(StatusKind.RENAMED, score)

    @classmethod
    def copied(cls, score: int) -> "Status":
        return cls(StatusKind.COPIED, score)

    @property
    def is_added(self) -> bool:
        return self.kind == StatusKind.ADDED

    @property
    def is_modified(self) -> bool:
        return self.kind == StatusKind.MODIFIED

    @property
    def is_deleted(self) -> bool:
        return self.kind == StatusKind.DELETED

    @property
    def is_renamed(self) -> bool:
        return self.kind == StatusKind.RENAMED

    @property
    def is_copied(self) -> bool:
        return self.kind == StatusKind.COPIED

    @property
    def is_unmerged(self) -> bool:
        return self.kind == StatusKind.UNMERGED

    def __str__(self) -> str:
        if self.kind in (StatusKind.RENAMED, StatusKind.COPIED):
            return f"{self.kind.value}{self.score:03d}"
        return self.kind.value


@dataclass(frozen=True)
class Range:
    """Line range of a hunk: first line and number of lines."""

    start: int
    count: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.count < 0:
            raise ValueError(f"Invalid range {self.start},{self.count}")

    def __str__(self) -> str:
        return f"{self.start},{self.count}"


@dataclass(frozen=True)
class Hunk:
    """A textual hunk: removed source lines replaced by added target lines."""

    source: Range
    removed: Tuple[str, ...]
    target: Range
    added: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "removed", tuple(self.removed))
        object.__setattr__(self, "added", tuple(self.added))


class BinaryHunkKind(str, Enum):
    LITERAL = "literal"
    DELTA = "delta"


@dataclass(frozen=True)
class BinaryHunk:
    """One chunk of a binary patch.

    ``inflated_size`` is the uncompressed byte length of the change and is
    authoritative; ``data`` holds the encoded payload lines and is never
    decoded here.
    """

    kind: BinaryHunkKind
    inflated_size: int
    data: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.inflated_size < 0:
            raise ValueError(f"Negative inflated size: {self.inflated_size}")
        object.__setattr__(self, "data", tuple(self.data))

    @classmethod
    def of_literal(cls, inflated_size: int, data=()) -> "BinaryHunk":
        return cls(BinaryHunkKind.LITERAL, inflated_size, tuple(data))

    @classmethod
    def of_delta(cls, inflated_size: int, data=()) -> "BinaryHunk":
        return cls(BinaryHunkKind.DELTA, inflated_size, tuple(data))


@dataclass(frozen=True)
class _PatchBase:
    source_path: Optional[str]
    source_type: Optional[FileType]
    source_hash: Optional[Hash]
    target_path: Optional[str]
    target_type: Optional[FileType]
    target_hash: Optional[Hash]
    status: Status

    is_binary: ClassVar[bool]

    def __post_init__(self) -> None:
        if self.target_path is None and not self.status.is_deleted:
            raise ValueError(f"{self.status} patch without a target path")
        if self.source_path is None and self.status.is_deleted:
            raise ValueError("deleted patch without a source path")

    @property
    def is_textual(self) -> bool:
        return not self.is_binary

    @property
    def path(self) -> str:
        """Post-change path, or the removed path for deletions."""
        return self.target_path if self.target_path is not None else self.source_path  # type: ignore[return-value]


@dataclass(frozen=True)
class TextualPatch(_PatchBase):
    hunks: Tuple[Hunk, ...] = ()

    is_binary: ClassVar[bool] = False

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "hunks", tuple(self.hunks))

    def added(self) -> int:
        return sum(len(h.added) for h in self.hunks)

    def removed(self) -> int:
        return sum(len(h.removed) for h in self.hunks)


@dataclass(frozen=True)
class BinaryPatch(_PatchBase):
    hunks: Tuple[BinaryHunk, ...] = ()

    is_binary: ClassVar[bool] = True

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "hunks", tuple(self.hunks))
        # Only a deleted file may come without content; anything else needs a size
        if not self.hunks and not self.status.is_deleted:
            raise ValueError(f"binary patch for {self.path} carries no size")

    @property
    def inflated_size(self) -> int:
        return sum(h.inflated_size for h in self.hunks)


Patch = Union[TextualPatch, BinaryPatch]


@dataclass(frozen=True)
class Diff:
    """All patches between two trees, in the order the diff produced them."""

    source: Hash
    target: Hash
    patches: Tuple[Patch, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "patches", tuple(self.patches))

    def added(self) -> int:
        return sum(p.added() for p in self.patches if isinstance(p, TextualPatch))

    def removed(self) -> int:
        return sum(p.removed() for p in self.patches if isinstance(p, TextualPatch))


@dataclass(frozen=True)
class CommitMetadata:
    hash: Hash
    parents: Tuple[Hash, ...]
    author: Author
    authored: datetime
    committer: Author
    committed: datetime
    message: Tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "parents", tuple(self.parents))
        object.__setattr__(self, "message", tuple(self.message))


@dataclass(frozen=True)
class Commit:
    """A commit and its diffs, one per parent in parent order.

    A root commit has no parents and at most one diff against the empty tree.
    """

    metadata: CommitMetadata
    parent_diffs: Tuple[Diff, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parent_diffs", tuple(self.parent_diffs))
        parents = len(self.metadata.parents)
        diffs = len(self.parent_diffs)
        if parents == 0:
            if diffs > 1:
                raise ValueError(f"Root commit {self.hash} has {diffs} diffs")
        elif diffs != parents:
            raise ValueError(
                f"Commit {self.hash} has {parents} parents but {diffs} diffs"
            )

    @property
    def hash(self) -> Hash:
        return self.metadata.hash

    @property
    def parents(self) -> Tuple[Hash, ...]:
        return self.metadata.parents

    @property
    def author(self) -> Author:
        return self.metadata.author

    @property
    def committer(self) -> Author:
        return self.metadata.committer

    @property
    def authored(self) -> datetime:
        return self.metadata.authored

    @property
    def committed(self) -> datetime:
        return self.metadata.committed

    @property
    def message(self) -> Tuple[str, ...]:
        return self.metadata.message

    @property
    def is_merge(self) -> bool:
        return len(self.metadata.parents) > 1

    @property
    def is_initial(self) -> bool:
        return not self.metadata.parents
