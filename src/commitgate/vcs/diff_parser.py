"""Parser for ``git diff --binary`` output.

Builds TextualPatch / BinaryPatch values from the text git prints for a
single diff. Handles renames, copies, mode changes, new and deleted files,
``GIT binary patch`` literal/delta sections, and C-quoted paths. A
``Binary files ... differ`` marker carries no size and is rejected unless the
file was deleted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from commitgate.vcs.models import (
    BinaryHunk,
    BinaryPatch,
    FileType,
    Hash,
    Hunk,
    Patch,
    Range,
    Status,
    TextualPatch,
)

logger = logging.getLogger(__name__)

# --- Regex patterns for diff parsing ---

_DIFF_HEADER_PREFIX = "diff --git "
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_HEADER_PATHS_RES = (
    re.compile(rf"^(?P<a>{_QUOTED}) (?P<b>{_QUOTED}|b/.*)$"),
    re.compile(rf"^(?P<a>a/.*) (?P<b>{_QUOTED})$"),
    re.compile(r"^(?P<a>a/.*) (?P<b>b/.*)$"),
)
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_BINARY_DIFFER_RE = re.compile(r"^Binary files .* and .* differ$")
_GIT_BINARY_RE = re.compile(r"^GIT binary patch$")
_BINARY_HUNK_RE = re.compile(r"^(literal|delta) (\d+)$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_COPY_FROM_RE = re.compile(r"^copy from (.+)$")
_COPY_TO_RE = re.compile(r"^copy to (.+)$")
_SIMILARITY_RE = re.compile(r"^similarity index (\d+)%$")
_DISSIMILARITY_RE = re.compile(r"^dissimilarity index \d+%$")
_OLD_MODE_RE = re.compile(r"^old mode (\d+)$")
_NEW_MODE_RE = re.compile(r"^new mode (\d+)$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode (\d+)$")
_NEW_FILE_RE = re.compile(r"^new file mode (\d+)$")
_INDEX_RE = re.compile(r"^index ([0-9a-f]+)\.\.([0-9a-f]+)(?: (\d+))?$")
_NO_NEWLINE_RE = re.compile(r"^\\ No newline at end of file$")
_FILE_HEADER_OLD = re.compile(r'^--- (?:"?a/.*|/dev/null)$')
_FILE_HEADER_NEW = re.compile(r'^\+\+\+ (?:"?b/.*|/dev/null)$')


class DiffParseError(Exception):
    """Raised when diff text cannot be parsed."""


@dataclass
class _PatchHeader:
    """Mutable accumulator for one ``diff --git`` section."""

    source_path: Optional[str]
    target_path: Optional[str]
    source_mode: Optional[str] = None
    target_mode: Optional[str] = None
    source_hash: Optional[str] = None
    target_hash: Optional[str] = None
    added: bool = False
    deleted: bool = False
    renamed: bool = False
    copied: bool = False
    similarity: int = 0
    binary: bool = False
    hunks: list = field(default_factory=list)

    def status(self) -> Status:
        if self.added:
            return Status.added()
        if self.deleted:
            return Status.deleted()
        if self.renamed:
            return Status.renamed(self.similarity or 100)
        if self.copied:
            return Status.copied(self.similarity or 100)
        return Status.modified()

    def build(self) -> Patch:
        status = self.status()
        source_present = not status.is_added
        target_present = not status.is_deleted
        kwargs = dict(
            source_path=self.source_path if source_present else None,
            source_type=_file_type(self.source_mode) if source_present else None,
            source_hash=_hash(self.source_hash) if source_present else None,
            target_path=self.target_path if target_present else None,
            target_type=_file_type(self.target_mode) if target_present else None,
            target_hash=_hash(self.target_hash) if target_present else None,
            status=status,
            hunks=self.hunks,
        )
        if self.binary:
            return BinaryPatch(**kwargs)
        return TextualPatch(**kwargs)


def _file_type(mode: Optional[str]) -> Optional[FileType]:
    return FileType.from_octal(mode) if mode else None


def _hash(value: Optional[str]) -> Optional[Hash]:
    return Hash(value) if value else None


_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_OCTAL_ESCAPE_RE = re.compile(r"[0-7]{3}")


def _unquote(text: str) -> str:
    """Decode a path git wrote C-quoted (``core.quotePath``), e.g. ``"caf\\303\\251"``."""
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        raise DiffParseError(f"Malformed quoted path: {text!r}")
    body = text[1:-1]
    out = bytearray()
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out += ch.encode("utf-8")
            i += 1
            continue
        escape = body[i + 1:i + 2]
        if escape and escape in _C_ESCAPES:
            out.append(_C_ESCAPES[escape])
            i += 2
        elif _OCTAL_ESCAPE_RE.fullmatch(body[i + 1:i + 4]):
            out.append(int(body[i + 1:i + 4], 8))
            i += 4
        else:
            raise DiffParseError(f"Bad escape in quoted path: {text!r}")
    return out.decode("utf-8", errors="replace")


def _path(text: str) -> str:
    return _unquote(text) if text.startswith('"') else text


def _header_paths(line: str) -> Optional[Tuple[str, str]]:
    """Split a ``diff --git`` line into (source, target) without the a/ b/ prefixes."""
    rest = line[len(_DIFF_HEADER_PREFIX):]
    for regex in _HEADER_PATHS_RES:
        m = regex.match(rest)
        if m is None:
            continue
        source, target = _path(m.group("a")), _path(m.group("b"))
        if source.startswith("a/") and target.startswith("b/"):
            return source[2:], target[2:]
    return None


class DiffParser:
    """Parse the text of one diff into a list of patches.

    Usage::

        patches = DiffParser(diff_text).parse()
        diff = Diff(source, target, patches)
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = diff_text.splitlines()
        self._idx = 0

    def parse(self) -> List[Patch]:
        """Return the patches in the order they appear in the text."""
        patches: List[Patch] = []
        total = len(self._lines)
        while self._idx < total:
            line = self._lines[self._idx]
            if not line.startswith(_DIFF_HEADER_PREFIX):
                # Preamble (commit header from git show, stat lines, ...)
                self._idx += 1
                continue
            paths = _header_paths(line)
            if paths is None:
                raise DiffParseError(f"Malformed diff header at line {self._idx + 1}: {line!r}")
            self._idx += 1
            header = _PatchHeader(source_path=paths[0], target_path=paths[1])
            self._parse_extended_headers(header)
            self._parse_body(header)
            patch = header.build()
            logger.debug("Parsed %s patch %s (%s)",
                         "binary" if patch.is_binary else "textual", patch.path, patch.status)
            patches.append(patch)
        return patches

    # ---- extended headers ----

    def _parse_extended_headers(self, header: _PatchHeader) -> None:
        total = len(self._lines)
        while self._idx < total:
            sub = self._lines[self._idx]
            if (im := _INDEX_RE.match(sub)):
                header.source_hash = im.group(1)
                header.target_hash = im.group(2)
                if im.group(3):
                    header.source_mode = header.source_mode or im.group(3)
                    header.target_mode = header.target_mode or im.group(3)
            elif (mm := _OLD_MODE_RE.match(sub)):
                header.source_mode = mm.group(1)
            elif (mm := _NEW_MODE_RE.match(sub)):
                header.target_mode = mm.group(1)
            elif (mm := _NEW_FILE_RE.match(sub)):
                header.added = True
                header.target_mode = mm.group(1)
            elif (mm := _DELETED_FILE_RE.match(sub)):
                header.deleted = True
                header.source_mode = mm.group(1)
            elif (sm := _SIMILARITY_RE.match(sub)):
                header.similarity = int(sm.group(1))
            elif _DISSIMILARITY_RE.match(sub):
                pass
            elif (rm := _RENAME_FROM_RE.match(sub)):
                header.source_path = _path(rm.group(1))
                header.renamed = True
            elif (rm := _RENAME_TO_RE.match(sub)):
                header.target_path = _path(rm.group(1))
            elif (cm := _COPY_FROM_RE.match(sub)):
                header.source_path = _path(cm.group(1))
                header.copied = True
            elif (cm := _COPY_TO_RE.match(sub)):
                header.target_path = _path(cm.group(1))
            else:
                break
            self._idx += 1

    # ---- body ----

    def _parse_body(self, header: _PatchHeader) -> None:
        total = len(self._lines)
        while self._idx < total:
            line = self._lines[self._idx]
            if line.startswith(_DIFF_HEADER_PREFIX):
                return
            if _FILE_HEADER_OLD.match(line) or _FILE_HEADER_NEW.match(line):
                self._idx += 1
                continue
            if _BINARY_DIFFER_RE.match(line):
                if not header.deleted:
                    raise DiffParseError(
                        f"binary patch for {header.target_path} carries no size; "
                        "rerun git diff with --binary"
                    )
                header.binary = True
                self._idx += 1
                continue
            if _GIT_BINARY_RE.match(line):
                header.binary = True
                self._idx += 1
                self._parse_binary_hunks(header)
                continue
            if line.startswith("@@"):
                header.hunks.append(self._parse_hunk(line))
                continue
            self._idx += 1

    def _parse_hunk(self, line: str) -> Hunk:
        hm = _HUNK_HEADER_RE.match(line)
        if hm is None:
            raise DiffParseError(f"Malformed hunk header at line {self._idx + 1}: {line!r}")
        source = Range(int(hm.group(1)), int(hm.group(2)) if hm.group(2) is not None else 1)
        target = Range(int(hm.group(3)), int(hm.group(4)) if hm.group(4) is not None else 1)
        self._idx += 1

        removed: List[str] = []
        added: List[str] = []
        remaining_source = source.count
        remaining_target = target.count
        total = len(self._lines)
        while self._idx < total and (remaining_source > 0 or remaining_target > 0):
            raw = self._lines[self._idx]
            if _NO_NEWLINE_RE.match(raw):
                self._idx += 1
                continue
            if raw.startswith("-"):
                removed.append(raw[1:])
                remaining_source -= 1
            elif raw.startswith("+"):
                added.append(raw[1:])
                remaining_target -= 1
            elif raw.startswith(" ") or raw == "":
                # Context line; an empty line is a context line with its space trimmed
                remaining_source -= 1
                remaining_target -= 1
            else:
                break
            self._idx += 1

        # Trailing marker for the last line of the hunk
        if self._idx < total and _NO_NEWLINE_RE.match(self._lines[self._idx]):
            self._idx += 1

        return Hunk(source=source, removed=tuple(removed), target=target, added=tuple(added))

    def _parse_binary_hunks(self, header: _PatchHeader) -> None:
        """Read the forward hunk of a ``GIT binary patch`` section.

        git follows the forward hunk with a reverse hunk restoring the old
        content; the reverse hunk is consumed and dropped.
        """
        hunks: List[BinaryHunk] = []
        total = len(self._lines)
        while self._idx < total:
            line = self._lines[self._idx]
            bm = _BINARY_HUNK_RE.match(line)
            if bm is None:
                if line.strip() == "":
                    self._idx += 1
                    continue
                break
            self._idx += 1
            data: List[str] = []
            while self._idx < total and self._lines[self._idx].strip() != "":
                data.append(self._lines[self._idx])
                self._idx += 1
            size = int(bm.group(2))
            if bm.group(1) == "literal":
                hunks.append(BinaryHunk.of_literal(size, data))
            else:
                hunks.append(BinaryHunk.of_delta(size, data))

        if not hunks:
            raise DiffParseError(
                f"GIT binary patch for {header.target_path} has no literal or delta hunk"
            )
        header.hunks.append(hunks[0])
