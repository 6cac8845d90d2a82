"""Unified diff parser — turns ``git diff`` / ``git show`` text into a Diff.

Hunk bodies are consumed by the counts in their ``@@`` header rather than
by looking for the next header, so a removed line that happens to read
``--- a/x`` or ``-- `` stays a removed line, and a hunk whose body does not
reconcile with its header is rejected instead of truncated.

Handles renames, copies, mode changes, binary markers, quoted paths,
``\\ No newline at end of file`` and the commit headers ``git show`` and
``git log -p`` print between file sections. Unmerged paths are reported by
path only: ``* Unmerged path`` lines and ``diff --cc`` sections carry no hunks.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional, Tuple

from gitpane.git.errors import ParseError
from gitpane.git.models import ChangeKind, Diff, FileChange, Hunk, Line, LineKind
from gitpane.git.quoting import split_quoted, unquote

logger = logging.getLogger(__name__)

# --- Regex patterns for diff parsing ---

_DIFF_HEADER = "diff --git "
_DIFF_HEADER_RE = re.compile(r"^a/(.*) b/(.*)$")
_COMBINED_HEADER_RE = re.compile(r"^diff --(?:cc|combined) (.+)$")
_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$"
)
_BINARY_RE = re.compile(r"^Binary files .* and .* differ$")
_BINARY_PATCH = "GIT binary patch"
_OLD_MODE_RE = re.compile(r"^old mode (\d+)$")
_NEW_MODE_RE = re.compile(r"^new mode (\d+)$")
_DELETED_FILE_RE = re.compile(r"^deleted file mode (\d+)$")
_NEW_FILE_RE = re.compile(r"^new file mode (\d+)$")
_SIMILARITY_RE = re.compile(r"^similarity index (\d+)%$")
_DISSIMILARITY_RE = re.compile(r"^dissimilarity index (\d+)%$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_COPY_FROM_RE = re.compile(r"^copy from (.+)$")
_COPY_TO_RE = re.compile(r"^copy to (.+)$")
_INDEX_RE = re.compile(r"^index [0-9a-f]+\.\.[0-9a-f]+(?: \d+)?$")
_UNMERGED_RE = re.compile(r"^\* Unmerged path (.+)$")

_DEV_NULL = "/dev/null"
_COMMIT_HEADERS = ("commit ", "tag ")

_BODY_KINDS = {
    " ": LineKind.CONTEXT,
    "+": LineKind.ADDED,
    "-": LineKind.REMOVED,
    # diff.suppressBlankEmpty drops the space of an empty context line
    "": LineKind.CONTEXT,
}


def _split_lines(text: str) -> List[str]:
    """Split on ``\\n`` only; str.splitlines would also break on \\f, \\x1c, ..."""
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def _is_section_start(line: str) -> bool:
    """True for lines that open a file section or a commit/tag header."""
    return (
        line.startswith((_DIFF_HEADER,) + _COMMIT_HEADERS)
        or _COMBINED_HEADER_RE.match(line) is not None
        or _UNMERGED_RE.match(line) is not None
    )


def _strip_prefix(path: str, prefix: str) -> Optional[str]:
    return path[len(prefix):] if path.startswith(prefix) else None


def _split_header_paths(rest: str) -> Optional[Tuple[str, str]]:
    """Split the ``a/<old> b/<new>`` part of a ``diff --git`` line."""
    if rest.startswith('"'):
        try:
            first, second = split_quoted(rest)
            old, new = unquote(first), unquote(second)
        except ValueError:
            return None
    elif ' "' in rest and rest.endswith('"'):
        cut = rest.rfind(' "')
        try:
            old, new = rest[:cut], unquote(rest[cut + 1:])
        except ValueError:
            return None
    else:
        # Same path on both sides: the halves are equal, spaces or not.
        half = (len(rest) - 1) // 2
        if len(rest) % 2 == 1 and rest[half] == " " and rest[2:half] == rest[half + 3:]:
            old, new = rest[:half], rest[half + 1:]
        else:
            m = _DIFF_HEADER_RE.match(rest)
            if not m:
                return None
            return m.group(1), m.group(2)

    old_path = _strip_prefix(old, "a/")
    new_path = _strip_prefix(new, "b/")
    if old_path is None or new_path is None:
        return None
    return old_path, new_path


class _FileState:
    """Mutable accumulator for one file section."""

    def __init__(self, old_path: str, new_path: str) -> None:
        self.old_path: Optional[str] = old_path
        self.new_path: Optional[str] = new_path
        self.is_new = False
        self.is_deleted = False
        self.is_rename = False
        self.is_copy = False
        self.is_binary = False
        self.similarity: Optional[int] = None
        self.old_mode: Optional[str] = None
        self.new_mode: Optional[str] = None
        self.hunks: List[Hunk] = []

    def kind(self) -> ChangeKind:
        if self.is_binary:
            return ChangeKind.BINARY
        if self.is_copy:
            return ChangeKind.COPIED
        if self.is_rename:
            return ChangeKind.RENAMED
        if self.is_new:
            return ChangeKind.ADDED
        if self.is_deleted:
            return ChangeKind.DELETED
        return ChangeKind.MODIFIED

    def build(self) -> FileChange:
        return FileChange(
            old_path=None if self.is_new else self.old_path,
            new_path=None if self.is_deleted else self.new_path,
            kind=self.kind(),
            similarity=self.similarity if (self.is_rename or self.is_copy) else None,
            hunks=tuple(self.hunks),
            old_mode=self.old_mode,
            new_mode=self.new_mode,
        )


class DiffParser:
    """Parse unified diff text into a :class:`Diff`.

    Usage::

        diff = DiffParser(diff_text).parse()
        for change in diff:
            ...

    The parser holds no state between ``parse()`` calls; parsing the same
    text twice yields equal values.
    """

    def __init__(self, diff_text: str) -> None:
        self._lines = _split_lines(diff_text)

    def _error(self, message: str, idx: int, path: Optional[str] = None) -> ParseError:
        line = self._lines[idx] if idx < len(self._lines) else None
        return ParseError(message, line=line, line_no=idx + 1, path=path)

    def parse(self) -> Diff:
        files: List[FileChange] = []
        total = len(self._lines)
        idx = 0
        # Set after a `commit`/`tag` line of `git show`/`git log -p` output:
        # metadata and message up to the next file section are skipped.
        in_commit_header = False

        while idx < total:
            line = self._lines[idx]

            if line.startswith(_DIFF_HEADER):
                change, idx = self._parse_file(idx)
                files.append(change)
                in_commit_header = False
                continue

            if (cm := _COMBINED_HEADER_RE.match(line)):
                change, idx = self._parse_combined(idx, cm.group(1))
                files.append(change)
                in_commit_header = False
                continue

            if (um := _UNMERGED_RE.match(line)):
                path = self._header_path(um.group(1), idx)
                logger.debug(f"Unmerged path {path}")
                files.append(FileChange(old_path=path, new_path=path, kind=ChangeKind.UNMERGED))
                in_commit_header = False
            elif line.startswith(_COMMIT_HEADERS):
                in_commit_header = True
            elif not in_commit_header and line.strip():
                raise self._error(
                    "unexpected line outside a file section",
                    idx,
                    files[-1].path if files else None,
                )
            idx += 1

        return Diff(files=tuple(files))

    # ---- file sections ----

    def _parse_file(self, idx: int) -> Tuple[FileChange, int]:
        header = self._lines[idx]
        paths = _split_header_paths(header[len(_DIFF_HEADER):])
        if paths is None:
            raise self._error("malformed diff header", idx)
        state = _FileState(*paths)
        idx = self._parse_extended_headers(idx + 1, state)

        total = len(self._lines)
        while idx < total and self._lines[idx].startswith("@@"):
            if state.is_binary:
                raise self._error("hunk in binary file section", idx, state.new_path)
            hunk, idx = self._parse_hunk(idx, state.new_path or state.old_path)
            state.hunks.append(hunk)

        return state.build(), idx

    def _parse_combined(self, idx: int, raw_path: str) -> Tuple[FileChange, int]:
        """Record a ``diff --cc`` section by path and skip its body."""
        path = self._header_path(raw_path, idx)
        logger.debug(f"Combined diff for {path}; hunks not parsed")
        idx += 1
        total = len(self._lines)
        while idx < total and not _is_section_start(self._lines[idx]):
            idx += 1
        return FileChange(old_path=path, new_path=path, kind=ChangeKind.COMBINED), idx

    def _parse_extended_headers(self, idx: int, state: _FileState) -> int:
        """Consume header lines up to the first hunk. Returns the new index."""
        total = len(self._lines)
        while idx < total:
            line = self._lines[idx]

            if line.startswith("@@") or not line.strip() or _is_section_start(line):
                return idx

            if line.startswith("--- "):
                return self._parse_file_markers(idx, state)

            if line == _BINARY_PATCH:
                state.is_binary = True
                return self._skip_binary_patch(idx + 1)

            if _BINARY_RE.match(line):
                state.is_binary = True
            elif _INDEX_RE.match(line):
                pass
            elif (m := _OLD_MODE_RE.match(line)):
                state.old_mode = m.group(1)
            elif (m := _NEW_MODE_RE.match(line)):
                state.new_mode = m.group(1)
            elif (m := _NEW_FILE_RE.match(line)):
                state.is_new = True
                state.new_mode = m.group(1)
            elif (m := _DELETED_FILE_RE.match(line)):
                state.is_deleted = True
                state.old_mode = m.group(1)
            elif (m := _SIMILARITY_RE.match(line)):
                state.similarity = int(m.group(1))
            elif _DISSIMILARITY_RE.match(line):
                pass  # complete rewrite; still a modification
            elif (m := _RENAME_FROM_RE.match(line)):
                state.is_rename = True
                state.old_path = self._header_path(m.group(1), idx)
            elif (m := _RENAME_TO_RE.match(line)):
                state.is_rename = True
                state.new_path = self._header_path(m.group(1), idx)
            elif (m := _COPY_FROM_RE.match(line)):
                state.is_copy = True
                state.old_path = self._header_path(m.group(1), idx)
            elif (m := _COPY_TO_RE.match(line)):
                state.is_copy = True
                state.new_path = self._header_path(m.group(1), idx)
            else:
                raise self._error("unrecognized extended header line", idx, state.new_path)
            idx += 1
        return idx

    def _header_path(self, raw: str, idx: int) -> str:
        try:
            return unquote(raw)
        except ValueError as exc:
            raise self._error(str(exc), idx) from exc

    def _marker_path(self, raw: str, prefix: str, idx: int) -> Optional[str]:
        # git appends a tab to names containing spaces on ---/+++ lines
        if raw.endswith("\t"):
            raw = raw[:-1]
        if raw == _DEV_NULL:
            return None
        path = _strip_prefix(self._header_path(raw, idx), prefix)
        if path is None:
            raise self._error(f"file marker path lacks the '{prefix}' prefix", idx)
        return path

    def _parse_file_markers(self, idx: int, state: _FileState) -> int:
        """Handle the ``--- a/<old>`` / ``+++ b/<new>`` pair."""
        if idx + 1 >= len(self._lines) or not self._lines[idx + 1].startswith("+++ "):
            raise self._error("'---' line not followed by '+++'", idx, state.new_path)
        old = self._marker_path(self._lines[idx][4:], "a/", idx)
        new = self._marker_path(self._lines[idx + 1][4:], "b/", idx + 1)
        if old is None:
            state.is_new = True
        else:
            state.old_path = old
        if new is None:
            state.is_deleted = True
        else:
            state.new_path = new
        return idx + 2

    def _skip_binary_patch(self, idx: int) -> int:
        """Skip base85 ``literal``/``delta`` blocks of a ``--binary`` diff."""
        total = len(self._lines)
        while idx < total:
            line = self._lines[idx]
            if _is_section_start(line):
                break
            idx += 1
        return idx

    # ---- hunks ----

    def _parse_hunk(self, idx: int, path: Optional[str]) -> Tuple[Hunk, int]:
        m = _HUNK_HEADER_RE.match(self._lines[idx])
        if not m:
            raise self._error("malformed hunk header", idx, path)

        old_start = int(m.group(1))
        old_count = int(m.group(2)) if m.group(2) is not None else 1
        new_start = int(m.group(3))
        new_count = int(m.group(4)) if m.group(4) is not None else 1
        section = m.group(5)[1:] if m.group(5).startswith(" ") else m.group(5)

        header_idx = idx
        old_left, new_left = old_count, new_count
        body: List[Line] = []
        total = len(self._lines)
        idx += 1

        while old_left > 0 or new_left > 0:
            if idx >= total:
                raise self._error(
                    f"hunk ends early: {old_left} old and {new_left} new line(s) missing",
                    header_idx,
                    path,
                )
            line = self._lines[idx]
            if line.startswith("\\"):
                self._mark_no_newline(body, idx, path)
                idx += 1
                continue

            kind = _BODY_KINDS.get(line[:1])
            if kind is None:
                raise self._error(
                    f"unexpected line in hunk body ({old_left} old and {new_left} new line(s) still expected)",
                    idx,
                    path,
                )
            if kind is not LineKind.ADDED:
                old_left -= 1
            if kind is not LineKind.REMOVED:
                new_left -= 1
            if old_left < 0 or new_left < 0:
                raise self._error("hunk body does not match its header counts", idx, path)
            body.append(Line(kind=kind, text=line[1:]))
            idx += 1

        # A marker for the last line comes after the counts are used up.
        while idx < total and self._lines[idx].startswith("\\"):
            self._mark_no_newline(body, idx, path)
            idx += 1

        hunk = Hunk(
            old_start=old_start,
            old_count=old_count,
            new_start=new_start,
            new_count=new_count,
            lines=tuple(body),
            section=section,
        )
        return hunk, idx

    def _mark_no_newline(self, body: List[Line], idx: int, path: Optional[str]) -> None:
        if not body:
            raise self._error("'no newline' marker without a preceding line", idx, path)
        body[-1] = replace(body[-1], no_newline_at_eof=True)


def parse_diff(diff_text: str) -> Diff:
    """Parse unified diff text. Raises ParseError on malformed input."""
    return DiffParser(diff_text).parse()
