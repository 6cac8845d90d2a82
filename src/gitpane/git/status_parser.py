"""Parser for ``git status --porcelain --branch`` output."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from gitpane.git.errors import ParseError
from gitpane.git.models import (
    BranchHead,
    ChangeKind,
    DetachedHead,
    Entry,
    NamedBranch,
    Status,
    UnbornBranch,
)
from gitpane.git.quoting import split_quoted, unquote

_HEADER_PREFIX = "## "
_DETACHED = "HEAD (no branch)"
_UNBORN_PREFIXES = ("No commits yet on ", "Initial commit on ")

# <branch>[...<upstream>][ [<tracking>]]; ref names never contain spaces or "..."
_BRANCH_RE = re.compile(r"^(\S+?)(?:\.\.\.(\S+))?(?: \[([^\]]+)\])?$")
_TRACKING_PART_RE = re.compile(r"^(ahead|behind) (\d+)$")

_CODE_TABLE: Dict[str, Optional[ChangeKind]] = {
    " ": None,
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPE_CHANGED,
}

# Unmerged states, see git-status(1) "Short Format".
_CONFLICT_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})


def _parse_tracking(text: str, line_no: int, line: str) -> Tuple[int, int, bool]:
    """Parse ``ahead N, behind M`` / ``gone`` into (ahead, behind, gone)."""
    if text == "gone":
        return 0, 0, True
    ahead = behind = 0
    for part in text.split(", "):
        m = _TRACKING_PART_RE.match(part)
        if not m:
            raise ParseError("unrecognized tracking info in branch header", line=line, line_no=line_no)
        if m.group(1) == "ahead":
            ahead = int(m.group(2))
        else:
            behind = int(m.group(2))
    return ahead, behind, False


def parse_branch_header(line: str, line_no: int = 1) -> Status:
    """Parse the ``## ...`` line into a Status without entries."""
    if not line.startswith(_HEADER_PREFIX):
        raise ParseError("missing '## ' branch header", line=line, line_no=line_no)
    body = line[len(_HEADER_PREFIX):]

    if body == _DETACHED:
        return Status(head=DetachedHead())

    unborn = False
    for prefix in _UNBORN_PREFIXES:
        if body.startswith(prefix):
            body = body[len(prefix):]
            unborn = True
            break

    m = _BRANCH_RE.match(body)
    if not m:
        raise ParseError("unrecognized branch header", line=line, line_no=line_no)
    name, upstream, tracking = m.group(1), m.group(2), m.group(3)
    if tracking is not None and upstream is None:
        raise ParseError("tracking info without an upstream", line=line, line_no=line_no)

    ahead, behind, gone = (0, 0, False)
    if tracking is not None:
        ahead, behind, gone = _parse_tracking(tracking, line_no, line)

    head: BranchHead = UnbornBranch(name) if unborn else NamedBranch(name)
    return Status(head=head, upstream=upstream, ahead=ahead, behind=behind, upstream_gone=gone)


def _unquote_path(raw: str, line_no: int, line: str) -> str:
    try:
        return unquote(raw)
    except ValueError as exc:
        raise ParseError(str(exc), line=line, line_no=line_no) from exc


def _split_rename(field: str, line_no: int, line: str) -> Tuple[str, str]:
    """Split ``<old> -> <new>``; either side may be quoted."""
    if field.startswith('"'):
        try:
            old, rest = split_quoted(field)
        except ValueError as exc:
            raise ParseError(str(exc), line=line, line_no=line_no) from exc
        if not rest.startswith("-> "):
            raise ParseError("rename entry without ' -> '", line=line, line_no=line_no)
        new = rest[3:]
    else:
        cut = field.find(" -> ")
        if cut < 0:
            raise ParseError("rename entry without ' -> '", line=line, line_no=line_no)
        old, new = field[:cut], field[cut + 4:]
    return _unquote_path(old, line_no, line), _unquote_path(new, line_no, line)


def parse_entry(line: str, line_no: int = 0) -> Entry:
    """Parse one ``XY <path>`` status line."""
    if len(line) < 4 or line[2] != " ":
        raise ParseError("malformed status line", line=line, line_no=line_no)
    x, y, field = line[0], line[1], line[3:]
    code = x + y

    if "?" in code:
        return Entry(path=_unquote_path(field, line_no, line), is_untracked=True)
    if code == "!!":
        return Entry(path=_unquote_path(field, line_no, line), is_ignored=True)
    if code in _CONFLICT_CODES or "U" in code:
        return Entry(path=_unquote_path(field, line_no, line), is_conflicted=True)

    for letter in code:
        if letter not in _CODE_TABLE:
            raise ParseError(f"unknown status code {letter!r}", line=line, line_no=line_no)
    staged, unstaged = _CODE_TABLE[x], _CODE_TABLE[y]
    if staged is None and unstaged is None:
        raise ParseError("status line reports no change", line=line, line_no=line_no)

    rename_from: Optional[str] = None
    if x in "RC" or y in "RC":
        rename_from, path = _split_rename(field, line_no, line)
    else:
        path = _unquote_path(field, line_no, line)

    return Entry(
        path=path,
        rename_from=rename_from,
        staged_kind=staged,
        unstaged_kind=unstaged,
    )


def parse_status(text: str) -> Status:
    """Parse porcelain v1 status text with a branch header into a Status.

    Raises ParseError on a missing or unrecognized header, or on any entry
    with an unknown status letter.
    """
    numbered = [(i, line) for i, line in enumerate(text.split("\n"), start=1) if line]
    if not numbered:
        raise ParseError("empty status output, expected a '## ' branch header")

    header_no, header = numbered[0]
    status = parse_branch_header(header, line_no=header_no)
    entries: List[Entry] = [parse_entry(line, line_no=i) for i, line in numbered[1:]]

    return Status(
        head=status.head,
        upstream=status.upstream,
        ahead=status.ahead,
        behind=status.behind,
        entries=tuple(entries),
        upstream_gone=status.upstream_gone,
    )
