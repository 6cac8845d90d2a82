"""Data models for parsed diffs, porcelain status, and rebase state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union


class LineKind(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


class ChangeKind(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    BINARY = "binary"
    TYPE_CHANGED = "type_changed"
    UNMERGED = "unmerged"  # `* Unmerged path` in a staged diff
    COMBINED = "combined"  # `diff --cc` section; hunks are not parsed


# --- Diff ---


@dataclass(frozen=True, slots=True)
class Line:
    """A single body line of a hunk, without its prefix or newline."""

    kind: LineKind
    text: str
    no_newline_at_eof: bool = False


@dataclass(frozen=True)
class Hunk:
    """One ``@@`` block of a unified diff."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[Line, ...] = ()
    section: str = ""  # function context printed after the closing @@

    @property
    def header(self) -> str:
        header = f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"
        return f"{header} {self.section}" if self.section else header

    @property
    def added(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.ADDED)

    @property
    def removed(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.REMOVED)


@dataclass(frozen=True)
class FileChange:
    """All changes to one file in a diff."""

    old_path: Optional[str]
    new_path: Optional[str]
    kind: ChangeKind = ChangeKind.MODIFIED
    similarity: Optional[int] = None  # set on renames and copies
    hunks: Tuple[Hunk, ...] = ()
    old_mode: Optional[str] = None
    new_mode: Optional[str] = None

    @property
    def path(self) -> str:
        """The path a UI should show: the new side unless the file is gone."""
        return self.new_path or self.old_path or ""


@dataclass(frozen=True)
class Diff:
    """Ordered file changes, in the order git printed them."""

    files: Tuple[FileChange, ...] = ()

    def __iter__(self) -> Iterator[FileChange]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files


# --- Status ---


@dataclass(frozen=True)
class NamedBranch:
    name: str


@dataclass(frozen=True)
class DetachedHead:
    pass


@dataclass(frozen=True)
class UnbornBranch:
    """A branch with no commits yet."""

    name: str


BranchHead = Union[NamedBranch, DetachedHead, UnbornBranch]


@dataclass(frozen=True)
class Entry:
    """One path reported by porcelain status."""

    path: str
    rename_from: Optional[str] = None
    staged_kind: Optional[ChangeKind] = None
    unstaged_kind: Optional[ChangeKind] = None
    is_untracked: bool = False
    is_conflicted: bool = False
    is_ignored: bool = False

    @property
    def is_staged(self) -> bool:
        return self.staged_kind is not None

    @property
    def is_unstaged(self) -> bool:
        return self.unstaged_kind is not None


@dataclass(frozen=True)
class Status:
    """Branch tracking summary plus per-path entries."""

    head: BranchHead
    upstream: Optional[str] = None
    ahead: int = 0
    behind: int = 0
    entries: Tuple[Entry, ...] = ()
    upstream_gone: bool = False

    @property
    def branch(self) -> str:
        if isinstance(self.head, DetachedHead):
            return "detached"
        return self.head.name

    @property
    def is_clean(self) -> bool:
        return all(e.is_ignored for e in self.entries)

    @property
    def staged(self) -> Tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.is_staged)

    @property
    def unstaged(self) -> Tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.is_unstaged)

    @property
    def untracked(self) -> Tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.is_untracked)

    @property
    def conflicted(self) -> Tuple[Entry, ...]:
        return tuple(e for e in self.entries if e.is_conflicted)


# --- Rebase / refs ---


@dataclass(frozen=True)
class RebaseStatus:
    """An interactive rebase in progress."""

    onto: str  # branch name, or abbreviated hash when no ref matches
    head_name: str


@dataclass(frozen=True)
class BranchRef:
    """A local branch as listed by ``git for-each-ref refs/heads``."""

    name: str
    upstream: Optional[str]
    subject: str
