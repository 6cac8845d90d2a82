"""Render parsed changes back into patches for ``git apply``.

Staging, unstaging or discarding a single hunk is done by feeding one of
these patches to ``stage_patch_cmd()`` / ``unstage_patch_cmd()`` /
``discard_unstaged_patch_cmd()`` via ``InteractiveCommand.with_input``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from gitpane.git.models import ChangeKind, FileChange, Hunk, LineKind
from gitpane.git.quoting import quote

_PREFIX = {
    LineKind.CONTEXT: " ",
    LineKind.ADDED: "+",
    LineKind.REMOVED: "-",
}

_NO_NEWLINE = "\\ No newline at end of file"


def _side(path: Optional[str], prefix: str) -> str:
    return "/dev/null" if path is None else quote(f"{prefix}{path}")


def format_hunk(hunk: Hunk) -> List[str]:
    lines = [hunk.header]
    for line in hunk.lines:
        lines.append(_PREFIX[line.kind] + line.text)
        if line.no_newline_at_eof:
            lines.append(_NO_NEWLINE)
    return lines


def format_file_patch(change: FileChange, hunks: Optional[Iterable[Hunk]] = None) -> str:
    """Return a patch for *change* holding *hunks* (default: all of them).

    Raises ValueError for binary and unmerged changes, which carry no hunks
    to apply.
    """
    if change.kind is ChangeKind.BINARY:
        raise ValueError(f"cannot build a text patch for binary file {change.path}")
    if change.kind in (ChangeKind.UNMERGED, ChangeKind.COMBINED):
        raise ValueError(f"cannot build a patch for unmerged file {change.path}")

    old = change.old_path if change.old_path is not None else change.new_path
    new = change.new_path if change.new_path is not None else change.old_path
    lines = [f"diff --git {quote(f'a/{old}')} {quote(f'b/{new}')}"]

    if change.kind is ChangeKind.ADDED:
        lines.append(f"new file mode {change.new_mode or '100644'}")
    elif change.kind is ChangeKind.DELETED:
        lines.append(f"deleted file mode {change.old_mode or '100644'}")
    elif change.old_mode and change.new_mode and change.old_mode != change.new_mode:
        lines.append(f"old mode {change.old_mode}")
        lines.append(f"new mode {change.new_mode}")

    if change.kind in (ChangeKind.RENAMED, ChangeKind.COPIED):
        verb = "rename" if change.kind is ChangeKind.RENAMED else "copy"
        if change.similarity is not None:
            lines.append(f"similarity index {change.similarity}%")
        lines.append(f"{verb} from {quote(change.old_path or '')}")
        lines.append(f"{verb} to {quote(change.new_path or '')}")

    lines.append(f"--- {_side(change.old_path, 'a/')}")
    lines.append(f"+++ {_side(change.new_path, 'b/')}")
    for hunk in change.hunks if hunks is None else hunks:
        lines.extend(format_hunk(hunk))
    return "\n".join(lines) + "\n"


def format_hunk_patch(change: FileChange, hunk: Hunk) -> str:
    """Patch containing only *hunk* of *change*."""
    return format_file_patch(change, [hunk])
