"""Git interface layer — commands, runner, parsers, models, patches."""

from gitpane.git.adapter import (
    get_branch_refs,
    get_diff,
    get_log,
    get_log_recent,
    get_rebase_status,
    get_repo_root,
    get_show,
    get_show_summary,
    get_staged_diff,
    get_status,
    get_unstaged_diff,
    run_interactive,
)
from gitpane.git.commands import CaptureCommand, InteractiveCommand
from gitpane.git.diff_parser import DiffParser, parse_diff
from gitpane.git.errors import (
    CommandTimeout,
    EncodingError,
    GitError,
    MissingRefError,
    NonZeroExit,
    ParseError,
    SpawnError,
)
from gitpane.git.models import (
    BranchHead,
    BranchRef,
    ChangeKind,
    DetachedHead,
    Diff,
    Entry,
    FileChange,
    Hunk,
    Line,
    LineKind,
    NamedBranch,
    RebaseStatus,
    Status,
    UnbornBranch,
)
from gitpane.git.patch import format_file_patch, format_hunk, format_hunk_patch
from gitpane.git.rebase import read_rebase_status
from gitpane.git.status_parser import parse_status

__all__ = [
    "BranchHead",
    "BranchRef",
    "CaptureCommand",
    "ChangeKind",
    "CommandTimeout",
    "DetachedHead",
    "Diff",
    "DiffParser",
    "EncodingError",
    "Entry",
    "FileChange",
    "GitError",
    "Hunk",
    "InteractiveCommand",
    "Line",
    "LineKind",
    "MissingRefError",
    "NamedBranch",
    "NonZeroExit",
    "ParseError",
    "RebaseStatus",
    "SpawnError",
    "Status",
    "UnbornBranch",
    "get_branch_refs",
    "get_diff",
    "get_log",
    "get_log_recent",
    "get_rebase_status",
    "get_repo_root",
    "get_show",
    "get_show_summary",
    "get_staged_diff",
    "get_status",
    "format_file_patch",
    "format_hunk",
    "format_hunk_patch",
    "get_unstaged_diff",
    "parse_diff",
    "parse_status",
    "read_rebase_status",
    "run_interactive",
]
