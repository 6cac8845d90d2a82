"""Git operations — build the command, run it, parse the output.

Every function takes the working directory explicitly and returns a fresh
value; nothing is cached between calls. A capturing command that exits
non-zero raises NonZeroExit when its output is empty or does not parse, so
"no changes" and "git failed" are never confused. A non-zero exit with
usable output (``git diff --exit-code``) is returned as a normal result.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, TypeVar, Union

from gitpane.config.schema import GitSettings
from gitpane.git import commands
from gitpane.git.commands import CaptureCommand, InteractiveCommand
from gitpane.git.diff_parser import parse_diff
from gitpane.git.errors import EncodingError, NonZeroExit, ParseError
from gitpane.git.models import BranchRef, Diff, RebaseStatus, Status
from gitpane.git.rebase import read_rebase_status
from gitpane.git.refs import parse_branch_refs
from gitpane.git.runner import decode_output, run_capture, spawn_interactive
from gitpane.git.status_parser import parse_status

logger = logging.getLogger(__name__)

T = TypeVar("T")
PathLike = Union[str, Path]


def _run_git(
    command: CaptureCommand,
    cwd: PathLike,
    parse: Callable[[str], T],
    settings: Optional[GitSettings] = None,
) -> T:
    """Run *command* and parse its stdout. Raises GitError on failure."""
    output = run_capture(command, cwd, settings)
    try:
        text = decode_output(output.stdout)
        if not output.ok and not text.strip():
            raise NonZeroExit(command.args, output.returncode, output.stderr)
        return parse(text)
    except (ParseError, EncodingError) as exc:
        if not output.ok:
            raise NonZeroExit(command.args, output.returncode, output.stderr) from exc
        raise


def _text(text: str) -> str:
    return text


def get_repo_root(cwd: Optional[PathLike] = None, settings: Optional[GitSettings] = None) -> Path:
    """Return the root of the git repository containing *cwd*."""
    out = _run_git(commands.repo_root_cmd(), cwd or Path.cwd(), _text, settings)
    return Path(out.strip())


def get_status(directory: PathLike, settings: Optional[GitSettings] = None) -> Status:
    return _run_git(commands.status_cmd(), directory, parse_status, settings)


def get_diff(directory: PathLike, *args: str, settings: Optional[GitSettings] = None) -> Diff:
    """``git diff <args>`` for an arbitrary range or pathspec."""
    return _run_git(commands.diff_cmd(*args), directory, parse_diff, settings)


def get_unstaged_diff(directory: PathLike, settings: Optional[GitSettings] = None) -> Diff:
    return _run_git(commands.diff_unstaged_cmd(), directory, parse_diff, settings)


def get_staged_diff(directory: PathLike, settings: Optional[GitSettings] = None) -> Diff:
    return _run_git(commands.diff_staged_cmd(), directory, parse_diff, settings)


def get_show(directory: PathLike, *args: str, settings: Optional[GitSettings] = None) -> Diff:
    """The diff introduced by a commit; the commit header is skipped."""
    return _run_git(commands.show_cmd(*args), directory, parse_diff, settings)


def get_show_summary(directory: PathLike, *args: str, settings: Optional[GitSettings] = None) -> str:
    return _run_git(commands.show_summary_cmd(*args), directory, _text, settings)


def get_log_recent(
    directory: PathLike,
    count: int = 5,
    settings: Optional[GitSettings] = None,
) -> str:
    return _run_git(commands.log_recent_cmd(count), directory, _text, settings)


def get_log(directory: PathLike, *args: str, settings: Optional[GitSettings] = None) -> str:
    return _run_git(commands.log_cmd(*args), directory, _text, settings)


def get_branch_refs(directory: PathLike, settings: Optional[GitSettings] = None) -> List[BranchRef]:
    return _run_git(commands.branch_refs_cmd(), directory, parse_branch_refs, settings)


def get_rebase_status(
    directory: PathLike,
    settings: Optional[GitSettings] = None,
) -> Optional[RebaseStatus]:
    return read_rebase_status(directory, settings)


def run_interactive(
    command: InteractiveCommand,
    directory: PathLike,
    settings: Optional[GitSettings] = None,
) -> int:
    """Run a mutating/interactive command with inherited stdio; returns its exit code."""
    returncode = spawn_interactive(command, directory, settings)
    if returncode != 0:
        logger.info(f"git {' '.join(command.args)} exited with status {returncode}")
    return returncode
