"""Interactive rebase detection from ``.git/rebase-merge`` bookkeeping."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from gitpane.config.schema import GitSettings
from gitpane.git.commands import ref_hashes_cmd
from gitpane.git.errors import EncodingError, MissingRefError, NonZeroExit, ParseError
from gitpane.git.models import RebaseStatus
from gitpane.git.refs import match_ref
from gitpane.git.runner import decode_output, run_capture

logger = logging.getLogger(__name__)

_HEADS_PREFIX = "refs/heads/"
_GITDIR_PREFIX = "gitdir: "
SHORT_HASH_LEN = 7


def find_git_dir(directory: Union[str, Path]) -> Path:
    """Return the repository's git dir, following a ``.git`` file (worktrees)."""
    dot_git = Path(directory) / ".git"
    if not dot_git.is_file():
        return dot_git
    content = dot_git.read_text(encoding="utf-8").strip()
    if not content.startswith(_GITDIR_PREFIX):
        raise ParseError("malformed .git file", line=content, path=str(dot_git))
    target = Path(content[len(_GITDIR_PREFIX):])
    return target if target.is_absolute() else Path(directory) / target


def _read_trimmed(path: Path) -> str:
    raw = path.read_bytes()
    return decode_output(raw).strip()


def resolve_ref_name(
    directory: Union[str, Path],
    object_hash: str,
    settings: Optional[GitSettings] = None,
) -> Optional[str]:
    """Return a ref name pointing at *object_hash*, or None if no ref does.

    A failing ref listing raises NonZeroExit rather than reading as "no match".
    """
    command = ref_hashes_cmd()
    output = run_capture(command, directory, settings)
    if not output.ok:
        raise NonZeroExit(command.args, output.returncode, output.stderr)
    return match_ref(decode_output(output.stdout), object_hash)


def read_rebase_status(
    directory: Union[str, Path],
    settings: Optional[GitSettings] = None,
) -> Optional[RebaseStatus]:
    """Return the in-progress interactive rebase for *directory*, if any.

    Returns None when ``rebase-merge/onto`` does not exist. Raises
    MissingRefError when ``head-name`` is missing, and ParseError when it
    does not name a local branch.
    """
    state_dir = find_git_dir(directory) / "rebase-merge"
    onto_file = state_dir / "onto"
    head_name_file = state_dir / "head-name"

    try:
        onto_hash = _read_trimmed(onto_file)
    except FileNotFoundError:
        return None
    except EncodingError as exc:
        raise ParseError(f"onto file is not text: {exc}", path=str(onto_file)) from exc
    if not onto_hash:
        raise ParseError("onto file is empty", path=str(onto_file))

    try:
        head_ref = _read_trimmed(head_name_file)
    except FileNotFoundError as exc:
        raise MissingRefError(head_name_file) from exc
    except EncodingError as exc:
        raise ParseError(f"head-name file is not text: {exc}", path=str(head_name_file)) from exc
    if not head_ref.startswith(_HEADS_PREFIX):
        raise ParseError(
            f"head-name does not start with {_HEADS_PREFIX}",
            line=head_ref,
            path=str(head_name_file),
        )

    onto = resolve_ref_name(directory, onto_hash, settings) or onto_hash[:SHORT_HASH_LEN]
    status = RebaseStatus(onto=onto, head_name=head_ref[len(_HEADS_PREFIX):])
    logger.debug(f"Rebase in progress: {status.head_name} onto {status.onto}")
    return status
