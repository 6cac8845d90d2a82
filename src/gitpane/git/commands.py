"""Argument vectors for every git operation gitpane knows about.

Two command types, not interchangeable:

* ``CaptureCommand``: stdout is captured by ``runner.run_capture`` and either
  parsed or handed back as opaque text.
* ``InteractiveCommand``: needs the user's terminal (editor, credentials,
  rebase todo list) or is a fire-and-forget mutation. The caller runs it,
  typically with ``runner.spawn_interactive``, and re-reads status afterwards.

Neither type includes the ``git`` executable; the runner prepends it. Extra
user arguments and references are appended verbatim and never validated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

# Parsed output must not depend on user config (color.ui, diff.external,
# diff.noprefix, diff.mnemonicPrefix, diff.submodule).
_PARSEABLE_DIFF = (
    "--no-color",
    "--no-ext-diff",
    "--src-prefix=a/",
    "--dst-prefix=b/",
    "--submodule=short",
)

REF_HASH_FORMAT = "%(objectname) %(refname:short)"
BRANCH_REF_FORMAT = "%(refname:short) %(upstream:short) %(subject)"


@dataclass(frozen=True)
class CaptureCommand:
    args: Tuple[str, ...]

    def with_args(self, *extra: str) -> CaptureCommand:
        return replace(self, args=self.args + tuple(extra))


@dataclass(frozen=True)
class InteractiveCommand:
    args: Tuple[str, ...]
    stdin: Optional[str] = None  # patch text for `git apply`

    def with_args(self, *extra: str) -> InteractiveCommand:
        return replace(self, args=self.args + tuple(extra))

    def with_input(self, text: str) -> InteractiveCommand:
        return replace(self, stdin=text)


def _capture(*args: str) -> CaptureCommand:
    return CaptureCommand(tuple(args))


def _interactive(*args: str) -> InteractiveCommand:
    return InteractiveCommand(tuple(args))


# ── capturing ────────────────────────────────────────────────────────────────


def repo_root_cmd() -> CaptureCommand:
    return _capture("rev-parse", "--show-toplevel")


def status_cmd() -> CaptureCommand:
    return _capture("status", "--porcelain", "--branch")


def diff_cmd(*args: str) -> CaptureCommand:
    return _capture("diff", *_PARSEABLE_DIFF, *args)


def diff_unstaged_cmd() -> CaptureCommand:
    return diff_cmd()


def diff_staged_cmd() -> CaptureCommand:
    return diff_cmd("--staged")


def show_cmd(*args: str) -> CaptureCommand:
    return _capture("show", *_PARSEABLE_DIFF, *args)


def show_summary_cmd(*args: str) -> CaptureCommand:
    """Opaque, colored commit summary for display."""
    return _capture("show", "--summary", "--decorate", "--color", *args)


def log_recent_cmd(count: int = 5) -> CaptureCommand:
    return _capture("log", "-n", str(count), "--oneline", "--decorate", "--color")


def log_cmd(*args: str) -> CaptureCommand:
    return _capture("log", "--oneline", "--decorate", "--color", *args)


def ref_hashes_cmd() -> CaptureCommand:
    """``<full-hash> <short-ref-name>`` per line, for hash to name lookup."""
    return _capture("for-each-ref", "--format", REF_HASH_FORMAT)


def branch_refs_cmd() -> CaptureCommand:
    """Local branches, most recently created first."""
    return _capture(
        "for-each-ref",
        "--sort",
        "-creatordate",
        "--format",
        BRANCH_REF_FORMAT,
        "refs/heads",
    )


# ── interactive / mutating ───────────────────────────────────────────────────


def stage_file_cmd(file: str) -> InteractiveCommand:
    return _interactive("add", file)


def stage_patch_cmd() -> InteractiveCommand:
    return _interactive("apply", "--cached")


def unstage_file_cmd(file: str) -> InteractiveCommand:
    return _interactive("restore", "--staged", file)


def unstage_patch_cmd() -> InteractiveCommand:
    return _interactive("apply", "--cached", "--reverse")


def discard_unstaged_patch_cmd() -> InteractiveCommand:
    return _interactive("apply", "--reverse")


def commit_cmd() -> InteractiveCommand:
    return _interactive("commit")


def commit_amend_cmd() -> InteractiveCommand:
    return _interactive("commit", "--amend")


def commit_fixup_cmd(reference: str) -> InteractiveCommand:
    return _interactive("commit", "--fixup", reference)


def push_cmd() -> InteractiveCommand:
    return _interactive("push")


def pull_cmd() -> InteractiveCommand:
    return _interactive("pull")


def fetch_all_cmd() -> InteractiveCommand:
    return _interactive("fetch", "--all")


def rebase_interactive_cmd(reference: str) -> InteractiveCommand:
    return _interactive("rebase", "-i", "--autostash", reference)


def rebase_autosquash_cmd(reference: str) -> InteractiveCommand:
    return _interactive(
        "rebase",
        "-i",
        "--autosquash",
        "--keep-empty",
        "--autostash",
        reference,
    )


def rebase_continue_cmd() -> InteractiveCommand:
    return _interactive("rebase", "--continue")


def rebase_abort_cmd() -> InteractiveCommand:
    return _interactive("rebase", "--abort")


def checkout_file_cmd(file: str) -> InteractiveCommand:
    return _interactive("checkout", "--", file)


def checkout_ref_cmd(reference: str) -> InteractiveCommand:
    return _interactive("checkout", reference)
