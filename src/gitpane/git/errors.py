"""Exception taxonomy for git invocation and output parsing."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence


class GitError(Exception):
    """Base class for every failure surfaced by gitpane's git layer."""


class SpawnError(GitError):
    """Raised when git cannot be started (not installed, bad directory)."""


class CommandTimeout(GitError):
    """Raised when a capturing command outlives its watchdog."""

    def __init__(self, args: Sequence[str], timeout: float) -> None:
        self.command = tuple(args)
        self.timeout = timeout
        super().__init__(f"git command timed out after {timeout}s: {' '.join(args)}")


class EncodingError(GitError):
    """Raised when command output is not valid UTF-8 text."""

    def __init__(self, offset: int, reason: str) -> None:
        self.offset = offset
        super().__init__(f"output is not valid UTF-8 at byte {offset}: {reason}")


class NonZeroExit(GitError):
    """Raised when a capturing command fails and its output is unusable."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = tuple(args)
        self.returncode = returncode
        self.stderr = stderr
        message = f"git {' '.join(args)} exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)


class ParseError(GitError):
    """Raised on malformed diff, status, or rebase bookkeeping text.

    Carries enough context to act on: the offending line, its 1-based
    number within the input, and the file section it belongs to.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[str] = None,
        line_no: Optional[int] = None,
        path: Optional[str] = None,
    ) -> None:
        self.message = message
        self.line = line
        self.line_no = line_no
        self.path = path
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.message]
        if self.path is not None:
            parts.append(f"in {self.path}")
        if self.line_no is not None:
            parts.append(f"at line {self.line_no}")
        if self.line is not None:
            parts.append(f"({self.line!r})")
        return " ".join(parts)


class MissingRefError(ParseError):
    """Raised when rebase bookkeeping references an absent companion file."""

    def __init__(self, missing: Path) -> None:
        self.missing = missing
        super().__init__(f"rebase bookkeeping is incomplete: {missing} is missing", path=str(missing))
