"""Git subprocess wrapper — captured runs, decoding, interactive spawns."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from gitpane.config.schema import GitSettings
from gitpane.git.commands import CaptureCommand, InteractiveCommand
from gitpane.git.errors import CommandTimeout, EncodingError, SpawnError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CapturedOutput:
    """Raw result of a capturing command."""

    stdout: bytes
    returncode: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _check_cwd(cwd: PathLike) -> Path:
    path = Path(cwd)
    if not path.is_dir():
        raise SpawnError(f"Not a directory: {path}")
    return path


def decode_output(raw: bytes) -> str:
    """Decode command output as UTF-8. Raises EncodingError on invalid bytes."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(exc.start, exc.reason) from exc


def run_capture(
    command: CaptureCommand,
    cwd: PathLike,
    settings: Optional[GitSettings] = None,
) -> CapturedOutput:
    """Run a capturing command in *cwd* and return its raw output.

    The exit status is reported, not judged; callers decide whether a
    non-zero exit with usable output is a failure.
    """
    if not isinstance(command, CaptureCommand):
        raise TypeError(f"run_capture needs a CaptureCommand, got {type(command).__name__}")
    settings = settings or GitSettings()
    path = _check_cwd(cwd)
    argv = [settings.executable, *command.args]

    logger.debug(f"Running git command: {' '.join(argv)} (cwd={path})")

    try:
        result = subprocess.run(
            argv,
            cwd=path,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            timeout=settings.timeout,
        )
    except FileNotFoundError as exc:
        raise SpawnError(f"{settings.executable} is not installed or not on PATH") from exc
    except PermissionError as exc:
        raise SpawnError(f"Cannot execute {settings.executable}: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise CommandTimeout(command.args, settings.timeout or 0) from exc

    stderr = result.stderr.decode("utf-8", errors="replace")
    if result.returncode != 0:
        logger.debug(f"git {command.args[0]} exited {result.returncode}: {stderr.strip()}")

    return CapturedOutput(stdout=result.stdout, returncode=result.returncode, stderr=stderr)


def spawn_interactive(
    command: InteractiveCommand,
    cwd: PathLike,
    settings: Optional[GitSettings] = None,
) -> int:
    """Run an interactive command with the caller's stdio and return its exit code.

    No watchdog applies: the user may sit in an editor for as long as they like.
    When the command carries ``stdin`` (a patch for ``git apply``) it is fed
    to the process instead of inheriting the terminal's input.
    """
    if not isinstance(command, InteractiveCommand):
        raise TypeError(f"spawn_interactive needs an InteractiveCommand, got {type(command).__name__}")
    settings = settings or GitSettings()
    path = _check_cwd(cwd)
    argv = [settings.executable, *command.args]

    logger.debug(f"Spawning interactive git command: {' '.join(argv)} (cwd={path})")

    try:
        if command.stdin is None:
            result = subprocess.run(argv, cwd=path)
        else:
            result = subprocess.run(argv, cwd=path, input=command.stdin.encode("utf-8"))
    except FileNotFoundError as exc:
        raise SpawnError(f"{settings.executable} is not installed or not on PATH") from exc
    except PermissionError as exc:
        raise SpawnError(f"Cannot execute {settings.executable}: {exc}") from exc

    return result.returncode
