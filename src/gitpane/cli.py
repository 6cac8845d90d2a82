"""gitpane CLI — Typer application that prints parsed git state."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from gitpane import __version__
from gitpane.config.schema import OUTPUT_FORMATS, GitPaneConfig

app = typer.Typer(
    name="gitpane",
    help="Typed views of git status, diffs, and rebase state.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

# Let `gitpane diff --stat HEAD~2` pass git options through untouched.
_PASSTHROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}

DirectoryOption = typer.Option(None, "--dir", "-C", help="Repository directory (default: current)")
ConfigOption = typer.Option(None, "--config", "-c", help="Path to .gitpane.toml")
FormatOption = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml")


def _resolve_repo_root(directory: Optional[Path]) -> Path:
    """Find the git repo root, exit 2 on failure."""
    from gitpane.git.adapter import get_repo_root
    from gitpane.git.errors import GitError

    try:
        return get_repo_root(directory or Path.cwd())
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _setup(
    directory: Optional[Path],
    config: Optional[str],
    fmt: Optional[str],
) -> Tuple[Path, GitPaneConfig]:
    """Resolve the repo and load config with CLI overrides applied."""
    from gitpane.config.loader import ConfigError, load_config

    repo_root = _resolve_repo_root(directory)
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if fmt:
        if fmt not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {escape(fmt)}")
            raise typer.Exit(code=2)
        cfg.output.format = fmt  # type: ignore[assignment]
    return repo_root, cfg


def _run(operation: Callable[[], Any]) -> Any:
    from gitpane.git.errors import GitError

    try:
        return operation()
    except GitError as exc:
        console.print(f"[bold red]Git error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc


def _emit(model: Any, cfg: GitPaneConfig, render_terminal: Callable[..., None]) -> None:
    from gitpane.output import structured

    if cfg.output.format == "terminal":
        render_terminal(model, Console())
    else:
        print(structured.render(model, cfg.output.format))


def _emit_text(text: str, cfg: GitPaneConfig, render_terminal: Callable[..., None]) -> None:
    """Opaque git output; structured formats wrap it as ``{"text": ...}``."""
    _emit(text if cfg.output.format == "terminal" else {"text": text}, cfg, render_terminal)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """Branch tracking info and changed paths."""
    from gitpane.git.adapter import get_status
    from gitpane.output.terminal import render_status

    repo_root, cfg = _setup(directory, config, format)
    result = _run(lambda: get_status(repo_root, cfg.git))
    _emit(result, cfg, render_status)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command(context_settings=_PASSTHROUGH)
def diff(
    git_diff_args: Optional[List[str]] = typer.Argument(None, help="Extra arguments for git diff"),
    staged: bool = typer.Option(False, "--staged", help="Show staged changes"),
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """Parsed working-tree, staged, or range diff."""
    from gitpane.git.adapter import get_diff, get_staged_diff
    from gitpane.output.terminal import render_diff

    repo_root, cfg = _setup(directory, config, format)
    args = git_diff_args or []
    if staged and not args:
        result = _run(lambda: get_staged_diff(repo_root, cfg.git))
    elif staged:
        result = _run(lambda: get_diff(repo_root, "--staged", *args, settings=cfg.git))
    else:
        result = _run(lambda: get_diff(repo_root, *args, settings=cfg.git))
    _emit(result, cfg, render_diff)


# ── show ──────────────────────────────────────────────────────────────────────


@app.command(context_settings=_PASSTHROUGH)
def show(
    reference: str = typer.Argument(..., help="Commit to show"),
    git_show_args: Optional[List[str]] = typer.Argument(None, help="Extra arguments for git show"),
    summary: bool = typer.Option(False, "--summary", help="Print git's own commit summary instead"),
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """Diff introduced by a commit."""
    from gitpane.git.adapter import get_show, get_show_summary
    from gitpane.output.terminal import render_diff, render_text

    repo_root, cfg = _setup(directory, config, format)
    args = [reference, *(git_show_args or [])]
    if summary:
        text = _run(lambda: get_show_summary(repo_root, *args, settings=cfg.git))
        _emit_text(text, cfg, render_text)
        return
    result = _run(lambda: get_show(repo_root, *args, settings=cfg.git))
    _emit(result, cfg, render_diff)


# ── log ───────────────────────────────────────────────────────────────────────


@app.command(context_settings=_PASSTHROUGH)
def log(
    git_log_args: Optional[List[str]] = typer.Argument(None, help="Extra arguments for git log"),
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """One-line log; the most recent commits when no arguments are given."""
    from gitpane.git.adapter import get_log, get_log_recent
    from gitpane.output.terminal import render_text

    repo_root, cfg = _setup(directory, config, format)
    if git_log_args:
        text = _run(lambda: get_log(repo_root, *git_log_args, settings=cfg.git))
    else:
        text = _run(lambda: get_log_recent(repo_root, cfg.log.recent_count, cfg.git))
    _emit_text(text, cfg, render_text)


# ── refs ──────────────────────────────────────────────────────────────────────


@app.command()
def refs(
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """Local branches with their upstreams, newest first."""
    from gitpane.git.adapter import get_branch_refs
    from gitpane.output.terminal import render_refs

    repo_root, cfg = _setup(directory, config, format)
    result = _run(lambda: get_branch_refs(repo_root, cfg.git))
    _emit(result, cfg, render_refs)


# ── rebase ────────────────────────────────────────────────────────────────────


@app.command()
def rebase(
    directory: Optional[Path] = DirectoryOption,
    config: Optional[str] = ConfigOption,
    format: Optional[str] = FormatOption,
) -> None:
    """Report an interactive rebase in progress, if any."""
    from gitpane.git.adapter import get_rebase_status
    from gitpane.output.terminal import render_rebase

    repo_root, cfg = _setup(directory, config, format)
    result = _run(lambda: get_rebase_status(repo_root, cfg.git))
    _emit(result, cfg, render_rebase)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    directory: Optional[Path] = DirectoryOption,
) -> None:
    """Generate a starter .gitpane.toml in the repo root."""
    from gitpane.config.defaults import DEFAULT_TOML
    from gitpane.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root(directory)
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {escape(str(config_path))}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {escape(str(config_path))}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitpane {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git invocations to stderr"),
) -> None:
    """gitpane — typed views of git status, diffs, and rebase state."""
    from gitpane.log import setup_logging

    setup_logging(verbose=verbose)
