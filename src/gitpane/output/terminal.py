"""Rich terminal rendering — status table, diff with colored hunks."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from gitpane.git.models import (
    BranchRef,
    ChangeKind,
    DetachedHead,
    Diff,
    Entry,
    LineKind,
    RebaseStatus,
    Status,
    UnbornBranch,
)

_KIND_STYLE = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
    ChangeKind.RENAMED: "cyan",
    ChangeKind.COPIED: "cyan",
    ChangeKind.BINARY: "magenta",
    ChangeKind.TYPE_CHANGED: "blue",
    ChangeKind.UNMERGED: "bold red",
    ChangeKind.COMBINED: "bold red",
}

_LINE_STYLE = {
    LineKind.ADDED: ("+", "green"),
    LineKind.REMOVED: ("-", "red"),
    LineKind.CONTEXT: (" ", ""),
}


def _kind_text(kind: Optional[ChangeKind]) -> Text:
    if kind is None:
        return Text("-", style="dim")
    return Text(kind.value, style=_KIND_STYLE.get(kind, ""))


def _head_line(status: Status) -> Text:
    if isinstance(status.head, DetachedHead):
        line = Text("HEAD detached", style="bold red")
    elif isinstance(status.head, UnbornBranch):
        line = Text(f"On branch {status.head.name} (no commits yet)", style="bold")
    else:
        line = Text(f"On branch {status.head.name}", style="bold")

    if status.upstream:
        line.append(f"  tracking {status.upstream}", style="cyan")
        if status.upstream_gone:
            line.append(" [gone]", style="red")
        if status.ahead:
            line.append(f"  ↑{status.ahead}", style="green")
        if status.behind:
            line.append(f"  ↓{status.behind}", style="red")
    return line


def _entry_state(entry: Entry) -> Text:
    if entry.is_conflicted:
        return Text("conflicted", style="bold red")
    if entry.is_untracked:
        return Text("untracked", style="dim")
    if entry.is_ignored:
        return Text("ignored", style="dim")
    return Text("tracked")


def render_status(status: Status, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(_head_line(status))

    if status.is_clean:
        console.print("[green]Nothing to commit, working tree clean[/green]")
        return

    table = Table(show_lines=False, border_style="dim")
    table.add_column("Path", style="magenta")
    table.add_column("State")
    table.add_column("Staged", justify="center")
    table.add_column("Unstaged", justify="center")

    for entry in status.entries:
        path = Text(entry.path)
        if entry.rename_from:
            path = Text(f"{entry.rename_from} → {entry.path}")
        table.add_row(path, _entry_state(entry), _kind_text(entry.staged_kind), _kind_text(entry.unstaged_kind))

    console.print(table)


def render_diff(diff: Diff, console: Optional[Console] = None) -> None:
    console = console or Console()
    if diff.is_empty:
        console.print("[dim]No changes.[/dim]")
        return

    for change in diff:
        title = Text(change.path, style="bold")
        if change.old_path and change.new_path and change.old_path != change.new_path:
            title = Text(f"{change.old_path} → {change.new_path}", style="bold")
        title.append("  ")
        title.append_text(_kind_text(change.kind))
        if change.similarity is not None:
            title.append(f" ({change.similarity}%)", style="dim")
        console.print(title)

        for hunk in change.hunks:
            console.print(Text(hunk.header, style="cyan"))
            for line in hunk.lines:
                prefix, style = _LINE_STYLE[line.kind]
                console.print(Text(prefix + line.text, style=style), highlight=False)
                if line.no_newline_at_eof:
                    console.print(Text("\\ No newline at end of file", style="dim"))
        console.print()


def render_refs(refs: List[BranchRef], console: Optional[Console] = None) -> None:
    console = console or Console()
    table = Table(border_style="dim")
    table.add_column("Branch", style="green")
    table.add_column("Upstream", style="cyan")
    table.add_column("Subject")
    for ref in refs:
        table.add_row(Text(ref.name), Text(ref.upstream or "-"), Text(ref.subject))
    console.print(table)


def render_rebase(rebase: Optional[RebaseStatus], console: Optional[Console] = None) -> None:
    console = console or Console()
    if rebase is None:
        console.print("[dim]No rebase in progress.[/dim]")
        return
    console.print(
        f"[bold]Rebasing[/bold] [green]{escape(rebase.head_name)}[/green] onto [cyan]{escape(rebase.onto)}[/cyan]"
    )


def render_text(text: str, console: Optional[Console] = None) -> None:
    """Print git's own (possibly ANSI-colored) output unchanged."""
    console = console or Console()
    console.print(Text.from_ansi(text.rstrip("\n")), highlight=False)
