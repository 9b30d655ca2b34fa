"""Display and formatting service for marker and sync information"""
from pathlib import Path
from typing import Dict, List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_subrepo_keeper.constants import ROOT_PREFIX
from git_subrepo_keeper.logging_config import get_logger
from git_subrepo_keeper.models.marker import Marker, MarkerEntry, SyncResult

console = Console()
logger = get_logger(__name__)

MARKER_COLUMNS = ["Directory", "Remote", "Branch", "Recorded Root", "Notes"]


class DisplayService:
    def __init__(self, verbose: bool = False, debug: bool = False):
        self.verbose = verbose
        self.debug_mode = debug

    def display_marker_created(self, directory: Path, marker: Marker) -> None:
        console.print(
            f"[green]Tracking {escape(str(directory))} -> "
            f"{escape(marker.url)} ({escape(marker.branch)})[/green]"
        )

    def display_sync_result(self, result: SyncResult) -> None:
        """Report a finished push or pull."""
        resolved = result.resolved
        if resolved.marker_updated:
            console.print(
                f"[yellow]Marker branch updated to '{escape(resolved.effective_branch)}'[/yellow]"
            )
        if self.verbose or self.debug_mode:
            console.print(
                f"[dim]Subrepo: {escape(str(resolved.subrepo_dir))} | Prefix: {escape(resolved.prefix)}[/dim]"
            )
        if result.output:
            console.print(result.output, markup=False, highlight=False)

        verb = "Pushed" if result.operation == "push" else "Pulled"
        direction = "to" if result.operation == "push" else "from"
        console.print(
            f"[green]{verb} {escape(resolved.prefix)} {direction} "
            f"{escape(resolved.marker.url)} ({escape(resolved.effective_branch)})[/green]"
        )

    def display_marker_table(self, entries: List[MarkerEntry], repo_root: Path) -> None:
        """Display a table of every marker in the repository."""
        if not entries:
            console.print("[yellow]No tracked subrepos found[/yellow]")
            return

        table = Table()
        for label in MARKER_COLUMNS:
            table.add_column(label)

        for entry in entries:
            if entry.directory == repo_root:
                directory = ROOT_PREFIX
            else:
                directory = entry.directory.relative_to(repo_root).as_posix()

            if entry.marker is None:
                table.add_row(escape(directory), "", "", "", escape(f"corrupt: {entry.error}"), style="red")
                continue

            notes = ""
            style = None
            if entry.marker.recorded_root != str(repo_root):
                notes = "repository moved"
                style = "yellow"
            table.add_row(
                escape(directory),
                escape(entry.marker.url),
                escape(entry.marker.branch),
                escape(entry.marker.recorded_root),
                notes,
                style=style,
            )

        console.print(table)

    def display_aliases(self, aliases: Dict[str, str], scope: str) -> None:
        console.print(f"[green]Installed git aliases ({scope}):[/green]")
        for alias, value in aliases.items():
            console.print(f"  git {alias} -> {value}", markup=False, highlight=False)

    def display_split_summary(self, folder: str) -> None:
        console.print("[green]Done![/green] You can now use:")
        console.print(f"  git subpush {folder}", markup=False)
        console.print(f"  git subpull {folder}", markup=False)
