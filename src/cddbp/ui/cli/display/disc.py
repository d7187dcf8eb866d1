"""Rendering of query matches and disc records for the CLI."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from cddbp.features.protocol.domain.models import Disc, Match


class DiscDisplay:
    """Print matches and disc records with Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()

    def show_matches(self, matches: Sequence[Match], picked: Match | None = None) -> None:
        """Render the candidate list, marking the picked entry.

        Args:
            matches: Candidates in server order.
            picked: Candidate that was read, if any.
        """
        if not matches:
            self.console.print("[yellow]No match found.[/yellow]")
            return

        table = Table(title=f"{len(matches)} match(es)", show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("Category", style="cyan")
        table.add_column("Disc ID", style="magenta")
        table.add_column("Artist")
        table.add_column("Title", style="bold")
        for index, match in enumerate(matches):
            marker = "→ " if picked is not None and match == picked else ""
            table.add_row(
                f"{marker}{index}",
                match.category,
                match.disc_id,
                match.artist,
                match.album,
            )
        self.console.print(table)

    def show_disc(self, disc: Disc) -> None:
        """Render a full disc record."""

        header = disc.display_title or "(untitled)"
        details = [
            part
            for part in (
                str(disc.year) if disc.year is not None else None,
                disc.genre,
                f"rev {disc.revision}" if disc.revision is not None else None,
            )
            if part
        ]
        self.console.print(f"\n[bold]{header}[/bold]")
        if details:
            self.console.print(f"[dim]{' · '.join(details)}[/dim]")

        table = Table(show_header=True, show_edge=False)
        table.add_column("No.", justify="right", style="dim")
        table.add_column("Title")
        if disc.is_various_artists:
            table.add_column("Artist", style="cyan")
        for track in disc.tracks:
            row = [str(track.number), track.title]
            if disc.is_various_artists:
                row.append(track.artist)
            table.add_row(*row)
        self.console.print(table)

        if disc.extended_data.strip():
            self.console.print(f"\n[dim]{disc.extended_data.strip()}[/dim]")


__all__ = ["DiscDisplay"]
