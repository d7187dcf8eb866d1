"""Tests for Rich rendering of matches and disc records."""

from io import StringIO

from rich.console import Console

from cddbp.features.protocol.domain.models import Disc, Match, Track
from cddbp.ui.cli.display.disc import DiscDisplay


def _display() -> tuple[DiscDisplay, StringIO]:
    buffer = StringIO()
    console = Console(file=buffer, width=120, color_system=None)
    return DiscDisplay(console=console), buffer


def test_show_matches_marks_pick() -> None:
    display, buffer = _display()
    matches = [Match("rock", "aa0b5d0c", "Artist / Title"), Match("misc", "aa0b5d0c", "Artist / Other")]

    display.show_matches(matches, picked=matches[1])

    out = buffer.getvalue()
    assert "2 match(es)" in out
    assert "→ 1" in out
    assert "Other" in out


def test_show_matches_without_results() -> None:
    display, buffer = _display()

    display.show_matches([])

    assert "No match found." in buffer.getvalue()


def test_show_disc_adds_artist_column_for_compilations() -> None:
    display, buffer = _display()
    disc = Disc(
        title="Summer Hits",
        artist="Various",
        year=2004,
        genre="Pop",
        tracks=(Track(1, "Song One", "Band One"), Track(2, "Song Two", "Band Two")),
        extended_data="Compiled from radio edits",
        revision=3,
    )

    display.show_disc(disc)

    out = buffer.getvalue()
    assert "Various / Summer Hits" in out
    assert "2004 · Pop · rev 3" in out
    assert "Band Two" in out
    assert "Compiled from radio edits" in out
