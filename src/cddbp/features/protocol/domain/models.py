"""
Summary: Immutable records exchanged with CDDBP servers (fingerprint, match, disc).
Why: Give callers typed values instead of the protocol's raw KEY=value text.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final

ARTIST_TITLE_SEPARATOR: Final[str] = " / "
VARIOUS_ARTISTS: Final[frozenset[str]] = frozenset({"various", "various artists"})


def split_artist_title(value: str) -> tuple[str, str]:
    """Split a ``artist / title`` display string.

    The spaced separator wins so that names such as ``AC/DC`` stay intact; a bare
    ``/`` is only used when no spaced one exists. Without any separator the whole
    value is the title and the artist is empty.
    """

    if ARTIST_TITLE_SEPARATOR in value:
        artist, title = value.split(ARTIST_TITLE_SEPARATOR, 1)
    elif "/" in value:
        artist, title = value.split("/", 1)
    else:
        return "", value.strip()
    return artist.strip(), title.strip()


@dataclass(frozen=True, slots=True)
class ClientIdentity:
    """Who is asking, as announced by ``cddb hello`` and the HTTP ``hello`` field."""

    user: str
    host: str
    client_name: str
    client_version: str

    @property
    def tokens(self) -> tuple[str, str, str, str]:
        return (self.user, self.host, self.client_name, self.client_version)

    def hello_string(self) -> str:
        return " ".join(self.tokens)


@dataclass(frozen=True, slots=True)
class Fingerprint:
    """Disc lookup key computed externally from the medium's table of contents."""

    disc_id: str
    offsets: tuple[int, ...]
    seconds: int

    def __post_init__(self) -> None:
        # Accept any sequence from callers while keeping the value hashable.
        if not isinstance(self.offsets, tuple):
            object.__setattr__(self, "offsets", tuple(self.offsets))

    @property
    def track_count(self) -> int:
        return len(self.offsets)


@dataclass(frozen=True, slots=True)
class Match:
    """One candidate returned by ``cddb query``.

    ``title`` is the server's display title, conventionally ``artist / title``.
    """

    genre: str
    disc_id: str
    title: str

    @property
    def category(self) -> str:
        """Alias used by the protocol for the genre directory."""

        return self.genre

    @property
    def artist(self) -> str:
        return split_artist_title(self.title)[0]

    @property
    def album(self) -> str:
        return split_artist_title(self.title)[1]


@dataclass(frozen=True, slots=True)
class Track:
    """One track of a disc record; ``number`` is 1-based."""

    number: int
    title: str
    artist: str
    extended_data: str = ""


@dataclass(frozen=True, slots=True)
class Disc:
    """Full metadata record produced by ``cddb read``."""

    title: str
    artist: str
    year: int | None = None
    genre: str | None = None
    tracks: tuple[Track, ...] = ()
    extended_data: str = ""
    category: str | None = None
    disc_ids: tuple[str, ...] = ()
    play_order: tuple[int, ...] = ()
    extra: Mapping[str, str] = field(default_factory=dict)
    track_offsets: tuple[int, ...] = ()
    length_seconds: int | None = None
    revision: int | None = None
    submitted_via: str | None = None
    processed_by: str | None = None

    @property
    def track_titles(self) -> tuple[str, ...]:
        return tuple(track.title for track in self.tracks)

    @property
    def display_title(self) -> str:
        """Return the ``artist / title`` form used by query matches."""

        if not self.artist:
            return self.title
        return f"{self.artist}{ARTIST_TITLE_SEPARATOR}{self.title}"

    @property
    def is_various_artists(self) -> bool:
        return self.artist.strip().lower() in VARIOUS_ARTISTS


def tracks_from_titles(
    titles: Mapping[int, str],
    artist: str,
    extended: Mapping[int, str] | None = None,
) -> tuple[Track, ...]:
    """Build tracks from zero-based ``TTITLE`` indices, ordered by index."""

    various = artist.strip().lower() in VARIOUS_ARTISTS
    extended = extended or {}
    tracks: list[Track] = []
    for index in sorted(titles):
        raw_title = titles[index]
        track_artist, track_title = artist, raw_title
        if various and ARTIST_TITLE_SEPARATOR in raw_title:
            track_artist, track_title = split_artist_title(raw_title)
        tracks.append(
            Track(
                number=index + 1,
                title=track_title,
                artist=track_artist,
                extended_data=extended.get(index, ""),
            )
        )
    return tuple(tracks)


__all__ = [
    "ClientIdentity",
    "Disc",
    "Fingerprint",
    "Match",
    "Track",
    "split_artist_title",
    "tracks_from_titles",
]
