"""
Summary: Turn framed login, query and read responses into typed results.
Why: Keep status-code interpretation and xmcd record parsing out of the session.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

from cddbp.features.protocol.domain import status as codes
from cddbp.features.protocol.domain.errors import (
    LoginFailed,
    MalformedResponse,
    ProtocolError,
)
from cddbp.features.protocol.domain.models import (
    Disc,
    Match,
    split_artist_title,
    tracks_from_titles,
)
from cddbp.platform.logging import logger

from .codec import unescape_value
from .framing import Response

_KEY_VALUE_RE: Final[re.Pattern[str]] = re.compile(r"^([A-Za-z][A-Za-z0-9_]*)=(.*)$")
_INDEXED_KEY_RE: Final[re.Pattern[str]] = re.compile(r"^(TTITLE|EXTT)(\d+)$")
_EXTD_YEAR_RE: Final[re.Pattern[str]] = re.compile(r"YEAR:\s*(\S+)")

_OFFSETS_HEADER_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*Track frame offsets:?\s*$", re.I)
_OFFSET_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*(\d+)\s*$")
_LENGTH_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*Disc length:\s*(\d+)", re.I)
_REVISION_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*Revision:\s*(\d+)", re.I)
_SUBMITTED_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*Submitted via:\s*(.+?)\s*$", re.I)
_PROCESSED_RE: Final[re.Pattern[str]] = re.compile(r"^#\s*Processed by:\s*(.+?)\s*$", re.I)

_STRUCTURED_KEYS: Final[frozenset[str]] = frozenset(
    {"DISCID", "DTITLE", "DYEAR", "DGENRE", "EXTD", "PLAYORDER"}
)
_MAX_YEAR: Final[int] = 9999


def parse_login(response: Response) -> None:
    """Accept a greeting or ``cddb hello`` reply.

    Raises:
        LoginFailed: Unless the status class is success.
    """

    if not response.status.is_success:
        raise LoginFailed(response.code, response.message)


def parse_proto(response: Response) -> None:
    """Accept a ``proto`` reply, including "already at that level".

    Raises:
        LoginFailed: For any other non-success status.
    """

    if response.code == codes.PROTO_ALREADY:
        logger.debug("Protocol level unchanged: %s", response.message)
        return
    parse_login(response)


def parse_query(response: Response) -> list[Match]:
    """Build the candidate list from a ``cddb query`` reply.

    Raises:
        ProtocolError: For any status other than a match or a no-match.
        MalformedResponse: If a match cannot be split into its three fields.
    """

    code = response.code
    if code == codes.QUERY_EXACT:
        return [parse_match_line(response.message)]
    if code == codes.QUERY_NO_MATCH:
        logger.debug("No match: %s", response.message)
        return []
    if code in (codes.QUERY_EXACT_MULTIPLE, codes.QUERY_INEXACT):
        return [parse_match_line(line) for line in response.lines if line.strip()]
    raise ProtocolError(code, response.message)


def parse_match_line(line: str) -> Match:
    """Split ``<category> <discid> <display title>`` into a match."""

    fields = line.strip().split(None, 2)
    if len(fields) < 3:
        raise MalformedResponse(f"match needs category, disc id and title: {line!r}")
    genre, disc_id, title = fields
    return Match(genre=genre, disc_id=disc_id, title=title)


def parse_read(response: Response, category: str | None = None) -> Disc:
    """Build a disc from a ``cddb read`` reply.

    Args:
        response: Framed server reply.
        category: Category the read was issued for; used when ``DGENRE`` is absent.

    Raises:
        ProtocolError: Unless the reply is ``210``.
    """

    if response.code != codes.READ_OK:
        raise ProtocolError(response.code, response.message)
    return build_disc(response.lines, category=category)


def build_disc(lines: Iterable[str], category: str | None = None) -> Disc:
    """Parse an xmcd record (comment header plus ``KEY=value`` lines).

    Values of repeated keys are concatenated in arrival order before they are
    unescaped. Keys without a dedicated field end up in ``Disc.extra``.

    Raises:
        MalformedResponse: If a line is neither a comment nor ``KEY=value``.
    """

    fields: dict[str, str] = {}
    offsets: list[int] = []
    in_offsets = False
    length_seconds: int | None = None
    revision: int | None = None
    submitted_via: str | None = None
    processed_by: str | None = None

    for line in lines:
        if not line.strip():
            continue
        if line.startswith("#"):
            if _OFFSETS_HEADER_RE.match(line):
                in_offsets = True
                continue
            offset_match = _OFFSET_RE.match(line)
            if in_offsets and offset_match:
                offsets.append(int(offset_match.group(1)))
                continue
            in_offsets = False
            if m := _LENGTH_RE.match(line):
                length_seconds = int(m.group(1))
            elif m := _REVISION_RE.match(line):
                revision = int(m.group(1))
            elif m := _SUBMITTED_RE.match(line):
                submitted_via = m.group(1)
            elif m := _PROCESSED_RE.match(line):
                processed_by = m.group(1)
            continue

        pair = _KEY_VALUE_RE.match(line)
        if pair is None:
            raise MalformedResponse(f"expected KEY=value in disc record: {line!r}")
        key, value = pair.group(1).upper(), pair.group(2)
        fields[key] = fields.get(key, "") + value

    values = {key: unescape_value(value) for key, value in fields.items()}

    artist, title = split_artist_title(values.get("DTITLE", ""))
    extended_data = values.get("EXTD", "")
    year = _parse_year(values.get("DYEAR", ""))
    if year is None:
        year = _year_from_extended(extended_data)
    genre = values.get("DGENRE", "").strip() or category

    titles: dict[int, str] = {}
    track_extended: dict[int, str] = {}
    extra: dict[str, str] = {}
    for key, value in values.items():
        indexed = _INDEXED_KEY_RE.match(key)
        if indexed:
            target = titles if indexed.group(1) == "TTITLE" else track_extended
            target[int(indexed.group(2))] = value
        elif key not in _STRUCTURED_KEYS:
            extra[key] = value

    return Disc(
        title=title,
        artist=artist,
        year=year,
        genre=genre,
        tracks=tracks_from_titles(titles, artist, track_extended),
        extended_data=extended_data,
        category=category,
        disc_ids=tuple(
            part.strip() for part in values.get("DISCID", "").split(",") if part.strip()
        ),
        play_order=_parse_play_order(values.get("PLAYORDER", "")),
        extra=extra,
        track_offsets=tuple(offsets),
        length_seconds=length_seconds,
        revision=revision,
        submitted_via=submitted_via,
        processed_by=processed_by,
    )


def _parse_year(value: str) -> int | None:
    value = value.strip()
    if not value:
        return None
    try:
        year = int(value)
    except ValueError:
        logger.debug("Ignoring non-numeric year %r", value)
        return None
    if not 0 < year <= _MAX_YEAR:
        logger.debug("Ignoring out-of-range year %r", value)
        return None
    return year


def _year_from_extended(extended_data: str) -> int | None:
    # Pre-level-5 records only carry the year inside EXTD as "YEAR: 1978".
    match = _EXTD_YEAR_RE.search(extended_data)
    if match is None:
        return None
    return _parse_year(match.group(1))


def _parse_play_order(value: str) -> tuple[int, ...]:
    order: list[int] = []
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            order.append(int(token))
        except ValueError:
            logger.debug("Ignoring non-numeric PLAYORDER entry %r", token)
    return tuple(order)


__all__ = [
    "build_disc",
    "parse_login",
    "parse_proto",
    "parse_match_line",
    "parse_query",
    "parse_read",
]
