"""
Summary: Encode CDDBP commands and decode status lines and escaped field values.
Why: Every byte that crosses the wire passes through one set of escaping rules.
"""

from __future__ import annotations

import re
from typing import Final

from cddbp.features.protocol.domain.errors import MalformedResponse
from cddbp.features.protocol.domain.models import ClientIdentity, Fingerprint, Match
from cddbp.features.protocol.domain.status import StatusLine

SENTINEL: Final[str] = "."
QUIT: Final[str] = "quit"

_STATUS_RE: Final[re.Pattern[str]] = re.compile(r"^(\d{3})(?:[ \t](.*))?$")
_UNSAFE_TOKEN_RE: Final[re.Pattern[str]] = re.compile(r"[\s\x00-\x1f\x7f]")
_ESCAPE_RE: Final[re.Pattern[str]] = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES: Final[dict[str, str]] = {"\\": "\\\\", "\n": "\\n", "\t": "\\t"}
_UNESCAPES: Final[dict[str, str]] = {"\\": "\\", "n": "\n", "t": "\t"}


# Commands -------------------------------------------------------------------


def encode(command: str, *args: object) -> str:
    """Join a command and its arguments into one protocol line.

    The returned line carries no terminator; transports add their own.

    Raises:
        ValueError: If a token is empty or contains whitespace or control characters.
    """

    tokens = command.split()
    tokens.extend(str(arg) for arg in args)
    if not tokens:
        raise ValueError("cannot encode an empty command")
    for token in tokens[len(command.split()):]:
        if not token or _UNSAFE_TOKEN_RE.search(token):
            raise ValueError(f"illegal command argument: {token!r}")
    return " ".join(tokens)


def encode_hello(identity: ClientIdentity) -> str:
    return encode("cddb hello", *identity.tokens)


def encode_proto(level: int) -> str:
    return encode("proto", level)


def encode_query(fingerprint: Fingerprint) -> str:
    """Build ``cddb query <discid> <ntracks> <offset>... <seconds>``."""

    return encode(
        "cddb query",
        fingerprint.disc_id,
        fingerprint.track_count,
        *fingerprint.offsets,
        fingerprint.seconds,
    )


def encode_read(match: Match) -> str:
    return encode("cddb read", match.category, match.disc_id)


def decode_query(line: str) -> Fingerprint:
    """Rebuild the fingerprint carried by a ``cddb query`` command line.

    Raises:
        ValueError: If the line is not a well-formed query command.
    """

    tokens = line.split()
    if len(tokens) < 5 or [t.lower() for t in tokens[:2]] != ["cddb", "query"]:
        raise ValueError(f"not a cddb query command: {line!r}")
    disc_id, count_token, *numbers = tokens[2:]
    try:
        count = int(count_token)
        values = [int(value) for value in numbers]
    except ValueError as exc:
        raise ValueError(f"non-numeric query field in {line!r}") from exc
    if count < 0 or len(values) != count + 1:
        raise ValueError(f"track count {count} does not match offsets in {line!r}")
    return Fingerprint(disc_id=disc_id, offsets=tuple(values[:-1]), seconds=values[-1])


# Responses ------------------------------------------------------------------


def decode(raw_line: str) -> StatusLine:
    """Split a raw status line into its numeric code and message.

    Raises:
        MalformedResponse: If the line does not start with a three digit code.
    """

    line = raw_line.rstrip("\r\n")
    match = _STATUS_RE.match(line)
    if match is None:
        raise MalformedResponse(f"not a status line: {line!r}")
    return StatusLine(code=int(match.group(1)), message=match.group(2) or "")


def decode_bytes(raw: bytes) -> str:
    """Decode server text as UTF-8, falling back to ISO-8859-1."""

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("iso-8859-1")


# Escaping -------------------------------------------------------------------


def escape_value(value: str) -> str:
    """Turn newlines, tabs and backslashes into their two-character escapes."""

    return "".join(_ESCAPES.get(char, char) for char in value)


def unescape_value(value: str) -> str:
    """Reverse :func:`escape_value`; unknown escapes are kept verbatim."""

    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(0)), value)


def stuff_dot(line: str) -> str:
    """Double a leading dot so payload never reads as the sentinel."""

    if line.startswith(SENTINEL):
        return SENTINEL + line
    return line


def unstuff_dot(line: str) -> str:
    if line.startswith(SENTINEL * 2):
        return line[1:]
    return line


def escape(text: str) -> str:
    """Render arbitrary text as one safe payload line."""

    return stuff_dot(escape_value(text))


def unescape(line: str) -> str:
    return unescape_value(unstuff_dot(line))


def is_sentinel(line: str) -> bool:
    return line.rstrip("\r\n") == SENTINEL


__all__ = [
    "QUIT",
    "SENTINEL",
    "decode",
    "decode_bytes",
    "decode_query",
    "encode",
    "encode_hello",
    "encode_proto",
    "encode_query",
    "encode_read",
    "escape",
    "escape_value",
    "is_sentinel",
    "stuff_dot",
    "unescape",
    "unescape_value",
    "unstuff_dot",
]
