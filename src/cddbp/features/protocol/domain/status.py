"""
Summary: Status line value object and CDDBP response-code vocabulary.
Why: Keep the digit-class rules of the protocol in one place for codec and parser.

Server response code (three digits):

First digit:
    1xx  Informative message
    2xx  Command OK
    3xx  Command OK so far, continue
    4xx  Command OK, but cannot be performed for some specified reason
    5xx  Command unimplemented, incorrect, or program error

Second digit:
    x0x  Ready for further commands
    x1x  More server-to-client output follows (until terminating marker)
    x2x  More client-to-server input follows (until terminating marker)
    x3x  Connection will close
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

# Greeting
GREETING_OK: Final[int] = 200
GREETING_READ_ONLY: Final[int] = 201

# proto
PROTO_ALREADY: Final[int] = 502

# cddb query
QUERY_EXACT: Final[int] = 200
QUERY_NO_MATCH: Final[int] = 202
QUERY_EXACT_MULTIPLE: Final[int] = 210
QUERY_INEXACT: Final[int] = 211

# cddb read
READ_OK: Final[int] = 210

# quit
CLOSING: Final[int] = 230


@dataclass(frozen=True, slots=True)
class StatusLine:
    """Decoded first line of a server response."""

    code: int
    message: str

    @property
    def category(self) -> int:
        """Return the leading digit of the code."""

        return self.code // 100

    @property
    def more_follows(self) -> bool:
        """Return whether a sentinel-terminated block follows this line."""

        return (self.code // 10) % 10 == 1

    @property
    def is_success(self) -> bool:
        return self.category in (1, 2)

    def __str__(self) -> str:
        return f"{self.code} {self.message}".rstrip()


__all__ = [
    "CLOSING",
    "GREETING_OK",
    "GREETING_READ_ONLY",
    "PROTO_ALREADY",
    "QUERY_EXACT",
    "QUERY_EXACT_MULTIPLE",
    "QUERY_INEXACT",
    "QUERY_NO_MATCH",
    "READ_OK",
    "StatusLine",
]
