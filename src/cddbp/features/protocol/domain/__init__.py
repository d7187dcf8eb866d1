"""
Summary: Domain values and errors of the CDDBP protocol engine.
Why: Expose one import path for types shared by codec, parser and session.
"""

from .errors import (
    CddbConnectionError,
    CddbError,
    LoginFailed,
    MalformedResponse,
    ProtocolError,
    SessionClosed,
    SessionStateError,
    UnexpectedTermination,
)
from .models import ClientIdentity, Disc, Fingerprint, Match, Track, split_artist_title
from .status import StatusLine

__all__ = [
    "ClientIdentity",
    "CddbConnectionError",
    "CddbError",
    "Disc",
    "Fingerprint",
    "LoginFailed",
    "MalformedResponse",
    "Match",
    "ProtocolError",
    "SessionClosed",
    "SessionStateError",
    "StatusLine",
    "Track",
    "UnexpectedTermination",
    "split_artist_title",
]
