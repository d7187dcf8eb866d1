"""
Summary: Client for the CDDB/gnudb disc metadata protocol (CDDBP and HTTP).
Why: Resolve a disc fingerprint into artist, title, year, genre and track names.
"""

from cddbp.application.services.lookup_service import (
    DiscLookupService,
    LookupResult,
    ServerSettings,
    build_transport,
    lookup_disc,
)
from cddbp.features.protocol.domain import (
    CddbConnectionError,
    CddbError,
    ClientIdentity,
    Disc,
    Fingerprint,
    LoginFailed,
    MalformedResponse,
    Match,
    ProtocolError,
    SessionClosed,
    SessionStateError,
    Track,
    UnexpectedTermination,
)
from cddbp.features.protocol.usecases.session import Session, SessionState
from cddbp.platform.transport import HttpTransport, LineStreamTransport, Transport

__version__ = "0.1.0"

__all__ = [
    "CddbConnectionError",
    "CddbError",
    "ClientIdentity",
    "Disc",
    "DiscLookupService",
    "Fingerprint",
    "HttpTransport",
    "LineStreamTransport",
    "LoginFailed",
    "LookupResult",
    "MalformedResponse",
    "Match",
    "ProtocolError",
    "ServerSettings",
    "Session",
    "SessionClosed",
    "SessionState",
    "SessionStateError",
    "Track",
    "Transport",
    "UnexpectedTermination",
    "build_transport",
    "lookup_disc",
]
