"""
Summary: Exception taxonomy raised by the CDDBP protocol engine.
Why: Callers branch on failure kind and numeric server codes without parsing text.
"""

from __future__ import annotations


class CddbError(Exception):
    """Base class for every failure raised by the client."""


class CddbConnectionError(CddbError, ConnectionError):
    """Transport could not be established or was lost mid-exchange."""


class _CodedError(CddbError):
    """Failure carrying the server's status code and message verbatim."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"{code} {message}".rstrip())
        self.code: int = code
        self.message: str = message


class LoginFailed(_CodedError):
    """Server rejected the handshake; the connection is no longer usable."""


class ProtocolError(_CodedError):
    """Server answered with a recognized but non-success status."""


class MalformedResponse(CddbError):
    """Received text could not be interpreted as a protocol response."""


class UnexpectedTermination(MalformedResponse):
    """End of stream arrived before a response was complete."""


class SessionStateError(CddbError):
    """Operation is not legal in the session's current state."""


class SessionClosed(SessionStateError):
    """Operation attempted after the session was closed."""


__all__ = [
    "CddbConnectionError",
    "CddbError",
    "LoginFailed",
    "MalformedResponse",
    "ProtocolError",
    "SessionClosed",
    "SessionStateError",
    "UnexpectedTermination",
]
