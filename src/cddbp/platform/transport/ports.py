"""
Summary: Capability interface shared by the CDDBP line-stream and HTTP bindings.
Why: Session, codec and parser stay transport-agnostic behind one exchange call.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cddbp.features.protocol.usecases.framing import Response


@runtime_checkable
class Transport(Protocol):
    """Send one encoded command line and return the complete framed reply."""

    @property
    def requires_handshake(self) -> bool:
        """True when login is a real ``cddb hello``/``proto`` exchange."""
        ...

    @property
    def peer(self) -> str:
        """Human-readable server address for log records."""
        ...

    def open(self) -> Response | None:
        """Establish the connection; return the server banner if one is sent."""
        ...

    def exchange(self, line: str) -> Response:
        """Send ``line`` and block until its reply is complete."""
        ...

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...


__all__ = ["Transport"]
