"""
Summary: Session state machine driving connect, login, query, read and close.
Why: Enforce legal operation order and guaranteed release of one server connection.
"""

from __future__ import annotations

import weakref
from enum import Enum
from types import TracebackType
from typing import Final

from cddbp.config.identity import resolve_client_identity
from cddbp.config.settings import PROTOCOL_LEVEL
from cddbp.features.protocol.domain import status as codes
from cddbp.features.protocol.domain.errors import (
    CddbConnectionError,
    CddbError,
    LoginFailed,
    MalformedResponse,
    SessionClosed,
    SessionStateError,
)
from cddbp.features.protocol.domain.models import ClientIdentity, Disc, Fingerprint, Match
from cddbp.platform.logging import logger
from cddbp.platform.transport.ports import Transport

from .codec import QUIT, encode_hello, encode_proto, encode_query, encode_read
from .framing import Response
from .parser import parse_login, parse_proto, parse_query, parse_read

_GREETING_CODES: Final[frozenset[int]] = frozenset(
    {codes.GREETING_OK, codes.GREETING_READ_ONLY}
)


class SessionState(str, Enum):
    """Lifecycle of one logical server connection."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    LOGGED_IN = "logged_in"
    CLOSED = "closed"


def _release(transport: Transport) -> None:
    transport.close()


class Session:
    """One logical CDDBP connection.

    A session owns its transport exclusively and is not safe to call from two
    concurrent call sites: exactly one request is in flight at a time. The
    transport is shut down on every exit path, including when an unclosed
    session is garbage collected.

    Example::

        with Session.open(LineStreamTransport()) as session:
            matches = session.query(fingerprint)
            disc = session.read(matches[0])
    """

    def __init__(
        self,
        transport: Transport,
        identity: ClientIdentity | None = None,
        protocol_level: int = PROTOCOL_LEVEL,
    ) -> None:
        self._transport: Transport = transport
        self._identity: ClientIdentity | None = identity
        self._protocol_level: int = protocol_level
        self._state: SessionState = SessionState.DISCONNECTED
        self._issued: dict[Match, Fingerprint] = {}
        self._finalizer: weakref.finalize = weakref.finalize(self, _release, transport)

    @classmethod
    def open(
        cls,
        transport: Transport,
        identity: ClientIdentity | None = None,
        protocol_level: int = PROTOCOL_LEVEL,
    ) -> "Session":
        """Create a session, connect and log in."""

        session = cls(transport, identity=identity, protocol_level=protocol_level)
        session.connect()
        session.login()
        return session

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def transport(self) -> Transport:
        return self._transport

    # Lifecycle -----------------------------------------------------------------

    def connect(self) -> None:
        """Establish the transport and accept the server banner.

        Raises:
            CddbConnectionError: If the server cannot be reached or refuses us.
        """

        self._require(SessionState.DISCONNECTED, "connect")
        try:
            greeting = self._transport.open()
        except (CddbConnectionError, MalformedResponse):
            self._transport.close()
            raise
        if greeting is not None and greeting.code not in _GREETING_CODES:
            self._transport.close()
            raise CddbConnectionError(f"server refused connection: {greeting.status}")
        self._set_state(SessionState.CONNECTED)

    def login(self) -> None:
        """Perform the ``cddb hello`` and ``proto`` handshake.

        A no-op exchange for transports that authenticate every request.

        Raises:
            LoginFailed: If the server rejects either step; the session drops
                back to ``DISCONNECTED`` and must be reconnected.
        """

        self._require(SessionState.CONNECTED, "login")
        if self._transport.requires_handshake:
            identity = self._identity or resolve_client_identity()
            try:
                parse_login(self._exchange(encode_hello(identity)))
                parse_proto(self._exchange(encode_proto(self._protocol_level)))
            except LoginFailed:
                self._drop()
                raise
        self._set_state(SessionState.LOGGED_IN)

    def close(self) -> None:
        """Say ``quit`` when a stream is still up, then release the transport."""

        if self._state is SessionState.CLOSED:
            return
        try:
            if self._transport.requires_handshake and self._state in (
                SessionState.CONNECTED,
                SessionState.LOGGED_IN,
            ):
                reply = self._transport.exchange(QUIT)
                if reply.code != codes.CLOSING:
                    logger.debug("Unexpected reply to quit: %s", reply.status)
        except CddbError as exc:
            logger.warning("Closing handshake with %s failed: %s", self._transport.peer, exc)
        finally:
            self._finalizer()
            self._issued.clear()
            self._set_state(SessionState.CLOSED)

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # Operations ----------------------------------------------------------------

    def query(self, fingerprint: Fingerprint) -> list[Match]:
        """Return the candidates for ``fingerprint``; empty when nothing matches.

        Raises:
            SessionStateError: Before a successful login.
            SessionClosed: After close.
            ProtocolError: For error statuses reported by the server.
        """

        self._require(SessionState.LOGGED_IN, "query")
        matches = parse_query(self._exchange(encode_query(fingerprint)))
        for match in matches:
            self._issued[match] = fingerprint
        logger.info(
            "%d match(es) for disc %s", len(matches), fingerprint.disc_id
        )
        return matches

    def read(self, match: Match) -> Disc:
        """Fetch the full record for a match returned by :meth:`query`.

        Raises:
            SessionStateError: Before login, or for a match this session never returned.
            SessionClosed: After close.
            ProtocolError: If the server cannot deliver the entry.
        """

        self._require(SessionState.LOGGED_IN, "read")
        fingerprint = self._issued.get(match)
        if fingerprint is None:
            raise SessionStateError(
                f"match {match.category}/{match.disc_id} was not returned by this session"
            )
        disc = parse_read(self._exchange(encode_read(match)), category=match.category)
        if len(disc.tracks) != fingerprint.track_count:
            logger.warning(
                "Disc %s lists %d track title(s) but the fingerprint has %d track(s)",
                match.disc_id,
                len(disc.tracks),
                fingerprint.track_count,
            )
        return disc

    # Internals -----------------------------------------------------------------

    def _exchange(self, line: str) -> Response:
        try:
            return self._transport.exchange(line)
        except (CddbConnectionError, MalformedResponse):
            # Stream framing is unknown after either failure.
            self._drop()
            raise

    def _drop(self) -> None:
        self._transport.close()
        self._issued.clear()
        self._set_state(SessionState.DISCONNECTED)

    def _require(self, expected: SessionState, operation: str) -> None:
        if self._state is SessionState.CLOSED:
            raise SessionClosed(f"cannot {operation}: session is closed")
        if self._state is not expected:
            raise SessionStateError(
                f"cannot {operation} while {self._state.value}; expected {expected.value}"
            )

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        previous, self._state = self._state, state
        logger.debug(
            "session %s -> %s",
            previous.value,
            state.value,
            extra={
                "cddbp_event": "cddbp.session.state",
                "previous_state": previous.value,
                "state": state.value,
                "peer": self._transport.peer,
            },
        )


__all__ = ["Session", "SessionState"]
