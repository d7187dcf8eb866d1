"""Application service for resolving a disc fingerprint into metadata.

This layer centralizes transport construction and the query-then-read
orchestration so that the CLI and library callers reuse one use case.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, final

from cddbp.config.identity import resolve_client_identity
from cddbp.config.settings import (
    CDDBP_PORT,
    HTTP_PATH,
    HTTP_PORT,
    PROTOCOL_LEVEL,
    SERVER_HOST,
    TIMEOUT_SECONDS,
    TRANSPORT,
)
from cddbp.features.protocol.domain.models import ClientIdentity, Disc, Fingerprint, Match
from cddbp.features.protocol.usecases.session import Session
from cddbp.platform.logging import logger
from cddbp.platform.transport import HttpTransport, LineStreamTransport, Transport

TransportKind = Literal["cddbp", "http"]


@dataclass(frozen=True)
class ServerSettings:
    """Where and how to reach the server.

    Attributes:
        host: Server host name.
        port: Port override; ``None`` selects the default for the transport kind.
        http_path: CGI path used by the HTTP binding.
        protocol_level: CDDBP level requested after login.
        timeout: Connect/read timeout in seconds.
    """

    host: str = SERVER_HOST
    port: int | None = None
    http_path: str = HTTP_PATH
    protocol_level: int = PROTOCOL_LEVEL
    timeout: float = TIMEOUT_SECONDS


def build_transport(
    kind: TransportKind,
    settings: ServerSettings | None = None,
    identity: ClientIdentity | None = None,
) -> Transport:
    """Create the transport binding for ``kind``.

    Raises:
        ValueError: For an unknown transport kind.
    """

    settings = settings or ServerSettings()
    if kind == "cddbp":
        return LineStreamTransport(
            host=settings.host,
            port=settings.port or CDDBP_PORT,
            timeout=settings.timeout,
        )
    if kind == "http":
        return HttpTransport(
            host=settings.host,
            port=settings.port or HTTP_PORT,
            path=settings.http_path,
            identity=identity,
            protocol_level=settings.protocol_level,
            timeout=settings.timeout,
        )
    raise ValueError(f"unknown transport kind: {kind!r}")


@dataclass(frozen=True)
class LookupResult:
    """Outcome of one lookup: every candidate plus the disc read for the pick."""

    matches: list[Match] = field(default_factory=list)
    disc: Disc | None = None
    picked: Match | None = None


@final
class DiscLookupService:
    """Open a session, query a fingerprint, read one match, always close."""

    def __init__(
        self,
        *,
        kind: TransportKind = TRANSPORT,  # pyright: ignore[reportArgumentType]
        settings: ServerSettings | None = None,
        identity: ClientIdentity | None = None,
        transport_factory: Callable[[], Transport] | None = None,
    ) -> None:
        """Create a service with an overridable transport factory.

        Tests inject in-memory transports while production code builds the
        configured socket or HTTP binding.
        """

        self._settings: ServerSettings = settings or ServerSettings()
        self._identity: ClientIdentity = identity or resolve_client_identity()
        self._transport_factory: Callable[[], Transport] = transport_factory or (
            lambda: build_transport(kind, self._settings, self._identity)
        )

    def query(self, fingerprint: Fingerprint) -> list[Match]:
        """Return all candidates without reading any of them."""

        with self._open_session() as session:
            return session.query(fingerprint)

    def lookup(self, fingerprint: Fingerprint, pick: int = 0) -> LookupResult:
        """Query ``fingerprint`` and read the candidate at index ``pick``.

        Returns:
            LookupResult: ``disc`` is ``None`` when the server has no match.

        Raises:
            IndexError: If ``pick`` is outside the returned candidates.
        """

        with self._open_session() as session:
            matches = session.query(fingerprint)
            if not matches:
                logger.info("No match for disc %s", fingerprint.disc_id)
                return LookupResult(matches=matches)
            if not 0 <= pick < len(matches):
                raise IndexError(f"pick {pick} outside {len(matches)} match(es)")
            chosen = matches[pick]
            disc = session.read(chosen)
            return LookupResult(matches=matches, disc=disc, picked=chosen)

    def _open_session(self) -> Session:
        return Session.open(
            self._transport_factory(),
            identity=self._identity,
            protocol_level=self._settings.protocol_level,
        )


def lookup_disc(fingerprint: Fingerprint, kind: TransportKind = "cddbp") -> Disc | None:
    """Resolve ``fingerprint`` with default settings, taking the first match."""

    return DiscLookupService(kind=kind).lookup(fingerprint).disc


__all__ = [
    "DiscLookupService",
    "LookupResult",
    "ServerSettings",
    "TransportKind",
    "build_transport",
    "lookup_disc",
]
