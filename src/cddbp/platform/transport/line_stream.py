"""Where: src/cddbp/platform/transport/line_stream.py
What: CDDBP binding over a persistent TCP connection (gnudb port 8880).
Why: The native protocol keeps login state on the socket, so one connection
     serves the greeting, the handshake and every subsequent command.
"""

from __future__ import annotations

import socket
from collections.abc import Callable
from typing import BinaryIO

from cddbp.config.settings import CDDBP_PORT, SERVER_HOST, TIMEOUT_SECONDS
from cddbp.features.protocol.domain.errors import CddbConnectionError
from cddbp.features.protocol.usecases.codec import decode_bytes
from cddbp.features.protocol.usecases.framing import Response, read_response
from cddbp.platform.logging import logger

from .events import log_command, log_response

Connector = Callable[[tuple[str, int], float], socket.socket]


class LineStreamTransport:
    """Line-oriented socket transport.

    Not safe to share between threads: one command is in flight at a time.
    """

    requires_handshake: bool = True

    def __init__(
        self,
        host: str = SERVER_HOST,
        port: int = CDDBP_PORT,
        timeout: float = TIMEOUT_SECONDS,
        connector: Connector = socket.create_connection,
    ) -> None:
        self.host: str = host
        self.port: int = port
        self.timeout: float = timeout
        self._connector: Connector = connector
        self._sock: socket.socket | None = None
        self._reader: BinaryIO | None = None

    @property
    def peer(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> Response:
        """Connect and return the server banner."""

        if self._sock is not None:
            raise CddbConnectionError(f"already connected to {self.peer}")
        try:
            self._sock = self._connector((self.host, self.port), self.timeout)
        except OSError as exc:
            raise CddbConnectionError(f"cannot connect to {self.peer}: {exc}") from exc
        self._reader = self._sock.makefile("rb")
        logger.debug("Connected to %s", self.peer)
        return self._receive()

    def exchange(self, line: str) -> Response:
        if self._sock is None:
            raise CddbConnectionError(f"not connected to {self.peer}")
        try:
            self._sock.sendall(f"{line}\n".encode("utf-8"))
        except OSError as exc:
            raise CddbConnectionError(f"send to {self.peer} failed: {exc}") from exc
        log_command(self.peer, line)
        return self._receive()

    def close(self) -> None:
        sock, reader = self._sock, self._reader
        self._sock = None
        self._reader = None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # Peer may already have closed its end after "quit".
            logger.debug("Shutdown of %s: %s", self.peer, exc)
        if reader is not None:
            reader.close()
        sock.close()
        logger.debug("Disconnected from %s", self.peer)

    def _receive(self) -> Response:
        response = read_response(self._read_line)
        log_response(self.peer, response)
        return response

    def _read_line(self) -> str | None:
        if self._reader is None:
            return None
        try:
            raw = self._reader.readline()
        except OSError as exc:
            raise CddbConnectionError(f"read from {self.peer} failed: {exc}") from exc
        if not raw:
            return None
        return decode_bytes(raw).rstrip("\r\n")


__all__ = ["Connector", "LineStreamTransport"]
