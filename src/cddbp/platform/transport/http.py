"""Where: src/cddbp/platform/transport/http.py
What: CDDBP binding over HTTP GET requests to ``cddb.cgi``.
Why: Firewalled clients can only reach port 80; each command is then a
     self-contained request carrying ``cmd``, ``hello`` and ``proto``.
"""

from __future__ import annotations

from typing import Final

import requests

from cddbp.config.identity import resolve_client_identity
from cddbp.config.settings import (
    HTTP_PATH,
    HTTP_PORT,
    PROTOCOL_LEVEL,
    SERVER_HOST,
    TIMEOUT_SECONDS,
)
from cddbp.features.protocol.domain.errors import CddbConnectionError
from cddbp.features.protocol.domain.models import ClientIdentity
from cddbp.features.protocol.usecases.codec import decode_bytes
from cddbp.features.protocol.usecases.framing import Response, parse_response_text

from .events import log_command, log_response

_ACCEPT: Final[str] = "text/plain"


class HttpTransport:
    """Request/response transport; login is implicit in every request."""

    requires_handshake: bool = False

    def __init__(
        self,
        host: str = SERVER_HOST,
        port: int = HTTP_PORT,
        path: str = HTTP_PATH,
        identity: ClientIdentity | None = None,
        protocol_level: int = PROTOCOL_LEVEL,
        timeout: float = TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.host: str = host
        self.port: int = port
        self.path: str = path
        self.identity: ClientIdentity = identity or resolve_client_identity()
        self.protocol_level: int = protocol_level
        self.timeout: float = timeout
        self._session: requests.Session | None = session
        self._owns_session: bool = session is None
        self._open: bool = False

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}{self.path}"

    @property
    def peer(self) -> str:
        return self.url

    def open(self) -> None:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        self._open = True
        return None

    def exchange(self, line: str) -> Response:
        if not self._open or self._session is None:
            raise CddbConnectionError(f"transport to {self.url} is not open")

        params = {
            "cmd": line,
            "hello": self.identity.hello_string(),
            "proto": str(self.protocol_level),
        }
        headers = {
            "Accept": _ACCEPT,
            "User-Agent": f"{self.identity.client_name}/{self.identity.client_version}",
        }
        log_command(self.peer, line)
        try:
            reply = self._session.get(
                self.url, params=params, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise CddbConnectionError(f"request to {self.url} failed: {exc}") from exc

        status = int(reply.status_code)
        if not 200 <= status < 300:
            raise CddbConnectionError(f"HTTP {status} from {self.url}")

        response = parse_response_text(decode_bytes(reply.content))
        log_response(self.peer, response)
        return response

    def close(self) -> None:
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
        self._open = False


__all__ = ["HttpTransport"]
