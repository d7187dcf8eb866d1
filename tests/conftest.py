"""Shared pytest fixtures: an in-memory transport driven by scripted replies."""

from __future__ import annotations

from collections.abc import Callable, Sequence

import pytest

from cddbp.features.protocol.domain.errors import CddbConnectionError
from cddbp.features.protocol.usecases.framing import Response, parse_response_text


class ScriptedTransport:
    """Transport double replaying canned server text in order."""

    def __init__(
        self,
        replies: Sequence[str | Exception] = (),
        *,
        greeting: str | None = "201 test.example CDDBP server v1.5.2PL0 ready",
        requires_handshake: bool = True,
    ) -> None:
        self.replies: list[str | Exception] = list(replies)
        self.greeting: str | None = greeting
        self.requires_handshake: bool = requires_handshake
        self.sent: list[str] = []
        self.open_calls: int = 0
        self.close_calls: int = 0
        self.closed: bool = False

    @property
    def peer(self) -> str:
        return "test.example:8880"

    def open(self) -> Response | None:
        self.open_calls += 1
        self.closed = False
        if self.greeting is None:
            return None
        return parse_response_text(self.greeting)

    def exchange(self, line: str) -> Response:
        self.sent.append(line)
        if not self.replies:
            raise CddbConnectionError(f"no scripted reply for {line!r}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return parse_response_text(reply)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


@pytest.fixture
def make_transport() -> Callable[..., ScriptedTransport]:
    """Return a factory for scripted transports."""

    return ScriptedTransport
