"""
Summary: Tests for the CDDBP line-stream transport over fake and paired sockets.
Why: Verify line framing, byte decoding and error mapping without a network.
"""

from __future__ import annotations

import io
import socket
import threading

import pytest

from cddbp.features.protocol.domain.errors import CddbConnectionError, UnexpectedTermination
from cddbp.features.protocol.domain.models import ClientIdentity, Fingerprint
from cddbp.features.protocol.usecases.session import Session
from cddbp.platform.transport.line_stream import LineStreamTransport


class FakeSocket:
    """Socket stand-in serving a fixed byte script."""

    def __init__(self, incoming: bytes) -> None:
        self.incoming: io.BytesIO = io.BytesIO(incoming)
        self.outgoing: bytearray = bytearray()
        self.shutdown_calls: int = 0
        self.closed: bool = False

    def makefile(self, mode: str) -> io.BytesIO:
        assert mode == "rb"
        return self.incoming

    def sendall(self, data: bytes) -> None:
        self.outgoing += data

    def shutdown(self, how: int) -> None:
        self.shutdown_calls += 1

    def close(self) -> None:
        self.closed = True


class TimeoutReader(io.BytesIO):
    def readline(self, size: int | None = -1) -> bytes:
        raise TimeoutError("timed out")


def transport_for(fake: FakeSocket) -> tuple[LineStreamTransport, list[tuple[tuple[str, int], float]]]:
    calls: list[tuple[tuple[str, int], float]] = []

    def connector(address: tuple[str, int], timeout: float) -> FakeSocket:
        calls.append((address, timeout))
        return fake

    transport = LineStreamTransport(
        host="cddb.example", port=8880, timeout=2.5, connector=connector  # pyright: ignore[reportArgumentType]
    )
    return transport, calls


def test_open_returns_greeting_and_uses_settings() -> None:
    fake = FakeSocket(b"201 cddb.example CDDBP server v1.5.2PL0 ready at Sat Oct 18\r\n")
    transport, calls = transport_for(fake)

    greeting = transport.open()

    assert greeting.code == 201
    assert calls == [(("cddb.example", 8880), 2.5)]
    assert transport.peer == "cddb.example:8880"
    assert transport.is_open


def test_exchange_writes_line_and_reads_block() -> None:
    fake = FakeSocket(
        b"201 ready\r\n"
        b"211 close matches found\r\n"
        b"rock aa0b5d0c Artist / Title\r\n"
        b"misc aa0b5d0c Artist / Title\r\n"
        b".\r\n"
        b"230 Goodbye\r\n"
    )
    transport, _ = transport_for(fake)
    _ = transport.open()

    response = transport.exchange("cddb query aa0b5d0c 3 150 16200 32984 2828")
    goodbye = transport.exchange("quit")

    assert response.lines == ("rock aa0b5d0c Artist / Title", "misc aa0b5d0c Artist / Title")
    assert goodbye.code == 230
    assert bytes(fake.outgoing) == b"cddb query aa0b5d0c 3 150 16200 32984 2828\nquit\n"


def test_latin1_bytes_are_decoded() -> None:
    fake = FakeSocket(b"201 ready\r\n210 rock aa0b5d0c entry\r\nDTITLE=Mot\xf6rhead / Ace\r\n.\r\n")
    transport, _ = transport_for(fake)
    _ = transport.open()

    response = transport.exchange("cddb read rock aa0b5d0c")

    assert response.lines == ("DTITLE=Motörhead / Ace",)


def test_connection_refused_is_connection_error() -> None:
    def refuse(address: tuple[str, int], timeout: float) -> socket.socket:
        raise ConnectionRefusedError("refused")

    transport = LineStreamTransport(host="cddb.example", connector=refuse)

    with pytest.raises(CddbConnectionError):
        _ = transport.open()

    assert not transport.is_open


def test_read_timeout_is_connection_error() -> None:
    fake = FakeSocket(b"")
    fake.incoming = TimeoutReader()
    transport, _ = transport_for(fake)

    with pytest.raises(CddbConnectionError):
        _ = transport.open()


def test_eof_inside_block_is_unexpected_termination() -> None:
    fake = FakeSocket(b"201 ready\r\n210 rock aa0b5d0c entry\r\nDTITLE=Artist / Title\r\n")
    transport, _ = transport_for(fake)
    _ = transport.open()

    with pytest.raises(UnexpectedTermination):
        _ = transport.exchange("cddb read rock aa0b5d0c")


def test_close_is_idempotent_and_blocks_exchange() -> None:
    fake = FakeSocket(b"201 ready\r\n")
    transport, _ = transport_for(fake)
    _ = transport.open()

    transport.close()
    transport.close()

    assert fake.shutdown_calls == 1
    assert fake.closed
    with pytest.raises(CddbConnectionError):
        _ = transport.exchange("quit")


def test_second_open_is_rejected() -> None:
    transport, _ = transport_for(FakeSocket(b"201 ready\r\n"))
    _ = transport.open()

    with pytest.raises(CddbConnectionError):
        _ = transport.open()


def test_session_round_trip_over_socket_pair() -> None:
    client, server = socket.socketpair()
    client.settimeout(5)
    server.settimeout(5)
    received: list[str] = []
    replies = [
        b"200 Hello and welcome joe@example.org running cddbp 0.1.0.\r\n",
        b"201 OK, CDDB protocol level now: 6\r\n",
        b"200 rock aa0b5d0c Artist / Title\r\n",
        b"210 rock aa0b5d0c CD database entry follows\r\n"
        b"DTITLE=Artist / Title\r\n"
        b"TTITLE0=First Track\r\n"
        b"TTITLE1=Second Track\r\n"
        b".\r\n",
        b"230 Goodbye\r\n",
    ]

    def serve() -> None:
        with server, server.makefile("rb") as reader:
            server.sendall(b"201 test CDDBP server ready\r\n")
            for reply in replies:
                received.append(reader.readline().decode("utf-8").rstrip("\n"))
                server.sendall(reply)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()

    transport = LineStreamTransport(host="pair", port=8880, connector=lambda address, timeout: client)
    identity = ClientIdentity("joe", "example.org", "cddbp", "0.1.0")
    with Session.open(transport, identity=identity) as session:
        match = session.query(Fingerprint("aa0b5d0c", (150, 16200), 2828))[0]
        disc = session.read(match)
    thread.join(timeout=5)

    assert disc.track_titles == ("First Track", "Second Track")
    assert received == [
        "cddb hello joe example.org cddbp 0.1.0",
        "proto 6",
        "cddb query aa0b5d0c 2 150 16200 2828",
        "cddb read rock aa0b5d0c",
        "quit",
    ]
    assert not transport.is_open
