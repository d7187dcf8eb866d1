"""
Summary: Assemble status lines and sentinel-terminated blocks into responses.
Why: Multi-line continuation and dot-stuffing live in exactly one tested unit.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from cddbp.features.protocol.domain.errors import MalformedResponse, UnexpectedTermination
from cddbp.features.protocol.domain.status import StatusLine

from .codec import decode, is_sentinel, unstuff_dot

LineSource = Callable[[], str | None]
"""Callable returning the next raw line, or ``None`` once the stream has ended."""


@dataclass(frozen=True, slots=True)
class Response:
    """One complete server reply.

    ``block`` holds the un-stuffed continuation lines for ``x1x`` replies and is
    ``None`` for single-line replies.
    """

    status: StatusLine
    block: tuple[str, ...] | None = None

    @property
    def code(self) -> int:
        return self.status.code

    @property
    def message(self) -> str:
        return self.status.message

    @property
    def lines(self) -> tuple[str, ...]:
        return self.block or ()


def read_block(next_line: LineSource) -> tuple[str, ...]:
    """Collect continuation lines up to (excluding) the sentinel.

    Raises:
        UnexpectedTermination: If the stream ends before the sentinel line.
    """

    lines: list[str] = []
    while True:
        raw = next_line()
        if raw is None:
            raise UnexpectedTermination(
                f"stream ended after {len(lines)} line(s) without terminating '.'"
            )
        line = raw.rstrip("\r\n")
        if is_sentinel(line):
            return tuple(lines)
        lines.append(unstuff_dot(line))


def read_response(next_line: LineSource) -> Response:
    """Read exactly one response from a line stream.

    Raises:
        UnexpectedTermination: If the stream ends before the response is complete.
        MalformedResponse: If the first line is not a status line.
    """

    raw = next_line()
    if raw is None:
        raise UnexpectedTermination("stream ended before a status line arrived")
    status = decode(raw)
    if not status.more_follows:
        return Response(status=status)
    return Response(status=status, block=read_block(next_line))


def parse_response_text(text: str) -> Response:
    """Parse a complete response body such as an HTTP reply.

    Raises:
        MalformedResponse: If non-blank text trails the response.
        UnexpectedTermination: If a block is missing its sentinel.
    """

    # Only LF and CRLF end a line; Latin-1 text may carry \x85 inside a value.
    raw_lines = text.split("\n")
    if raw_lines[-1] == "":
        raw_lines.pop()
    lines = iter(line.removesuffix("\r") for line in raw_lines)
    response = read_response(_line_source(lines))
    for leftover in lines:
        if leftover.strip():
            raise MalformedResponse(
                f"continuation line outside a multi-line response: {leftover!r}"
            )
    return response


def _line_source(lines: Iterator[str]) -> LineSource:
    def next_line() -> str | None:
        return next(lines, None)

    return next_line


__all__ = [
    "LineSource",
    "Response",
    "parse_response_text",
    "read_block",
    "read_response",
]
