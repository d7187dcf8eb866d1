"""
Summary: Codec, framing, parsing and session use cases of the CDDBP engine.
Why: Expose the protocol operations through one stable import path.
"""

from .codec import decode, decode_query, encode, encode_query, encode_read, escape, unescape
from .framing import Response, parse_response_text, read_block, read_response
from .parser import (
    build_disc,
    parse_login,
    parse_match_line,
    parse_proto,
    parse_query,
    parse_read,
)
from .session import Session, SessionState

__all__ = [
    "Response",
    "Session",
    "SessionState",
    "build_disc",
    "decode",
    "decode_query",
    "encode",
    "encode_query",
    "encode_read",
    "escape",
    "parse_login",
    "parse_match_line",
    "parse_proto",
    "parse_query",
    "parse_read",
    "parse_response_text",
    "read_block",
    "read_response",
    "unescape",
]
