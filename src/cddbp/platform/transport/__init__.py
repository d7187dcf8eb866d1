"""Transport bindings for CDDBP: persistent line stream and HTTP requests."""

from .http import HttpTransport
from .line_stream import LineStreamTransport
from .ports import Transport

__all__ = ["HttpTransport", "LineStreamTransport", "Transport"]
