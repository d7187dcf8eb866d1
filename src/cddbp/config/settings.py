"""Where: src/cddbp/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to transports and services without file I/O.
Trade-offs: - Validation is limited to simple boundary checks; bad values fall
  back to the documented defaults instead of failing at import time.
"""

from __future__ import annotations

from cddbp.config.config import (
    DEFAULT_CDDBP_PORT,
    DEFAULT_HTTP_PATH,
    DEFAULT_HTTP_PORT,
    DEFAULT_PROTOCOL_LEVEL,
    DEFAULT_SERVER_HOST,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TRANSPORT,
    config as app_config,
)

# Server location -------------------------------------------------------------

SERVER_HOST: str = (app_config.server_host or "").strip() or DEFAULT_SERVER_HOST

_cddbp_port = app_config.cddbp_port
CDDBP_PORT: int = (
    _cddbp_port if isinstance(_cddbp_port, int) and 0 < _cddbp_port < 65536 else DEFAULT_CDDBP_PORT
)

_http_port = app_config.http_port
HTTP_PORT: int = (
    _http_port if isinstance(_http_port, int) and 0 < _http_port < 65536 else DEFAULT_HTTP_PORT
)

_http_path = (app_config.http_path or "").strip()
HTTP_PATH: str = _http_path if _http_path.startswith("/") else DEFAULT_HTTP_PATH


# Protocol --------------------------------------------------------------------

# Level 6 adds DYEAR/DGENRE to read replies and switches the server to UTF-8.
_level = app_config.protocol_level
PROTOCOL_LEVEL: int = _level if isinstance(_level, int) and 1 <= _level <= 6 else DEFAULT_PROTOCOL_LEVEL

_timeout = app_config.timeout_seconds
TIMEOUT_SECONDS: float = (
    float(_timeout) if isinstance(_timeout, (int, float)) and _timeout > 0 else DEFAULT_TIMEOUT_SECONDS
)

TRANSPORT: str = (
    app_config.transport if app_config.transport in ("cddbp", "http") else DEFAULT_TRANSPORT
)


# Client identity ---------------------------------------------------------------

CLIENT_NAME: str = app_config.client_name or "cddbp"
CLIENT_VERSION: str = app_config.client_version or "0.1.0"
HELLO_USER: str | None = app_config.hello_user
HELLO_HOST: str | None = app_config.hello_host


__all__ = [
    "CDDBP_PORT",
    "CLIENT_NAME",
    "CLIENT_VERSION",
    "HELLO_HOST",
    "HELLO_USER",
    "HTTP_PATH",
    "HTTP_PORT",
    "PROTOCOL_LEVEL",
    "SERVER_HOST",
    "TIMEOUT_SECONDS",
    "TRANSPORT",
]
