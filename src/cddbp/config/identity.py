"""Where: src/cddbp/config/identity.py
What: Resolve the client identity announced by ``cddb hello``.
Why: Servers expect ``user host client version``; keep the fallbacks in one place.
"""

from __future__ import annotations

import os
import re
import socket
from collections.abc import Mapping

from cddbp.config.settings import CLIENT_NAME, CLIENT_VERSION, HELLO_HOST, HELLO_USER
from cddbp.features.protocol.domain.models import ClientIdentity

_UNSAFE_RE = re.compile(r"\s+")


def _token(value: str, fallback: str) -> str:
    """Collapse whitespace so the value stays one protocol token."""

    cleaned = _UNSAFE_RE.sub("_", value.strip())
    return cleaned or fallback


def resolve_client_identity(
    *,
    user: str | None = None,
    host: str | None = None,
    client_name: str | None = None,
    client_version: str | None = None,
    env: Mapping[str, str] | None = None,
) -> ClientIdentity:
    """Build the hello identity.

    Priority for user and host: explicit arguments, configuration, ``$EMAIL``
    (``user@host``), then ``$USER`` and the machine's host name.
    """

    mapping = env if env is not None else os.environ
    email_user, _, email_host = (mapping.get("EMAIL") or "").partition("@")

    resolved_user = user or HELLO_USER or email_user or mapping.get("USER") or "user"
    resolved_host = host or HELLO_HOST or email_host or socket.gethostname() or "localhost"

    return ClientIdentity(
        user=_token(resolved_user, "user"),
        host=_token(resolved_host, "localhost"),
        client_name=_token(client_name or CLIENT_NAME, "cddbp"),
        client_version=_token(client_version or CLIENT_VERSION, "0.1.0"),
    )


__all__ = ["resolve_client_identity"]
