"""Structured log helpers shared by the transport bindings."""

from __future__ import annotations

from cddbp.features.protocol.usecases.framing import Response
from cddbp.platform.logging import logger


def log_command(peer: str, line: str) -> None:
    logger.debug(
        "sent %s",
        line,
        extra={"cddbp_event": "cddbp.command.sent", "command": line, "peer": peer},
    )


def log_response(peer: str, response: Response) -> None:
    event = (
        "cddbp.response.received" if response.status.is_success else "cddbp.response.error"
    )
    logger.debug(
        "response: %s",
        response.status,
        extra={
            "cddbp_event": event,
            "code": response.code,
            "status_message": response.message,
            "block": response.block,
            "peer": peer,
        },
    )


__all__ = ["log_command", "log_response"]
