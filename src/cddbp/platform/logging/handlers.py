"""Rich console handler that renders structured protocol events.

Where: platform/logging/handlers.py
What: Style ``cddbp_event`` log records (commands, replies, state changes).
Why: Make a CDDBP conversation readable on a terminal at debug level.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, ClassVar

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.style import Style
from rich.text import Text


class ProtocolRichHandler(RichHandler):
    """Rich handler with dedicated rendering for CDDBP protocol events."""

    _EVENT_STYLES: ClassVar[dict[str, tuple[str, str]]] = {
        "cddbp.command.sent": ("→", "cyan"),
        "cddbp.response.received": ("←", "green"),
        "cddbp.response.error": ("←", "red"),
        "cddbp.session.state": ("◆", "magenta"),
    }
    _BLOCK_PREVIEW_LIMIT: ClassVar[int] = 3

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        """Initialize the handler with custom settings.

        Args:
            *args: Positional arguments to pass to RichHandler.
            **kwargs: Keyword arguments to pass to RichHandler.
        """
        kwargs["show_time"] = False
        kwargs["show_path"] = False
        kwargs["show_level"] = False
        kwargs["rich_tracebacks"] = True
        kwargs["markup"] = False
        kwargs["omit_repeated_times"] = False
        super().__init__(*args, **kwargs)

    def _render_protocol_event(self, record: logging.LogRecord) -> Text | None:
        """Render structured protocol events, or ``None`` for plain records."""

        event = getattr(record, "cddbp_event", None)
        if not isinstance(event, str):
            return None

        icon, color = self._EVENT_STYLES.get(event, ("•", "blue"))
        text = Text()
        _ = text.append(f"{icon} ", style=Style(color=color, bold=True))
        body = Text(style=Style(color=color))

        if event == "cddbp.command.sent":
            _ = body.append(str(getattr(record, "command", "")))
        elif event.startswith("cddbp.response"):
            code = getattr(record, "code", None)
            message = getattr(record, "status_message", "")
            _ = body.append(f"{code} {message}".rstrip())
            block = getattr(record, "block", None)
            if isinstance(block, (list, tuple)):
                _ = body.append(f" [{len(block)} line(s)]")
                for line in list(block)[: self._BLOCK_PREVIEW_LIMIT]:
                    _ = body.append(f"\n    {line}", style=Style(color="white"))
                if len(block) > self._BLOCK_PREVIEW_LIMIT:
                    _ = body.append("\n    …", style=Style(color="white"))
        else:
            previous = getattr(record, "previous_state", None)
            current = getattr(record, "state", None)
            _ = body.append(f"session {previous} → {current}")

        peer = getattr(record, "peer", None)
        if peer:
            _ = body.append(f" @ {peer}", style=Style(color="white", dim=True))

        _ = text.append_text(body)
        return text

    @override
    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        """Render message with custom styling for protocol events."""

        protocol_text = self._render_protocol_event(record)
        if protocol_text is not None:
            return protocol_text
        return super().render_message(record, message)


__all__ = ["ProtocolRichHandler"]
