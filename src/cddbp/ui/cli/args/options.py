"""Command line argument options."""

from dataclasses import dataclass
from typing import Literal, final

from cddbp.features.protocol.domain.models import Fingerprint


@final
@dataclass(slots=True)
class QueryArgs:
    """Command line arguments for the ``query`` subcommand."""

    command: Literal["query"]
    fingerprint: Fingerprint
    use_http: bool
    host: str | None
    port: int | None
    timeout: float | None
    verbose: bool
    quiet: bool


@final
@dataclass(slots=True)
class LookupArgs:
    """Command line arguments for the ``lookup`` subcommand."""

    command: Literal["lookup"]
    fingerprint: Fingerprint
    use_http: bool
    host: str | None
    port: int | None
    timeout: float | None
    verbose: bool
    quiet: bool
    pick: int


CLIArgs = QueryArgs | LookupArgs

__all__ = ["CLIArgs", "LookupArgs", "QueryArgs"]
