"""Command line argument parser."""

import argparse
import logging
from collections.abc import Sequence
from typing import final

from cddbp.config.config import Config
from cddbp.features.protocol.domain.models import Fingerprint
from cddbp.features.protocol.usecases.codec import decode_query
from cddbp.platform.logging import setup_logger
from cddbp.ui.cli.args.options import CLIArgs, LookupArgs, QueryArgs

FINGERPRINT_METAVAR = "DISCID NTRACKS OFFSET ... SECONDS"


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="cddbp",
            description="Look up CD metadata on a CDDB/gnudb server by disc fingerprint.",
            epilog=(
                "The fingerprint uses the 'cddb query' layout, for example:\n"
                "  cddbp lookup aa0b5d0c 3 150 16200 32984 2828"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        query_parser = subparsers.add_parser(
            "query",
            help="List the candidate matches for a fingerprint",
        )
        ArgumentParser._configure_common(query_parser)

        lookup_parser = subparsers.add_parser(
            "lookup",
            help="Query a fingerprint and read the full record of one match",
        )
        ArgumentParser._configure_common(lookup_parser)
        _ = lookup_parser.add_argument(
            "--pick",
            type=int,
            default=0,
            metavar="INDEX",
            help="Zero-based index of the match to read (default: 0)",
        )

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.

        Raises:
            SystemExit: If the fingerprint is malformed or arguments are invalid.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        if parsed_args.quiet:
            log_level = logging.ERROR
        elif parsed_args.verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.WARNING

        configuration = Config.load()
        _ = setup_logger(log_file=configuration.log_file, console_level=log_level)

        fingerprint = ArgumentParser._parse_fingerprint(parser, parsed_args.fingerprint)

        if parsed_args.command == "query":
            return QueryArgs(
                command="query",
                fingerprint=fingerprint,
                use_http=parsed_args.http,
                host=parsed_args.host,
                port=parsed_args.port,
                timeout=parsed_args.timeout,
                verbose=parsed_args.verbose,
                quiet=parsed_args.quiet,
            )

        if parsed_args.pick < 0:
            parser.error("--pick must be zero or positive")

        return LookupArgs(
            command="lookup",
            fingerprint=fingerprint,
            use_http=parsed_args.http,
            host=parsed_args.host,
            port=parsed_args.port,
            timeout=parsed_args.timeout,
            verbose=parsed_args.verbose,
            quiet=parsed_args.quiet,
            pick=parsed_args.pick,
        )

    @staticmethod
    def _configure_common(parser: argparse.ArgumentParser) -> None:
        """Apply options shared by every subcommand."""

        _ = parser.add_argument(
            "fingerprint",
            nargs="+",
            metavar="TOKEN",
            help=f"Disc fingerprint as {FINGERPRINT_METAVAR}",
        )
        _ = parser.add_argument(
            "--http",
            action="store_true",
            help="Use the HTTP binding instead of the CDDBP line protocol",
        )
        _ = parser.add_argument("--host", type=str, help="Server host name")
        _ = parser.add_argument("--port", type=int, help="Server port")
        _ = parser.add_argument(
            "--timeout",
            type=float,
            help="Seconds to wait for connect and each reply",
        )
        verbosity = parser.add_mutually_exclusive_group()
        _ = verbosity.add_argument(
            "--verbose",
            action="store_true",
            help="Show the protocol conversation",
        )
        _ = verbosity.add_argument(
            "--quiet",
            action="store_true",
            help="Suppress all output except errors",
        )

    @staticmethod
    def _parse_fingerprint(
        parser: argparse.ArgumentParser, tokens: Sequence[str]
    ) -> Fingerprint:
        """Decode fingerprint tokens with the same rules as the wire codec."""

        try:
            return decode_query(" ".join(["cddb", "query", *tokens]))
        except ValueError as exc:
            parser.error(f"invalid fingerprint ({FINGERPRINT_METAVAR}): {exc}")


__all__ = ["ArgumentParser"]
