"""Command line interface for the CDDBP client."""

import sys
from typing import final

from cddbp.application.services.lookup_service import DiscLookupService, ServerSettings
from cddbp.features.protocol.domain.errors import CddbError
from cddbp.platform.logging import logger
from cddbp.ui.cli.args import ArgumentParser
from cddbp.ui.cli.args.options import CLIArgs, LookupArgs
from cddbp.ui.cli.display.disc import DiscDisplay

EXIT_NO_MATCH = 2


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)
            service = CommandProcessor._build_service(args)
            display = DiscDisplay()

            if isinstance(args, LookupArgs):
                result = service.lookup(args.fingerprint, pick=args.pick)
                display.show_matches(result.matches, picked=result.picked)
                if result.disc is None:
                    sys.exit(EXIT_NO_MATCH)
                display.show_disc(result.disc)
                return

            matches = service.query(args.fingerprint)
            display.show_matches(matches)
            if not matches:
                sys.exit(EXIT_NO_MATCH)
            return

        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            sys.exit(130)
        except (CddbError, IndexError, ValueError) as e:
            logger.error("Lookup failed: %s", e)
            sys.exit(1)

    @staticmethod
    def _build_service(args: CLIArgs) -> DiscLookupService:
        """Translate CLI overrides into service settings."""

        defaults = ServerSettings()
        settings = ServerSettings(
            host=args.host or defaults.host,
            port=args.port,
            timeout=args.timeout or defaults.timeout,
        )
        return DiscLookupService(
            kind="http" if args.use_http else "cddbp",
            settings=settings,
        )


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Failures exit through
        ``sys.exit(...)`` inside command processing.
    """
    CommandProcessor.process_command()
    return 0
