"""
CLI Main - Entry point for the `presence-relay` command.

Usage:
    presence-relay status                 Check whether the daemon answers
    presence-relay start [--wait N]       Start the daemon if needed
    presence-relay ping                   Send a heartbeat ping
    presence-relay set-path PATH [-l L]   Report a file
    presence-relay leave                  Send the leaving notice
    presence-relay locate                 Show the daemon executable
"""

import sys

from ..config import RelayConfig
from ..logging import configure_logging
from .commands import print_error, run_command
from .parser import create_parser

__all__ = ["main"]


def main(args: list[str] | None = None) -> int:
    """Main entry point for the presence-relay CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    if args is None:
        args = sys.argv[1:]

    parser = create_parser()
    parsed = parser.parse_args(args)

    config = RelayConfig()
    configure_logging("DEBUG" if parsed.verbose else config.log_level)

    if parsed.command is None:
        parser.print_help()
        return 0

    try:
        return run_command(parsed.command, parsed, config)
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
