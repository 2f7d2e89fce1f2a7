"""
CLI Parser - Argument parser for the presence-relay command.
"""

import argparse

__all__ = ["create_parser"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="presence-relay",
        description="Presence Relay - talk to the local rich-presence daemon",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--client-id",
        default=None,
        help="Client identifier to send (default: this process id)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # status
    subparsers.add_parser("status", help="Check whether the daemon answers")

    # start
    start_parser = subparsers.add_parser("start", help="Start the daemon if needed and wait for it")
    start_parser.add_argument(
        "--wait",
        type=float,
        default=10.0,
        help="Seconds to wait for the daemon to answer (default: 10)",
    )

    # ping
    subparsers.add_parser("ping", help="Send a heartbeat ping")

    # set-path
    set_path_parser = subparsers.add_parser("set-path", help="Report the file being edited")
    set_path_parser.add_argument("path", help="File path to report")
    set_path_parser.add_argument(
        "-l", "--language",
        default="",
        help="Language/mode name",
    )

    # leave
    subparsers.add_parser("leave", help="Tell the daemon this client is leaving")

    # locate
    subparsers.add_parser("locate", help="Show which daemon executable would be started")

    return parser
