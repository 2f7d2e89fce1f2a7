"""
CLI Commands - One-shot RPC calls for diagnosing the daemon.

Each command opens its own transport, makes its call(s) and closes it.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ..contracts import DaemonNotFound, TransportFailure
from ..lifecycle import DaemonLauncher, DaemonManager
from ..models import client_id_for_process
from ..transport import RPCTransport

if TYPE_CHECKING:
    from ..config import RelayConfig

__all__ = ["COMMANDS", "run_command"]

COMMANDS = {"status", "start", "ping", "set-path", "leave", "locate"}


def run_command(command: str, args: argparse.Namespace, config: "RelayConfig") -> int:
    """Run the specified command.

    Args:
        command: Command name
        args: Parsed arguments
        config: Relay configuration

    Returns:
        Exit code
    """
    if command == "locate":
        return locate_daemon(config)

    client_id = args.client_id or client_id_for_process()

    if command == "start":
        return asyncio.run(start_daemon(config, client_id, wait=args.wait))
    elif command == "status":
        return asyncio.run(rpc_command(config, client_id, "is_running"))
    elif command == "ping":
        return asyncio.run(rpc_command(config, client_id, "ping"))
    elif command == "set-path":
        params = {"path": str(Path(args.path).expanduser().resolve()), "language": args.language}
        return asyncio.run(rpc_command(config, client_id, "set_path", params))
    elif command == "leave":
        asyncio.run(rpc_command(config, client_id, "im_leaving", quiet=True))
        return 0

    print_error(f"Unknown command: {command}")
    return 1


async def rpc_command(
    config: "RelayConfig",
    client_id: str,
    method: str,
    params: dict | None = None,
    quiet: bool = False,
) -> int:
    """Make one RPC call and print the outcome."""
    transport = RPCTransport(config, client_id)
    try:
        payload = await transport.call(method, params)
    except TransportFailure as e:
        if not quiet:
            print_error(f"Daemon unreachable at {config.daemon_url} ({e.reason})")
        return 1
    finally:
        await transport.aclose()

    if not quiet:
        print(f"{method}: ok")
        if payload not in (None, {}, ""):
            print(f"  {payload}")
    return 0


async def start_daemon(config: "RelayConfig", client_id: str, wait: float) -> int:
    """Probe, spawn if needed, and poll until the daemon answers."""
    transport = RPCTransport(config, client_id)
    manager = DaemonManager(config, transport)
    ready = asyncio.Event()
    errors: list[DaemonNotFound] = []

    def on_error(error: DaemonNotFound) -> None:
        errors.append(error)
        ready.set()

    try:
        manager.ensure_daemon(on_ready=ready.set, on_error=on_error)
        try:
            await asyncio.wait_for(ready.wait(), timeout=wait)
        except asyncio.TimeoutError:
            print_error(f"Daemon did not answer within {wait:g}s")
            return 1
    finally:
        manager.cancel()
        await transport.aclose()

    if errors:
        print_error(str(errors[0]))
        return 1

    if manager.spawned_pid is not None:
        print(f"Daemon started (PID {manager.spawned_pid})")
    else:
        print("Daemon already running")
    return 0


def locate_daemon(config: "RelayConfig") -> int:
    """Print the executable that would be spawned."""
    launcher = DaemonLauncher(config)
    path = launcher.locate()
    if path is not None:
        print(path)
        return 0

    print_error("Daemon executable not found. Searched:")
    for candidate in launcher.search_path:
        print(f"  {candidate}", file=sys.stderr)
    return 1


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)
