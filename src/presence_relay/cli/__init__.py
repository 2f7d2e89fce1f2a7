"""
CLI - Command-line access to the presence daemon.

The `presence-relay` command makes the same RPC calls an editor session
makes, one at a time, for checking a daemon install by hand.

Example:
    $ presence-relay start
    Daemon started (PID 12345)

    $ presence-relay set-path src/main.py --language python
    set_path: ok

    $ presence-relay leave
"""

from .main import main

__all__ = ["main"]
