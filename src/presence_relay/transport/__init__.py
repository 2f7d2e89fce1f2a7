"""
Transport - RPC channel to the presence daemon.
"""

from .http import RPCTransport

__all__ = ["RPCTransport"]
