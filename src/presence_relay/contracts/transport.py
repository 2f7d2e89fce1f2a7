"""
Transport Protocol - Contract for the daemon RPC channel.

Transports deliver one request to the daemon and report back either
the decoded payload or a single, undifferentiated failure.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable

__all__ = ["RPCCallback", "RPCResult", "TransportFailure", "TransportProtocol"]


class TransportFailure(Exception):
    """Raised when an RPC call produced no usable response.

    Reasons (never distinguished by callers):
    - Connection refused
    - Timeout
    - Non-2xx status
    - Undecodable body
    """

    def __init__(self, method: str, reason: str):
        self.method = method
        self.reason = reason
        super().__init__(f"RPC '{method}' failed: {reason}")


@dataclass(frozen=True)
class RPCResult:
    """Outcome of one RPC call, handed to the continuation."""

    method: str
    payload: Any = None
    failure: TransportFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


RPCCallback = Callable[[RPCResult], None]


@runtime_checkable
class TransportProtocol(Protocol):
    """Contract for the RPC transport used by the session.

    Example:
        def on_result(result: RPCResult) -> None:
            if not result.ok:
                handle_daemon_death()

        transport.send("ping", callback=on_result)
    """

    @property
    def client_id(self) -> str:
        """Identifier attached to every request."""
        ...

    def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        callback: RPCCallback | None = None,
    ) -> asyncio.Task:
        """Dispatch a request without waiting for it.

        The callback runs later on the event loop with the RPCResult.
        """
        ...

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Dispatch a request and wait for the payload.

        Raises:
            TransportFailure: If no well-formed response arrived
        """
        ...

    async def aclose(self) -> None:
        """Drain in-flight requests and release the connection pool."""
        ...
