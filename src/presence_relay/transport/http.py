"""
HTTP Transport - Default implementation of TransportProtocol.

Features:
- JSON request/response over HTTP POST to the local daemon
- Connection pooling via httpx
- Every failure collapsed into TransportFailure
- Fire-and-continue dispatch for the single-threaded session loop
"""

import asyncio
import json
from typing import Any

import httpx
import structlog

from ..config import RelayConfig
from ..contracts import RPCCallback, RPCResult, TransportFailure

__all__ = ["RPCTransport"]

logger = structlog.get_logger(__name__)


class RPCTransport:
    """HTTP transport for the presence daemon.

    Implements TransportProtocol.

    Example:
        transport = RPCTransport(config, client_id="4242")

        # Await the payload directly
        payload = await transport.call("is_running")

        # Or continue later on the event loop
        transport.send("ping", callback=on_result)
    """

    def __init__(
        self,
        config: RelayConfig,
        client_id: str,
        editor: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._client_id = client_id
        self._editor = editor or config.editor
        self._client = client
        self._owns_client = client is None
        self._pending: set[asyncio.Task] = set()

    @property
    def client_id(self) -> str:
        """Identifier attached to every request."""
        return self._client_id

    @property
    def pending(self) -> int:
        """Number of requests still in flight."""
        return len(self._pending)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.request_timeout),
                limits=httpx.Limits(max_connections=4, max_keepalive_connections=2),
            )
        return self._client

    def build_request(self, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Request body for a method call."""
        return {
            "id": self._client_id,
            "editor": self._editor,
            "method": method,
            "params": params or {},
        }

    async def call(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """POST one request and return the decoded response.

        Raises:
            TransportFailure: On any network error, non-2xx status or bad body
        """
        body = self.build_request(method, params)

        try:
            response = await self._get_client().post(self.config.daemon_url, json=body)
        except httpx.TimeoutException as e:
            raise TransportFailure(method, f"Timeout: {e}") from e
        except httpx.HTTPError as e:
            raise TransportFailure(method, f"Connection error: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportFailure(method, f"Invalid URL: {e}") from e

        if not response.is_success:
            raise TransportFailure(method, f"HTTP {response.status_code}")

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TransportFailure(method, f"Malformed response: {e}") from e

    def send(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        callback: RPCCallback | None = None,
    ) -> asyncio.Task:
        """Dispatch a request and return immediately.

        Must be called with a running event loop. The callback, if any,
        runs on the loop once the request resolves.
        """
        task = asyncio.get_running_loop().create_task(self._dispatch(method, params, callback))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _dispatch(
        self,
        method: str,
        params: dict[str, Any] | None,
        callback: RPCCallback | None,
    ) -> RPCResult:
        try:
            payload = await self.call(method, params)
            result = RPCResult(method, payload=payload)
        except TransportFailure as e:
            logger.debug("rpc_failed", method=method, reason=e.reason)
            result = RPCResult(method, failure=e)

        if callback is not None:
            try:
                callback(result)
            except Exception as e:
                logger.error("rpc_callback_error", method=method, error=str(e))

        return result

    async def aclose(self, timeout: float | None = None) -> None:
        """Wait for in-flight requests, then close the HTTP client."""
        if self._pending:
            _, still_pending = await asyncio.wait(
                set(self._pending),
                timeout=timeout if timeout is not None else self.config.request_timeout,
            )
            for task in still_pending:
                task.cancel()

        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def status(self) -> dict[str, Any]:
        """Current transport status."""
        return {
            "url": self.config.daemon_url,
            "client_id": self._client_id,
            "editor": self._editor,
            "pending": self.pending,
        }
