"""Shared test fixtures."""

import asyncio
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import pytest

from presence_relay.config import RelayConfig
from presence_relay.contracts import BufferInfo, RPCCallback, RPCResult, TransportFailure
from presence_relay.host import CallbackHost


@dataclass
class PendingCall:
    """One request recorded by FakeTransport."""

    method: str
    params: dict[str, Any] | None
    callback: RPCCallback | None
    resolved: bool = field(default=False)

    def succeed(self, payload: Any = None) -> None:
        self._finish(RPCResult(self.method, payload=payload if payload is not None else {}))

    def fail(self, reason: str = "connection refused") -> None:
        self._finish(RPCResult(self.method, failure=TransportFailure(self.method, reason)))

    def _finish(self, result: RPCResult) -> None:
        assert not self.resolved, f"{self.method} resolved twice"
        self.resolved = True
        if self.callback is not None:
            self.callback(result)


class FakeTransport:
    """In-memory transport; the test decides when and how calls resolve."""

    def __init__(self, client_id: str = "test-client") -> None:
        self._client_id = client_id
        self.calls: list[PendingCall] = []
        self.closed = False

    @property
    def client_id(self) -> str:
        return self._client_id

    def send(self, method, params=None, callback=None):
        call = PendingCall(method, params, callback)
        self.calls.append(call)
        return call

    async def call(self, method, params=None):
        raise TransportFailure(method, "FakeTransport does not await")

    async def aclose(self) -> None:
        self.closed = True

    def methods(self) -> list[str]:
        return [c.method for c in self.calls]

    def sent(self, method: str) -> list[PendingCall]:
        return [c for c in self.calls if c.method == method]

    def pending(self, method: str | None = None) -> list[PendingCall]:
        return [
            c for c in self.calls
            if not c.resolved and (method is None or c.method == method)
        ]


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Yield to the loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def config(temp_dir):
    """Test configuration: fast poll, slow heartbeat, no real daemon on PATH."""
    return RelayConfig(
        host="127.0.0.1",
        port=16553,
        poll_interval=0.01,
        heartbeat_interval=60.0,
        request_timeout=0.5,
        daemon_name="presence-daemon-test-absent",
        runtime_dir=temp_dir,
    )


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def host():
    """Host with a file buffer focused."""
    host = CallbackHost(editor_name="testedit")
    host.set_buffer(BufferInfo("a.py", path="/src/a.py", language="python"))
    return host


@pytest.fixture
def daemon_exe(config):
    """An executable placed where the launcher looks first."""
    config.bin_dir.mkdir(parents=True, exist_ok=True)
    exe = config.bin_dir / config.executable_name
    exe.write_text("#!/bin/sh\nexit 0\n")
    exe.chmod(0o755)
    return exe
