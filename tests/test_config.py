"""Unit tests for configuration module."""

from dataclasses import FrozenInstanceError
from pathlib import Path
from unittest.mock import patch

import pytest

from presence_relay.config import (
    RelayConfig,
    _get_env,
    _get_env_bool,
    _get_env_float,
    _get_env_int,
    _get_env_path,
)
from presence_relay.models import client_id_for_process


class TestConfig:
    """Test configuration loading."""

    def test_default_values(self):
        """Config has sensible defaults."""
        config = RelayConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 6553
        assert config.endpoint == "/rpc"
        assert config.heartbeat_interval == 15.0
        assert config.poll_interval == 1.0
        assert config.notifications_enabled is False

    def test_daemon_url_property(self):
        config = RelayConfig(host="127.0.0.1", port=7000, endpoint="/rpc")

        assert config.daemon_url == "http://127.0.0.1:7000/rpc"

    def test_runtime_paths(self, temp_dir):
        config = RelayConfig(runtime_dir=temp_dir)

        assert config.bin_dir == temp_dir / "bin"

    def test_config_is_immutable(self):
        """Config dataclass is frozen."""
        config = RelayConfig()

        with pytest.raises(FrozenInstanceError):
            config.port = 8080


class TestDaemonCandidates:
    """Test the executable search order."""

    def test_order(self, temp_dir):
        """Explicit path, then runtime bin dir, then PATH."""
        explicit = temp_dir / "custom"
        config = RelayConfig(daemon_path=explicit, daemon_name="presence-daemon", runtime_dir=temp_dir)

        with patch("shutil.which", return_value="/usr/bin/presence-daemon"):
            candidates = config.daemon_candidates

        assert candidates == [
            explicit,
            temp_dir / "bin" / config.executable_name,
            Path("/usr/bin/presence-daemon"),
        ]

    def test_without_explicit_or_path(self, temp_dir):
        config = RelayConfig(daemon_path=None, runtime_dir=temp_dir)

        with patch("shutil.which", return_value=None):
            candidates = config.daemon_candidates

        assert candidates == [temp_dir / "bin" / config.executable_name]

    def test_windows_executable_name(self):
        config = RelayConfig(daemon_name="presence-daemon")

        with patch("sys.platform", "win32"):
            assert config.executable_name == "presence-daemon.exe"

    def test_posix_executable_name(self):
        config = RelayConfig(daemon_name="presence-daemon")

        with patch("sys.platform", "linux"):
            assert config.executable_name == "presence-daemon"


class TestEnvHelpers:
    """Test environment variable helpers."""

    def test_get_env_returns_default(self):
        """Returns default when env not set."""
        assert _get_env("NONEXISTENT_KEY", "default") == "default"

    def test_get_env_int_converts(self, monkeypatch):
        monkeypatch.setenv("PRESENCE_RELAY_TEST_INT", "42")

        result = _get_env_int("TEST_INT", 0)

        assert result == 42
        assert isinstance(result, int)

    def test_get_env_float_converts(self, monkeypatch):
        monkeypatch.setenv("PRESENCE_RELAY_TEST_FLOAT", "0.25")

        assert _get_env_float("TEST_FLOAT", 1.0) == 0.25

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("1", True),
        ("ON", True),
        ("false", False),
        ("0", False),
    ])
    def test_get_env_bool(self, monkeypatch, value, expected):
        monkeypatch.setenv("PRESENCE_RELAY_TEST_BOOL", value)

        assert _get_env_bool("TEST_BOOL", not expected) is expected

    def test_get_env_bool_default(self, monkeypatch):
        monkeypatch.delenv("PRESENCE_RELAY_TEST_BOOL", raising=False)

        assert _get_env_bool("TEST_BOOL", True) is True

    def test_get_env_path_expands_user(self, monkeypatch):
        monkeypatch.setenv("PRESENCE_RELAY_TEST_PATH", "~/daemon")

        assert _get_env_path("TEST_PATH", None) == Path.home() / "daemon"

    def test_get_env_path_empty_is_default(self, monkeypatch):
        monkeypatch.setenv("PRESENCE_RELAY_TEST_PATH", "")

        assert _get_env_path("TEST_PATH", None) is None


class TestClientId:
    def test_client_id_is_process_id(self):
        """Client id is the decimal process id."""
        import os

        assert client_id_for_process() == str(os.getpid())
