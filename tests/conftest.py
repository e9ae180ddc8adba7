"""Pytest configuration and fixtures for tunnel-bot tests."""

import itertools
import logging
import threading
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from tunnel_bot.config import BotConfig, TunnelProfile
from tunnel_bot.constants import LOGGER_NAME
from tunnel_bot.tunnel.controller import ProcessController
from tunnel_bot.tunnel.status_client import TunnelStatusClient

from .unit.fixtures import (
    TEST_AGENT_BINARY,
    TEST_API_TOKEN,
    TEST_OPERATOR,
    TEST_PROFILE_WEB,
    TEST_PROFILE_WEB_ARGS,
    TEST_PROFILES_DATA,
    TEST_RETURN_CODE_SIGTERM,
)

# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config_data() -> dict:
    """Raw config file contents with two profiles."""
    return {
        "api_token": TEST_API_TOKEN,
        "ngrok_bin_path": TEST_AGENT_BINARY,
        "available_ids": [TEST_OPERATOR],
        "tunnel_params": dict(TEST_PROFILES_DATA),
        "monitor_interval": 1,
        "launch_delay_seconds": 0,
        "is_verbose": False,
    }


@pytest.fixture
def config_file(tmp_path: Path, config_data: dict) -> Path:
    """Write config_data to a YAML file and return its path."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config_data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def bot_config(config_data: dict) -> BotConfig:
    return BotConfig.from_dict(config_data)


@pytest.fixture
def web_profile() -> TunnelProfile:
    return TunnelProfile.parse(TEST_PROFILE_WEB, TEST_PROFILE_WEB_ARGS)


# =============================================================================
# Process Fixtures
# =============================================================================


class FakeProcess:
    """Stand-in for subprocess.Popen that records its lifecycle."""

    _pids = itertools.count(1000)

    def __init__(self, registry: "ProcessRegistry", command: list[str]) -> None:
        self.registry = registry
        self.command = command
        self.pid = next(self._pids)
        self.returncode: int | None = None
        self.wait_calls = 0
        self.kill_calls = 0

    def wait(self, timeout: float | None = None) -> int:
        self.wait_calls += 1
        if self.returncode is None:
            self.returncode = TEST_RETURN_CODE_SIGTERM
            self.registry.reaped(self)
        return self.returncode

    def kill(self) -> None:
        self.kill_calls += 1

    def terminate(self) -> None:
        pass

    def poll(self) -> int | None:
        return self.returncode


class ProcessRegistry:
    """Tracks spawned fake processes and how many are alive at once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.processes: list[FakeProcess] = []
        self.live: set[int] = set()
        self.max_live = 0
        self.events: list[tuple[str, int]] = []

    def spawn(self, command: list[str], **kwargs: object) -> FakeProcess:
        process = FakeProcess(self, command)
        with self._lock:
            self.processes.append(process)
            self.live.add(process.pid)
            self.max_live = max(self.max_live, len(self.live))
            self.events.append(("spawn", process.pid))
        return process

    def signaled(self, process: FakeProcess) -> None:
        with self._lock:
            self.events.append(("signal", process.pid))

    def reaped(self, process: FakeProcess) -> None:
        with self._lock:
            self.live.discard(process.pid)
            self.events.append(("reap", process.pid))


@pytest.fixture
def process_registry() -> Iterator[ProcessRegistry]:
    """Patch process spawning and signaling in the controller with fakes."""
    registry = ProcessRegistry()
    with (
        patch(
            "tunnel_bot.tunnel.controller.subprocess.Popen", side_effect=registry.spawn
        ),
        patch(
            "tunnel_bot.tunnel.controller.signal_terminate", side_effect=registry.signaled
        ),
    ):
        yield registry


@pytest.fixture
def status_client() -> MagicMock:
    """Status client mock that reports no tunnels."""
    client = MagicMock(spec=TunnelStatusClient)
    client.fetch_status.return_value = []
    return client


@pytest.fixture
def controller(status_client: MagicMock) -> ProcessController:
    """Controller with no settle delay."""
    return ProcessController(
        agent_binary=TEST_AGENT_BINARY,
        status_client=status_client,
        settle_delay=0,
    )


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo configure_logging() side effects so caplog keeps working."""
    package_logger = logging.getLogger(LOGGER_NAME)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    propagate = package_logger.propagate
    yield
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate
