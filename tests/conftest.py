"""Pytest configuration and fixtures for devswap tests.

This module ensures the devswap package is importable during tests
without requiring installation, and provides an in-memory Docker runtime.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from devswap.errors import ContainerConflictError, ContainerNotFoundError  # noqa: E402
from devswap.run_config import SwapConfig  # noqa: E402

# Upper bound for any blocking call in the fake, so a broken test fails instead of hanging
FAKE_BLOCK_TIMEOUT = 5.0


def make_inspect(
    container_id: str = "orig123",
    name: str = "api",
    *,
    image: str = "registry.example.com/api:1.4",
    env: list[str] | None = None,
    cmd: list[str] | None = None,
    entrypoint: list[str] | None = None,
    mounts: list[dict[str, str]] | None = None,
    networks: dict[str, Any] | None = None,
    running: bool = True,
) -> dict[str, Any]:
    """A ``docker inspect`` payload with the fields devswap reads."""
    return {
        "Id": container_id,
        "Name": f"/{name}",
        "State": {"Running": running},
        "Config": {
            "Image": image,
            "Hostname": container_id[:12],
            "Env": env if env is not None else ["PATH=/usr/local/bin:/usr/bin", "PORT=8080"],
            "Cmd": cmd if cmd is not None else ["./server", "--port", "8080"],
            "Entrypoint": entrypoint,
            "WorkingDir": "/srv",
            "Labels": {"com.docker.compose.service": name},
        },
        "HostConfig": {
            "NetworkMode": "backend",
            "RestartPolicy": {"Name": "unless-stopped"},
            "Mounts": mounts
            if mounts is not None
            else [{"Type": "volume", "Source": "api-data", "Target": "/data"}],
        },
        "NetworkSettings": {
            "Networks": networks
            if networks is not None
            else {"backend": {"Aliases": ["api"], "NetworkID": "net1"}},
        },
    }


class FakeRuntime:
    """In-memory stand-in for DockerRuntime that records every call.

    ``calls`` holds ``(operation, container_name)`` tuples in call order.
    Put an exception in ``fail`` under ``op`` or ``(op, name)`` to make
    that call raise it.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []
        self.fail: dict[Any, Exception] = {}
        self.containers: dict[str, dict[str, Any]] = {}
        self.created: dict[str, dict[str, Any]] = {}
        self.stop_timeouts: list[int] = []
        self.available = True
        self._stopped: dict[str, threading.Event] = {}
        self._lock = threading.Lock()
        self._counter = 0

    def add_container(self, inspect: dict[str, Any]) -> str:
        container_id = inspect["Id"]
        self.containers[container_id] = {
            "name": inspect["Name"].lstrip("/"),
            "inspect": inspect,
            "running": inspect["State"]["Running"],
            "exit_code": 0,
        }
        self._stopped[container_id] = threading.Event()
        if not inspect["State"]["Running"]:
            self._stopped[container_id].set()
        return container_id

    def _name(self, container_id: str) -> str:
        container = self.containers.get(container_id)
        return container["name"] if container else container_id

    def _record(self, op: str, name: str) -> None:
        with self._lock:
            self.calls.append((op, name))
        error = self.fail.get((op, name)) or self.fail.get(op)
        if error is not None:
            raise error

    def _get(self, container_id: str) -> dict[str, Any]:
        try:
            return self.containers[container_id]
        except KeyError:
            raise ContainerNotFoundError(f"No such container: {container_id}") from None

    def ops(self, name: str | None = None) -> list[str]:
        """Operations recorded, optionally only those on ``name``."""
        return [op for op, target in self.calls if name is None or target == name]

    def by_name(self, name: str) -> dict[str, Any] | None:
        for container in self.containers.values():
            if container["name"] == name:
                return container
        return None

    # Runtime interface

    def ping(self) -> bool:
        return self.available

    def find_container_id(self, name: str) -> str:
        self._record("find", name)
        for container_id, container in self.containers.items():
            if container["name"] == name:
                return container_id
        raise ContainerNotFoundError(f"container with name {name} not found")

    def container_exists(self, name: str) -> bool:
        self._record("exists", name)
        return self.by_name(name) is not None

    def inspect(self, container_id: str) -> dict[str, Any]:
        self._record("inspect", self._name(container_id))
        container = self._get(container_id)
        inspect = dict(container["inspect"])
        inspect["State"] = {"Running": container["running"]}
        return inspect

    def is_running(self, container_id: str) -> bool:
        return bool(self.inspect(container_id)["State"]["Running"])

    def create(self, config: dict[str, Any], name: str) -> str:
        self._record("create", name)
        if self.by_name(name) is not None:
            raise ContainerConflictError(f'create {name}: Conflict. The container name "/{name}"')
        self._counter += 1
        container_id = f"new{self._counter}"
        self.created[name] = config
        inspect = {
            "Id": container_id,
            "Name": f"/{name}",
            "State": {"Running": False},
            "Config": {k: v for k, v in config.items() if k[0].isupper()},
            "HostConfig": config.get("HostConfig", {}),
            "NetworkSettings": {
                "Networks": (config.get("NetworkingConfig") or {}).get("EndpointsConfig", {})
            },
        }
        self.add_container(inspect)
        return container_id

    def start(self, container_id: str) -> None:
        self._record("start", self._name(container_id))
        container = self._get(container_id)
        container["running"] = True
        self._stopped[container_id].clear()

    def stop(self, container_id: str, *, timeout: int = 0) -> None:
        self._record("stop", self._name(container_id))
        self.stop_timeouts.append(timeout)
        self.exit_container(container_id, 137)

    def wait(self, container_id: str) -> int:
        self._record("wait", self._name(container_id))
        self._get(container_id)
        if not self._stopped[container_id].wait(FAKE_BLOCK_TIMEOUT):
            raise AssertionError(f"wait on {container_id} never returned")
        return self.containers.get(container_id, {}).get("exit_code", 0)

    def remove(self, container_id: str) -> None:
        self._record("remove", self._name(container_id))
        self._get(container_id)
        del self.containers[container_id]
        # Removal releases anyone still waiting on the container
        self._stopped[container_id].set()

    # Test helpers

    def exit_container(self, container_id: str, code: int) -> None:
        """Simulate the container's main process exiting."""
        container = self._get(container_id)
        container["running"] = False
        container["exit_code"] = code
        self._stopped[container_id].set()


class FakeAttach:
    """Attach function for tests.

    Runs ``action`` (if any) with the container ID, then blocks until
    ``release()`` so the attach session never ends the session by itself
    unless ``returncode`` is set to end it immediately.
    """

    def __init__(self, action: Any = None, returncode: int | None = None) -> None:
        self.action = action
        self.returncode = returncode
        self.attached: list[str] = []
        self._release = threading.Event()

    def __call__(self, container_id: str) -> int:
        self.attached.append(container_id)
        if self.action is not None:
            self.action(container_id)
        if self.returncode is not None:
            return self.returncode
        self._release.wait(FAKE_BLOCK_TIMEOUT)
        return 0

    def release(self) -> None:
        self._release.set()


@pytest.fixture
def runtime() -> FakeRuntime:
    """Fake runtime holding one running container named ``api``."""
    fake = FakeRuntime()
    fake.add_container(make_inspect())
    return fake


@pytest.fixture
def swap_config(tmp_path: Path) -> SwapConfig:
    return SwapConfig.from_cli(name="api", source=str(tmp_path), home="/home/dev")
