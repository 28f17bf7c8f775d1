"""Docker operations for devswap.

The Runtime Client: a thin wrapper over docker-py's low-level APIClient
exposing exactly the calls the swap lifecycle needs, with every failure
converted into the devswap error hierarchy. Interactive attach goes
through the ``docker attach`` CLI so the terminal is wired up by Docker.
"""

from __future__ import annotations

import contextlib
import subprocess
from typing import TYPE_CHECKING, Any

import docker
from docker.errors import APIError, DockerException, NotFound
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout as RequestsTimeout

from .constants import DOCKER_COMMAND_TIMEOUT, STOP_GRACE_PERIOD
from .errors import (
    ContainerConflictError,
    ContainerError,
    ContainerNotFoundError,
    DockerNotFoundError,
    DockerTimeoutError,
)
from .logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = get_logger(__name__)

__all__ = [
    "DockerRuntime",
    "attach",
]


@contextlib.contextmanager
def _translate_errors(action: str, target: str) -> Iterator[None]:
    """Convert docker-py and transport errors into devswap errors."""
    logger.debug("Docker %s: %s", action, target)
    try:
        yield
    except NotFound as e:
        raise ContainerNotFoundError(f"{action} {target}: {e.explanation or e}") from e
    except APIError as e:
        if e.status_code == 409:
            raise ContainerConflictError(f"{action} {target}: {e.explanation or e}") from e
        raise ContainerError(f"{action} {target}: {e.explanation or e}") from e
    except RequestsTimeout as e:
        raise DockerTimeoutError(f"{action} {target} timed out: {e}") from e
    except RequestsConnectionError as e:
        raise DockerNotFoundError(f"{action} {target}: cannot reach Docker daemon ({e})") from e
    except DockerException as e:
        raise ContainerError(f"{action} {target}: {e}") from e
    logger.debug("Docker %s completed: %s", action, target)


class DockerRuntime:
    """Container lookup, inspect, create, start, stop, wait and remove."""

    def __init__(self, api: Any = None) -> None:
        if api is None:
            try:
                api = docker.from_env(timeout=DOCKER_COMMAND_TIMEOUT).api
            except DockerException as e:
                raise DockerNotFoundError(f"Cannot connect to Docker: {e}") from e
        self.api = api

    def ping(self) -> bool:
        """Check if the Docker daemon is responsive."""
        try:
            return bool(self.api.ping())
        except (DockerException, RequestsConnectionError, RequestsTimeout):
            return False

    def find_container_id(self, name: str) -> str:
        """Resolve a container name to its ID, stopped containers included.

        Docker reports names with a leading slash; the first exact match wins.

        Raises:
            ContainerNotFoundError: If no container has this name.
        """
        with _translate_errors("list containers", name):
            containers = self.api.containers(all=True)

        wanted = "/" + name
        for container in containers:
            if wanted in (container.get("Names") or ()):
                return container["Id"]
        raise ContainerNotFoundError(f"container with name {name} not found")

    def container_exists(self, name: str) -> bool:
        try:
            self.find_container_id(name)
        except ContainerNotFoundError:
            return False
        return True

    def inspect(self, container_id: str) -> dict[str, Any]:
        with _translate_errors("inspect", container_id):
            return self.api.inspect_container(container_id)

    def is_running(self, container_id: str) -> bool:
        state = self.inspect(container_id).get("State") or {}
        return bool(state.get("Running"))

    def create(self, config: dict[str, Any], name: str) -> str:
        """Create a container from a full Engine API create body.

        Returns:
            ID of the new container.
        """
        with _translate_errors("create", name):
            response = self.api.create_container_from_config(config, name=name)
        for warning in response.get("Warnings") or ():
            logger.warning("Docker create %s: %s", name, warning)
        return response["Id"]

    def start(self, container_id: str) -> None:
        with _translate_errors("start", container_id):
            self.api.start(container_id)

    def stop(self, container_id: str, *, timeout: int = STOP_GRACE_PERIOD) -> None:
        """Stop a container, killing it after ``timeout`` seconds."""
        with _translate_errors("stop", container_id):
            self.api.stop(container_id, timeout=timeout)

    def wait(self, container_id: str) -> int:
        """Block until the container is not running.

        Returns:
            The container's exit status.
        """
        with _translate_errors("wait", container_id):
            result = self.api.wait(container_id, condition="not-running")
        error = result.get("Error")
        if error:
            raise ContainerError(f"wait {container_id}: {error.get('Message', error)}")
        return int(result.get("StatusCode", 0))

    def remove(self, container_id: str) -> None:
        with _translate_errors("remove", container_id):
            self.api.remove_container(container_id)


def attach(container_id: str) -> int:
    """Attach the current terminal to a running container.

    Blocks until the attach session ends.

    Returns:
        Exit code of ``docker attach``.

    Raises:
        DockerNotFoundError: If the docker CLI is not in PATH.
    """
    cmd = ["docker", "attach", container_id]
    logger.debug("Running Docker command: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=False)
    except FileNotFoundError as e:
        logger.error("Docker not found in PATH: %s", " ".join(cmd))
        raise DockerNotFoundError(f"Docker not found in PATH. Command: {' '.join(cmd)}") from e
    logger.debug("Docker attach completed: exit=%d", result.returncode)
    return result.returncode
