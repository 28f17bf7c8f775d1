"""Value types for the container swap.

OriginalSpec is the snapshot taken from ``docker inspect`` before the
original container is destroyed. DevSpec is the configuration the
development container is created from. Both are frozen; their mapping
fields are private deep copies and every accessor hands out a fresh copy,
so nothing built from one can alias the other.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


def _strip_slash(name: str) -> str:
    # Docker reports names as "/name"
    return name[1:] if name.startswith("/") else name


@dataclass(frozen=True)
class Mount:
    """A bind mount from a host path into the container."""

    source: str
    target: str
    type: str = "bind"

    def to_api(self) -> dict[str, str]:
        """Render as a Docker Engine ``HostConfig.Mounts`` entry."""
        return {"Type": self.type, "Source": self.source, "Target": self.target}


@dataclass(frozen=True)
class OriginalSpec:
    """Immutable snapshot of the original container.

    Attributes:
        id: Runtime-assigned container ID.
        name: Container name without Docker's leading slash.
    """

    id: str
    name: str
    _config: dict[str, Any] = field(repr=False)
    _host_config: dict[str, Any] = field(repr=False)
    _networks: dict[str, Any] = field(repr=False)

    @classmethod
    def from_inspect(cls, data: dict[str, Any]) -> OriginalSpec:
        """Build a snapshot from a ``docker inspect`` payload."""
        network_settings = data.get("NetworkSettings") or {}
        return cls(
            id=data["Id"],
            name=_strip_slash(data.get("Name", "")),
            _config=copy.deepcopy(data.get("Config") or {}),
            _host_config=copy.deepcopy(data.get("HostConfig") or {}),
            _networks=copy.deepcopy(network_settings.get("Networks") or {}),
        )

    @property
    def image(self) -> str:
        return self._config.get("Image", "")

    @property
    def env(self) -> tuple[str, ...]:
        return tuple(self._config.get("Env") or ())

    @property
    def config(self) -> dict[str, Any]:
        return copy.deepcopy(self._config)

    @property
    def host_config(self) -> dict[str, Any]:
        return copy.deepcopy(self._host_config)

    @property
    def networks(self) -> dict[str, Any]:
        return copy.deepcopy(self._networks)

    def create_config(self) -> dict[str, Any]:
        """Engine API create body that recreates the original container."""
        return {
            **self.config,
            "HostConfig": self.host_config,
            "NetworkingConfig": {"EndpointsConfig": self.networks},
        }


@dataclass(frozen=True)
class DevSpec:
    """Configuration of the development container.

    ``base_config`` and ``base_host_config`` hold the original settings the
    dev container inherits; the remaining fields override them.
    """

    name: str
    image: str
    working_dir: str
    entrypoint: tuple[str, ...]
    env: tuple[str, ...]
    mounts: tuple[Mount, ...]
    base_config: dict[str, Any] = field(repr=False)
    base_host_config: dict[str, Any] = field(repr=False)
    networks: dict[str, Any] = field(repr=False)
    cmd: tuple[str, ...] = ()
    attach_stdin: bool = True
    attach_stdout: bool = True
    attach_stderr: bool = True
    open_stdin: bool = True
    stdin_once: bool = True
    tty: bool = True

    def create_config(self) -> dict[str, Any]:
        """Engine API create body for the dev container."""
        config = copy.deepcopy(self.base_config)
        config.update(
            {
                "Image": self.image,
                "WorkingDir": self.working_dir,
                "Cmd": list(self.cmd),
                "Entrypoint": list(self.entrypoint),
                "Env": list(self.env),
                "AttachStdin": self.attach_stdin,
                "AttachStdout": self.attach_stdout,
                "AttachStderr": self.attach_stderr,
                "OpenStdin": self.open_stdin,
                "StdinOnce": self.stdin_once,
                "Tty": self.tty,
            }
        )
        host_config = copy.deepcopy(self.base_host_config)
        host_config["Mounts"] = [m.to_api() for m in self.mounts]
        config["HostConfig"] = host_config
        config["NetworkingConfig"] = {"EndpointsConfig": copy.deepcopy(self.networks)}
        return config
