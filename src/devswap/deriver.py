"""Derive the development container configuration from a snapshot.

Pure data transformation: no Docker calls and no environment reads. The
caller's home directory is passed in explicitly.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from .constants import (
    CONTAINER_GITCONFIG,
    CONTAINER_PKG_CACHE,
    CONTAINER_SSH_DIR,
    DEV_ENTRYPOINT,
    DEV_MARKER_ENV,
    DEV_NAME_SUFFIX,
    HOST_GITCONFIG,
    HOST_PKG_CACHE,
    HOST_SSH_DIR,
    TOOLCHAIN_PATHS,
)
from .models import DevSpec, Mount, OriginalSpec

PATH_PREFIX = "PATH="


def dev_name(original_name: str) -> str:
    """Deterministic name of the dev container for ``original_name``."""
    return f"{original_name}{DEV_NAME_SUFFIX}"


def extend_path(env: tuple[str, ...] | list[str]) -> list[str]:
    """Append the toolchain directories to PATH.

    An existing ``PATH=`` entry is rewritten in place. Without one, a new
    entry holding only the toolchain directories is appended.
    """
    result = list(env)
    for i, entry in enumerate(result):
        if entry.startswith(PATH_PREFIX):
            current = entry[len(PATH_PREFIX) :]
            parts = [current, *TOOLCHAIN_PATHS] if current else list(TOOLCHAIN_PATHS)
            result[i] = PATH_PREFIX + ":".join(parts)
            return result
    result.append(PATH_PREFIX + ":".join(TOOLCHAIN_PATHS))
    return result


def dev_mounts(source_path: str, target_path: str, home: str) -> tuple[Mount, ...]:
    """The four bind mounts of a dev container, in fixed order."""
    home_dir = PurePosixPath(home)
    return (
        Mount(source=source_path, target=target_path),
        # SSH keys and git config for private repositories
        Mount(source=str(home_dir / HOST_SSH_DIR), target=CONTAINER_SSH_DIR),
        Mount(source=str(home_dir / HOST_GITCONFIG), target=CONTAINER_GITCONFIG),
        # Module cache shared with the host
        Mount(source=str(home_dir / HOST_PKG_CACHE), target=CONTAINER_PKG_CACHE),
    )


def derive(
    original: OriginalSpec,
    image: str,
    source_path: str,
    target_path: str,
    *,
    home: str,
) -> DevSpec:
    """Build the dev container configuration.

    Args:
        original: Snapshot of the container being replaced.
        image: Development image reference.
        source_path: Host source tree mounted at ``target_path``.
        target_path: Mount point and working directory in the container.
        home: Caller's home directory, used for the credential and cache mounts.

    Returns:
        A new DevSpec; ``original`` is left untouched.
    """
    env = extend_path(original.env)
    env.append(DEV_MARKER_ENV)

    return DevSpec(
        name=dev_name(original.name),
        image=image,
        working_dir=target_path,
        entrypoint=DEV_ENTRYPOINT,
        env=tuple(env),
        mounts=dev_mounts(source_path, target_path, home),
        base_config=original.config,
        base_host_config=original.host_config,
        networks=original.networks,
    )
