"""Constants module for devswap.

All defaults, timeouts and fixed container paths are defined here (SSOT).
"""

from __future__ import annotations

# === CLI Defaults ===
DEFAULT_IMAGE = "docker-dev-golang:latest"  # Development image
DEFAULT_TARGET = "/app"  # Source mount point in the dev container
DEFAULT_BRANCH = "master"  # Branch checked out with --remote

# === Dev Container Settings ===
DEV_NAME_SUFFIX = "-dev"  # Appended to the original container name
DEV_ENTRYPOINT = ("/bin/sh",)  # Interactive shell
DEV_MARKER_ENV = "DEV_CONTAINER=true"  # Flags the container as a dev instance
TOOLCHAIN_PATHS = ("/go/bin", "/usr/local/go/bin")  # Appended to PATH

# === Mount Targets (container side) ===
CONTAINER_SSH_DIR = "/root/.ssh"
CONTAINER_GITCONFIG = "/root/.gitconfig"
CONTAINER_PKG_CACHE = "/go/pkg"

# Host paths, relative to the caller's home directory
HOST_SSH_DIR = ".ssh"
HOST_GITCONFIG = ".gitconfig"
HOST_PKG_CACHE = "go/pkg"

# === Clone Settings ===
CLONE_BASE_DIR = "/tmp"  # --remote clones land in /tmp/<repo>

# === Docker Timeouts (seconds) ===
DOCKER_COMMAND_TIMEOUT = 30  # Quick API calls (ping, inspect, list)
STOP_GRACE_PERIOD = 0  # Immediate stop, no cooperative shutdown window
GIT_CLONE_TIMEOUT = 600  # 10 min for clones
