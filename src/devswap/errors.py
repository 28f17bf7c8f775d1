"""Unified exception hierarchy for devswap.

All custom exceptions inherit from DevSwapError for consistent error handling.
The CLI catches these and converts them to operator-facing diagnostics.

Dependency direction:
    This module has NO internal dependencies (leaf module).
    It may be imported by: all other devswap modules.
    It should NOT import from any other devswap modules.
"""

from __future__ import annotations

from typing import Any


class DevSwapError(Exception):
    """Base exception for all devswap errors."""


class ValidationError(DevSwapError):
    """Input validation errors.

    Examples:
        - Neither --source nor --remote given
        - Empty container name
    """


class DockerError(DevSwapError):
    """Docker operation errors.

    Base class for all Runtime Client failures.
    """


class DockerNotFoundError(DockerError):
    """Raised when the Docker daemon cannot be reached."""


class DockerTimeoutError(DockerError):
    """Raised when a Docker API call times out."""


class ContainerNotFoundError(DockerError):
    """Raised when no container matches a lookup."""


class ContainerError(DockerError):
    """Raised when container operations fail."""


class GitCloneError(DevSwapError):
    """Raised when cloning the remote repository fails."""


class SwapError(DevSwapError):
    """Fatal failure of one lifecycle phase.

    Attributes:
        phase: The lifecycle phase that failed (a ``lifecycle.Phase``).
    """

    def __init__(self, phase: Any, message: str) -> None:
        super().__init__(message)
        self.phase = phase


class NameConflictError(SwapError):
    """Raised when a container name the swap needs is already taken."""


class ContainerConflictError(ContainerError):
    """Raised when Docker rejects a container name that is already in use."""
