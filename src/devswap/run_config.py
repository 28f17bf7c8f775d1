"""Run configuration dataclass for devswap.

Bundles CLI arguments into a single configuration object for cleaner
function signatures and easier testing.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_BRANCH, DEFAULT_IMAGE, DEFAULT_TARGET
from .errors import ValidationError
from .paths import resolve_home, resolve_source


@dataclass(frozen=True)
class SwapConfig:
    """Configuration for one container swap.

    Immutable so the controller cannot alter what the operator asked for.
    """

    name: str
    source: str | None = None
    target: str = DEFAULT_TARGET
    image: str = DEFAULT_IMAGE
    remote: str | None = None
    branch: str = DEFAULT_BRANCH
    home: str = ""

    @classmethod
    def from_cli(
        cls,
        *,
        name: str,
        source: str | None = None,
        target: str = DEFAULT_TARGET,
        image: str = DEFAULT_IMAGE,
        remote: str | None = None,
        branch: str = DEFAULT_BRANCH,
        home: str | None = None,
    ) -> SwapConfig:
        """Create SwapConfig from CLI arguments.

        Raises:
            ValidationError: If the arguments cannot describe a swap.
        """
        name = name.strip()
        if not name:
            raise ValidationError("Argument for -name is required")
        if not remote and not source:
            raise ValidationError("One of -source or -remote is required")

        return cls(
            name=name,
            source=resolve_source(source) if source and not remote else None,
            target=target,
            image=image,
            remote=remote or None,
            branch=branch,
            home=home or resolve_home(),
        )
