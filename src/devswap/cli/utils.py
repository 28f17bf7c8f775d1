"""CLI utilities for devswap.

Docker status checks and failure reporting.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from ..lifecycle import DESTRUCTIVE_PHASES, Phase

if TYPE_CHECKING:
    from ..docker import DockerRuntime
    from ..errors import SwapError
    from ..lifecycle import SwapController

console = Console(stderr=True)

ERR_DOCKER_NOT_RUNNING = "[red]Error: Docker is not running.[/red]"


def check_docker(runtime: DockerRuntime) -> bool:
    """Check if the Docker daemon behind ``runtime`` answers."""
    return runtime.ping()


def report_swap_failure(controller: SwapController, error: SwapError) -> None:
    """Print which phase failed and, if needed, what is left to restore by hand."""
    console.print(f"[red]Error during {error.phase.value}: {error}[/red]", highlight=False)

    original = controller.original
    if original is None or error.phase not in DESTRUCTIVE_PHASES:
        return

    console.print(
        f"[yellow]The original container '{original.name}' is not running "
        f"(image {original.image}).[/yellow]",
        highlight=False,
    )
    if error.phase == Phase.RECREATE_ORIGINAL and controller.restored_id is not None:
        # Recreated from the snapshot but never started
        console.print(
            f"[dim]Fix the cause above, then run: docker start {original.name}[/dim]",
            highlight=False,
        )
        return
    if error.phase == Phase.START_DEV and controller.dev_id is not None and controller.dev_spec:
        console.print(f"[dim]Run: docker rm -f {controller.dev_spec.name}[/dim]", highlight=False)
    console.print(
        "[dim]Recreate it the way it was deployed (docker compose up, docker run, ...)[/dim]",
        highlight=False,
    )
