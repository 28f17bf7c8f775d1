"""Run operations for devswap.

Prepares the source tree, connects to Docker and drives one swap.
"""

from __future__ import annotations

import sys

from ..docker import DockerRuntime
from ..errors import DevSwapError, DockerError, GitCloneError, SwapError
from ..git import clone_remote
from ..lifecycle import SwapController
from ..logging import get_logger
from ..run_config import SwapConfig
from .utils import ERR_DOCKER_NOT_RUNNING, check_docker, console, report_swap_failure

logger = get_logger(__name__)


def prepare_source(config: SwapConfig) -> str:
    """Host directory to mount, cloning the remote first when one is set."""
    if config.remote:
        console.print(f"[dim]Cloning {config.remote} ({config.branch})...[/dim]", highlight=False)
        return str(clone_remote(config.remote, config.branch))
    assert config.source is not None
    return config.source


def run(config: SwapConfig) -> None:
    """Swap the target container for a dev container and restore it on exit."""
    logger.info("Starting swap: name=%s, image=%s", config.name, config.image)

    try:
        source_path = prepare_source(config)
    except GitCloneError as e:
        console.print(f"[red]Error: {e}[/red]", highlight=False)
        sys.exit(1)

    try:
        runtime = DockerRuntime()
    except DockerError as e:
        console.print(ERR_DOCKER_NOT_RUNNING)
        console.print(f"[dim]{e}[/dim]", highlight=False)
        sys.exit(1)

    if not check_docker(runtime):
        console.print(ERR_DOCKER_NOT_RUNNING)
        console.print("Start Docker and try again.")
        sys.exit(1)

    controller = SwapController(runtime, config, source_path)
    try:
        event = controller.execute()
    except SwapError as e:
        logger.error("Swap failed in %s: %s", e.phase.value, e)
        report_swap_failure(controller, e)
        sys.exit(1)
    except DevSwapError as e:
        logger.error("Swap failed in %s: %s", controller.phase.value, e)
        console.print(f"[red]Error during {controller.phase.value}: {e}[/red]", highlight=False)
        sys.exit(1)

    logger.info("Swap complete: session ended by %s", event.source.value)
