"""CLI package for devswap.

This package contains the command line entry point and its supporting modules:
- run: Swap workflow (source preparation, Docker connection, controller)
- utils: Docker checks and failure reporting

Options accept the single-dash long spellings (``-name api``) as well as the
usual double-dash ones (``--name api``).
"""

from __future__ import annotations

import sys

import click
from rich.console import Console

from .. import __version__
from ..constants import DEFAULT_BRANCH, DEFAULT_IMAGE, DEFAULT_TARGET
from ..errors import ValidationError
from ..logging import set_debug
from ..run_config import SwapConfig

__all__ = ["cli"]

console = Console(stderr=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--name", "-name", "name", required=True, help="Name of the running container")
@click.option("--source", "-source", "source", help="Source path for the new volume mount")
@click.option(
    "--target",
    "-target",
    "target",
    default=DEFAULT_TARGET,
    show_default=True,
    help="Target path for the new volume mount in the container",
)
@click.option(
    "--image",
    "-image",
    "image",
    default=DEFAULT_IMAGE,
    show_default=True,
    help="New image for the container",
)
@click.option("--remote", "-remote", "remote", help="Remote git repository to clone")
@click.option(
    "--branch",
    "-branch",
    "branch",
    default=DEFAULT_BRANCH,
    show_default=True,
    help="Branch to checkout (with --remote)",
)
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.version_option(version=__version__, prog_name="devswap")
def cli(
    name: str,
    source: str | None,
    target: str,
    image: str,
    remote: str | None,
    branch: str,
    debug: bool,
) -> None:
    """devswap - Swap a container for a development twin, then restore it.

    Stops NAME, starts NAME-dev from IMAGE with SOURCE mounted at TARGET and
    attaches your terminal. Quitting the shell (or Ctrl+C) removes the dev
    container and recreates NAME from its original configuration.
    """
    if debug:
        set_debug(True)

    try:
        config = SwapConfig.from_cli(
            name=name,
            source=source,
            target=target,
            image=image,
            remote=remote,
            branch=branch,
        )
    except ValidationError as e:
        console.print(f"[red]Error: {e}[/red]", highlight=False)
        sys.exit(2)

    # Lazy import: pulls in the Docker SDK
    from .run import run as _run

    _run(config)


if __name__ == "__main__":  # pragma: no cover
    cli()
