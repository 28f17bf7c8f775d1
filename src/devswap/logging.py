"""Debug logging for devswap.

Operator messages go through rich ``console.print``; everything logged here
is diagnostic and stays hidden unless ``--debug`` or ``DEVSWAP_DEBUG=1`` is
set. Log records share stderr with the operator messages and are rendered
by rich so the two interleave cleanly during a swap.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "devswap"

# Noisy below WARNING even in debug mode
QUIET_LOGGERS = ("docker", "urllib3")


def _get_log_level() -> int:
    if os.environ.get("DEVSWAP_DEBUG", "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _make_handler(debug: bool) -> RichHandler:
    return RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )


def _apply(level: int) -> None:
    debug = level == logging.DEBUG
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers = [h for h in root_logger.handlers if not isinstance(h, RichHandler)]
    root_logger.addHandler(_make_handler(debug))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``devswap`` namespace, configuring it on first use."""
    root_logger = logging.getLogger(ROOT_LOGGER)
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        _apply(_get_log_level())

    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def set_debug(enabled: bool = True) -> None:
    """Switch debug output on or off. Called by the CLI for ``--debug``."""
    _apply(logging.DEBUG if enabled else logging.WARNING)
