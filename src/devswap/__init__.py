"""devswap - Swap a running container for a development twin, then restore it."""

__version__ = "0.1.0"
