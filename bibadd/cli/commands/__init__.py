"""CLI commands module."""

from . import add, entry

__all__ = ["add", "entry"]
