"""CLI interface for the trend miner."""

from .commands import app as main

__all__ = ["main"]
