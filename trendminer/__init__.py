"""Trend-pattern mining and matching engine for game outcome records."""

__version__ = "0.1.0"
