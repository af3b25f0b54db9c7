"""Verify that a live listing is ordered newest first."""

__version__ = "0.1.0"
