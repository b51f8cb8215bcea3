"""Command line interface for YNAB Sync."""

from .main import main

__all__ = ["main"]
