"""YNAB Sync - incrementally mirror a YNAB budget into SQLite."""

__version__ = "0.1.0"
