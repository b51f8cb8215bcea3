"""Storage-layer exceptions."""


class StorageError(Exception):
    """SQLite failure (constraint violation, I/O error) during a sync write."""
