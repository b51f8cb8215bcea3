"""API clients for YNAB Sync."""

from .protocols import YNABClientProtocol
from .ynab_client import RemoteError, TransportError, YNABClient, YNABClientError

__all__ = [
    "YNABClient",
    "YNABClientError",
    "YNABClientProtocol",
    "TransportError",
    "RemoteError",
]
