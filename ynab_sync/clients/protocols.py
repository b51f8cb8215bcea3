"""Protocol definitions for client interfaces.

The sync service depends on this protocol rather than on ``YNABClient``,
so tests can hand it a fake that serves fixture payloads.
"""

from typing import Any, Protocol


class YNABClientProtocol(Protocol):
    """Protocol defining the YNAB client interface."""

    def get_categories(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch category groups changed since the cursor."""
        ...

    def get_months(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch months changed since the cursor."""
        ...

    def get_accounts(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch accounts changed since the cursor."""
        ...

    def get_transactions(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch transactions changed since the cursor."""
        ...

    def get_payees(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch payees changed since the cursor."""
        ...

    def get_category_month(self, month_id: str, category_id: str) -> dict[str, Any]:
        """Fetch one category's budget values for one month."""
        ...

    def close(self) -> None:
        """Release network resources."""
        ...
