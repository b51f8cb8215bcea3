"""YNAB API client.

Thin GET-only wrapper around the YNAB REST API. Each fetch returns the raw
decoded JSON body; normalization happens in ``services.normalizer``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..config import YNABConfig

logger = logging.getLogger(__name__)


class YNABClientError(Exception):
    """Base error for YNAB API failures."""


class TransportError(YNABClientError):
    """Network-level failure reaching the YNAB API."""


class RemoteError(YNABClientError):
    """YNAB API answered with a status outside 2xx/3xx."""

    def __init__(self, status_code: int, url: str, detail: str = ""):
        self.status_code = status_code
        self.url = url
        self.detail = detail
        message = f"Request to {url} failed with status code {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


def _error_detail(response: requests.Response) -> str:
    """Pull the human-readable message out of a YNAB error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("detail") or error.get("name") or ""
    return ""


class YNABClient:
    """Client for the incremental YNAB budget endpoints."""

    def __init__(self, config: YNABConfig, session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            config: YNAB settings (token, budget id, base URL, timeout).
            session: Optional pre-built session (used by tests).
        """
        self._config = config
        self._session = session or requests.Session()
        self._session.headers["Authorization"] = f"Bearer {config.require_token()}"

    @property
    def budget_id(self) -> str:
        return self._config.budget_id

    def close(self) -> None:
        self._session.close()

    def _budget_url(self, *parts: str) -> str:
        return "/".join([self._config.api_url, "budgets", self._config.budget_id, *parts])

    def _get(self, url: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Issue a GET and return the decoded JSON body.

        Raises:
            TransportError: Connection failure, timeout, or undecodable body.
            RemoteError: Status code outside 200..399.
        """
        try:
            response = self._session.request(
                "GET", url, params=params, timeout=self._config.timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        logger.debug(
            "GET %s params=%s -> %s (rate limit %s)",
            url,
            params,
            response.status_code,
            response.headers.get("X-Rate-Limit", "?"),
        )

        if not 200 <= response.status_code <= 399:
            raise RemoteError(response.status_code, url, _error_detail(response))

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"GET {url} returned an undecodable body") from e

    def _get_incremental(self, endpoint: str, server_knowledge: int) -> dict[str, Any]:
        return self._get(
            self._budget_url(endpoint),
            params={"last_knowledge_of_server": server_knowledge},
        )

    # =========================================================================
    # Incremental endpoints
    # =========================================================================

    def get_categories(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch category groups (with nested categories) changed since the cursor."""
        return self._get_incremental("categories", server_knowledge)

    def get_months(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch budget months changed since the cursor."""
        return self._get_incremental("months", server_knowledge)

    def get_accounts(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch accounts changed since the cursor."""
        return self._get_incremental("accounts", server_knowledge)

    def get_transactions(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch transactions (with nested subtransactions) changed since the cursor."""
        return self._get_incremental("transactions", server_knowledge)

    def get_payees(self, server_knowledge: int = 0) -> dict[str, Any]:
        """Fetch payees changed since the cursor."""
        return self._get_incremental("payees", server_knowledge)

    # =========================================================================
    # Snapshot endpoints
    # =========================================================================

    def get_category_month(self, month_id: str, category_id: str) -> dict[str, Any]:
        """Fetch the current budget values of one category in one month.

        Not incremental: YNAB only exposes the current value for a
        (month, category) pair.
        """
        return self._get(self._budget_url("months", month_id, "categories", category_id))
