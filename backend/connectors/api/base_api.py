"""Base API client for the public CMS and NPPES services.

Provides common functionality for the upstream API clients:
- Shared async HTTP client with a request timeout
- Non-success status degradation (logged, returned as "no data")
- Transport and decoding failures wrapped in APIConnectionError

Requests are never retried. A failed upstream call either degrades
in place or propagates once.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class APIConnectionError(Exception):
    """Raised when an upstream API cannot be reached or returns garbage."""

    def __init__(self, message: str, source: str, status_code: int | None = None):
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class BaseAPIClient:
    """Base class for read-only upstream API clients.

    Subclasses set ``source`` (used in log lines and errors) and build
    their own query parameters; this class only performs the GET and
    decodes the response.
    """

    source = "api"

    def __init__(self, client: httpx.AsyncClient) -> None:
        """Initialize API client.

        Args:
            client: Open httpx.AsyncClient owned by the caller
        """
        self._client = client

    async def _request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make a single GET request.

        Raises:
            APIConnectionError: If the request fails at the transport level
        """
        try:
            return await self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise APIConnectionError(
                f"{self.source} request failed: {e}",
                self.source,
            ) from e

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any | None:
        """GET ``url`` and decode the JSON body.

        Returns:
            Decoded JSON, or None if the upstream returned a non-success
            status

        Raises:
            APIConnectionError: On transport failure or an undecodable body
        """
        response = await self._request(url, params=params)

        if not response.is_success:
            logger.warning(
                f"{self.source} returned {response.status_code} for {url}"
            )
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIConnectionError(
                f"{self.source} returned malformed JSON: {e}",
                self.source,
                status_code=response.status_code,
            ) from e

    async def _get_rows(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """GET a list-of-objects endpoint.

        A non-success status or a body that is not a list yields an empty
        list.
        """
        data = await self._get_json(url, params=params)
        if not isinstance(data, list):
            return []
        return [row for row in data if isinstance(row, dict)]
