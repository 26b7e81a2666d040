"""NPPES NPI Registry API client.

Supports the two registry reads the lookup service needs:
- Read by NPI number
- Search for individual (NPI-1) providers by organization name and state
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from config import NPPES_API_URL, NPPES_API_VERSION, ORG_SEARCH_LIMIT

from .base_api import BaseAPIClient

logger = logging.getLogger(__name__)

# NPPES enumeration types
INDIVIDUAL_ENUMERATION = "NPI-1"
ORGANIZATION_ENUMERATION = "NPI-2"


class NPPESClient(BaseAPIClient):
    """Client for npiregistry.cms.hhs.gov."""

    source = "NPPES API"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str = NPPES_API_URL,
        version: str = NPPES_API_VERSION,
    ) -> None:
        super().__init__(client)
        self.api_url = api_url
        self.version = version

    async def get_raw(self, npi: str) -> httpx.Response:
        """Fetch the registry response for an NPI without interpreting it.

        Used by the passthrough endpoint, which relays the upstream status.
        """
        return await self._request(
            self.api_url, params={"version": self.version, "number": npi}
        )

    async def lookup(self, npi: str) -> dict[str, Any] | None:
        """Return the first registry result for ``npi``, or None."""
        data = await self._get_json(
            self.api_url, params={"version": self.version, "number": npi}
        )
        results = _results(data)
        return results[0] if results else None

    async def search_individuals(
        self,
        organization_name: str,
        state: str | None = None,
        limit: int = ORG_SEARCH_LIMIT,
    ) -> list[dict[str, Any]]:
        """Search individual providers affiliated with an organization name.

        Args:
            organization_name: Exact organization name to match
            state: Two-letter state code to scope the search, if known
            limit: Maximum number of results (NPPES caps this at 200)

        Returns:
            Registry result entries in upstream order
        """
        params: dict[str, Any] = {
            "version": self.version,
            "enumeration_type": INDIVIDUAL_ENUMERATION,
            "organization_name": organization_name,
            "limit": limit,
        }
        if state:
            params["state"] = state

        data = await self._get_json(self.api_url, params=params)
        results = _results(data)
        logger.debug(
            f"NPPES search returned {len(results)} results"
            f" (state={state or 'any'})"
        )
        return results


def _results(data: Any) -> list[dict[str, Any]]:
    """Extract the ``results`` list from a registry payload."""
    if not isinstance(data, dict):
        return []
    results = data.get("results") or []
    if not isinstance(results, list):
        return []
    return [r for r in results if isinstance(r, dict)]
