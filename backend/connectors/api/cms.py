"""CMS Medicare Physician & Other Practitioners data API client.

Reads the two public datasets used for billing summaries:
- By Provider: one aggregate row per rendering NPI
- By Provider & Service: one row per NPI and HCPCS code
"""

from __future__ import annotations

from typing import Any

import httpx

from config import (
    CMS_AGGREGATE_DATASET_ID,
    CMS_API_BASE_URL,
    CMS_BY_SERVICE_DATASET_ID,
)

from .base_api import BaseAPIClient

# Row caps per request
AGGREGATE_ROW_LIMIT = 1
SERVICE_ROW_LIMIT = 500


class CMSDataClient(BaseAPIClient):
    """Client for data.cms.gov dataset queries filtered by rendering NPI."""

    source = "CMS API"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = CMS_API_BASE_URL,
        aggregate_dataset_id: str = CMS_AGGREGATE_DATASET_ID,
        by_service_dataset_id: str = CMS_BY_SERVICE_DATASET_ID,
    ) -> None:
        super().__init__(client)
        self.base_url = base_url.rstrip("/")
        self.aggregate_dataset_id = aggregate_dataset_id
        self.by_service_dataset_id = by_service_dataset_id

    def _dataset_url(self, dataset_id: str) -> str:
        return f"{self.base_url}/dataset/{dataset_id}/data"

    async def fetch_provider_totals(self, npi: str) -> list[dict[str, Any]]:
        """Fetch the provider-level aggregate row (at most one)."""
        return await self._get_rows(
            self._dataset_url(self.aggregate_dataset_id),
            params={"filter[Rndrng_NPI]": npi, "size": AGGREGATE_ROW_LIMIT},
        )

    async def fetch_provider_services(self, npi: str) -> list[dict[str, Any]]:
        """Fetch provider + HCPCS service-level rows (at most 500)."""
        return await self._get_rows(
            self._dataset_url(self.by_service_dataset_id),
            params={"filter[Rndrng_NPI]": npi, "size": SERVICE_ROW_LIMIT},
        )
