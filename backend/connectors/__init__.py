"""Upstream data source connectors.

Provides async clients for the public CMS services used by the lookup
backend:
- CMS data API (Medicare provider and provider/service datasets)
- NPPES NPI Registry

Example usage:
    import httpx
    from connectors.api import CMSDataClient

    async with httpx.AsyncClient() as client:
        cms = CMSDataClient(client)
        rows = await cms.fetch_provider_totals("1234567890")
"""

from .api import APIConnectionError, CMSDataClient, NPPESClient

__all__ = ["APIConnectionError", "CMSDataClient", "NPPESClient"]
