"""Upstream API clients.

Provides clients for the public CMS services the lookup backend proxies:
- CMS data API (Medicare provider and provider/service datasets)
- NPPES NPI Registry
"""

from .base_api import APIConnectionError, BaseAPIClient
from .cms import CMSDataClient
from .nppes import INDIVIDUAL_ENUMERATION, ORGANIZATION_ENUMERATION, NPPESClient

__all__ = [
    "APIConnectionError",
    "BaseAPIClient",
    "CMSDataClient",
    "NPPESClient",
    "INDIVIDUAL_ENUMERATION",
    "ORGANIZATION_ENUMERATION",
]
