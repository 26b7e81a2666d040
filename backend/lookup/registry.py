"""Registry lookup: NPPES identity and classification for an NPI."""

from __future__ import annotations

import logging
from typing import Any

from connectors.api import (
    INDIVIDUAL_ENUMERATION,
    ORGANIZATION_ENUMERATION,
    NPPESClient,
)
from utils import require_valid_npi

from .models import EntityType, RegistryEntry

logger = logging.getLogger(__name__)

ENUMERATION_TYPES = {
    INDIVIDUAL_ENUMERATION: EntityType.INDIVIDUAL,
    ORGANIZATION_ENUMERATION: EntityType.ORGANIZATION,
}


def _primary_address(addresses: Any) -> dict[str, Any]:
    """Pick the practice location address, else the first address."""
    if not isinstance(addresses, list):
        return {}
    candidates = [a for a in addresses if isinstance(a, dict)]
    for address in candidates:
        if str(address.get("address_purpose", "")).upper() == "LOCATION":
            return address
    return candidates[0] if candidates else {}


def parse_registry_entry(npi: str, result: dict[str, Any]) -> RegistryEntry:
    """Normalize one NPPES ``results`` entry.

    Args:
        npi: The NPI that was looked up
        result: Raw registry result object

    Returns:
        RegistryEntry with empty strings for anything missing
    """
    basic = result.get("basic")
    if not isinstance(basic, dict):
        basic = {}
    address = _primary_address(result.get("addresses"))

    return RegistryEntry(
        npi=str(result.get("number") or npi),
        enumeration_type=ENUMERATION_TYPES.get(
            str(result.get("enumeration_type") or ""), EntityType.UNKNOWN
        ),
        organization_name=str(basic.get("organization_name") or "").strip(),
        first_name=str(basic.get("first_name") or "").strip(),
        last_name=str(basic.get("last_name") or "").strip(),
        city=str(address.get("city") or "").strip(),
        state=str(address.get("state") or "").strip(),
    )


async def lookup_registry(nppes: NPPESClient, npi: str) -> RegistryEntry | None:
    """Look up an NPI in the NPPES registry.

    Returns:
        RegistryEntry, or None if the registry call was unsuccessful or
        returned no results
    """
    require_valid_npi(npi)

    result = await nppes.lookup(npi)
    if result is None:
        logger.info(f"NPI {npi} not found in NPPES")
        return None
    return parse_registry_entry(npi, result)
