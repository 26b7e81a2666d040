"""Organization resolver: discover individual providers for an org NPI.

Organization (Type 2) NPIs usually have no rendering-provider billing in
the CMS datasets. Their affiliated individuals can be approximated by an
NPPES search on the organization's exact name, scoped by state. The
search is heuristic and best-effort: every upstream failure degrades to
an empty membership instead of an error.
"""

from __future__ import annotations

import logging
from typing import Any

from config import MAX_ORG_MEMBERS, ORG_SEARCH_LIMIT
from connectors.api import APIConnectionError, ORGANIZATION_ENUMERATION, NPPESClient
from utils import is_valid_npi, require_valid_npi, sanitize_for_log

from .models import OrganizationMembership
from .registry import lookup_registry

logger = logging.getLogger(__name__)


def extract_member_npis(
    results: list[dict[str, Any]],
    exclude: str | None = None,
) -> list[str]:
    """Pull individual NPIs out of registry search results.

    Keeps upstream order, skips organization entries, malformed numbers,
    duplicates and the ``exclude`` NPI.
    """
    members: list[str] = []
    seen: set[str] = set()
    for result in results:
        if result.get("enumeration_type") == ORGANIZATION_ENUMERATION:
            continue
        number = str(result.get("number") or "")
        if not is_valid_npi(number) or number == exclude or number in seen:
            continue
        seen.add(number)
        members.append(number)
    return members


async def _search_members(
    nppes: NPPESClient,
    organization_name: str,
    state: str | None,
    exclude: str,
    search_limit: int,
) -> list[str]:
    try:
        results = await nppes.search_individuals(
            organization_name, state=state, limit=search_limit
        )
    except APIConnectionError as e:
        logger.warning(f"NPPES member search failed: {sanitize_for_log(str(e))}")
        return []
    return extract_member_npis(results, exclude=exclude)


async def resolve_organization(
    nppes: NPPESClient,
    npi: str,
    max_members: int = MAX_ORG_MEMBERS,
    search_limit: int = ORG_SEARCH_LIMIT,
) -> OrganizationMembership:
    """Resolve an organization NPI to a bounded list of member NPIs.

    Search results are cleaned before the ``max_members`` cap: organization
    entries, malformed and duplicate NPIs, and the organization's own NPI
    are removed first, so the cap counts distinct individual members.

    Args:
        nppes: Registry client
        npi: Organization NPI with no direct billing record
        max_members: Cap on returned members, in upstream order
        search_limit: Registry search result limit

    Returns:
        OrganizationMembership; empty when the NPI is not a named
        organization or nothing could be found
    """
    require_valid_npi(npi)

    try:
        entry = await lookup_registry(nppes, npi)
    except APIConnectionError as e:
        logger.warning(
            f"NPPES lookup failed for NPI {npi}: {sanitize_for_log(str(e))}"
        )
        return OrganizationMembership()

    if entry is None or not entry.is_organization or not entry.organization_name:
        logger.info(f"NPI {npi} is not a named organization; no members to resolve")
        return OrganizationMembership()

    org_name = entry.organization_name
    state = entry.state or None

    members = await _search_members(nppes, org_name, state, npi, search_limit)
    if not members and state:
        logger.info(
            f"No members for {sanitize_for_log(org_name)} in {state}; "
            "retrying search without state"
        )
        members = await _search_members(nppes, org_name, None, npi, search_limit)

    logger.info(
        f"Resolved {len(members)} member(s) for organization NPI {npi} "
        f"({sanitize_for_log(org_name)})"
    )

    return OrganizationMembership(
        organization_name=org_name,
        city=entry.city,
        state=entry.state,
        member_npis=tuple(members[:max_members]),
    )
