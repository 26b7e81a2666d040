"""Aggregation engine: the direct lookup / organization fallback chain.

1. Billing lookup on the NPI itself. Data -> DIRECT.
2. Otherwise resolve the NPI as an organization. No members -> NOT_FOUND.
3. Billing lookup for each member in sequential batches of concurrent
   requests, preserving member order.
4. Members with data are summed into one AggregateResult -> AGGREGATED.
   None with data -> NOT_FOUND carrying the organization context.

The chain is two levels deep. Members that are themselves organizations
are not expanded further.
"""

from __future__ import annotations

import logging
from typing import Sequence

from config import MEMBER_BATCH_SIZE
from connectors.api import CMSDataClient, NPPESClient
from utils import require_valid_npi, sanitize_for_log

from .billing import gather_joined, lookup_billing
from .models import (
    AggregateResult,
    BillingRecord,
    LookupOutcome,
    OrganizationMembership,
)
from .organization import resolve_organization

logger = logging.getLogger(__name__)


def combine_records(
    npi: str,
    membership: OrganizationMembership,
    records: Sequence[BillingRecord],
) -> AggregateResult:
    """Sum member billing records into one AggregateResult.

    Plain additive reduction: no deduplication and no weighting.
    """
    aggregate = AggregateResult(
        npi=npi,
        org_name=membership.organization_name,
        member_npis=list(membership.member_npis),
        members_with_data=len(records),
        city=membership.city,
        state=membership.state,
    )

    for record in records:
        aggregate.total_payment += record.total_payment
        aggregate.total_beneficiaries += record.total_beneficiaries
        aggregate.total_services += record.total_services
        for code, bucket in record.procedure_breakdown.items():
            target = aggregate.procedure_breakdown.get(code)
            if target is None:
                continue
            target.add(bucket.services, bucket.beneficiaries, bucket.payment)

    return aggregate


async def fetch_member_records(
    cms: CMSDataClient,
    member_npis: Sequence[str],
    batch_size: int = MEMBER_BATCH_SIZE,
) -> list[BillingRecord]:
    """Run billing lookups for members, ``batch_size`` at a time.

    Batches run one after another so no more than ``batch_size`` member
    lookups are in flight. Results keep member order; members without
    billing data are dropped. A transport failure is raised only after
    every lookup in its batch has finished.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    records: list[BillingRecord] = []
    for start in range(0, len(member_npis), batch_size):
        batch = member_npis[start : start + batch_size]
        results = await gather_joined(*(lookup_billing(cms, m) for m in batch))
        records.extend(r for r in results if r is not None)
        logger.debug(
            f"Member batch {start // batch_size + 1}: "
            f"{sum(r is not None for r in results)}/{len(batch)} with data"
        )
    return records


async def run_lookup(
    cms: CMSDataClient,
    nppes: NPPESClient,
    npi: str,
    batch_size: int = MEMBER_BATCH_SIZE,
) -> LookupOutcome:
    """Resolve billing for an NPI, falling back to organization members.

    Raises:
        InvalidNPIError: If ``npi`` is not 10 digits
        APIConnectionError: On a CMS transport failure
    """
    require_valid_npi(npi)

    record = await lookup_billing(cms, npi)
    if record is not None:
        return LookupOutcome.direct(record)

    membership = await resolve_organization(nppes, npi)
    if not membership.member_npis:
        return LookupOutcome.not_found(npi)

    logger.info(
        f"Aggregating billing for {membership.member_count} member(s) of "
        f"{sanitize_for_log(membership.organization_name)} (NPI {npi})"
    )
    records = await fetch_member_records(cms, membership.member_npis, batch_size)

    if not records:
        return LookupOutcome.not_found(
            npi,
            org_name=membership.organization_name,
            members_checked=membership.member_count,
        )

    return LookupOutcome.aggregated(combine_records(npi, membership, records))
