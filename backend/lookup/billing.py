"""Billing lookup: fetch and merge the CMS provider datasets for one NPI.

The CMS datasets are loosely typed. Numeric values arrive as strings,
and field names have shown up in both PascalCase and lowercase across
dataset releases, so every field is read with an ordered-preference
lookup: canonical name first, then the alternates, then a default.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable

from connectors.api import CMSDataClient
from utils import require_valid_npi

from .codes import is_vbc_code
from .models import BillingRecord, empty_breakdown

logger = logging.getLogger(__name__)

# Field name preferences, canonical first. The aggregate payment column is
# spelled "Plymt" in older extracts and "Pymt" in current ones.
TOTAL_PAYMENT_FIELDS = (
    "Tot_Mdcr_Plymt_Amt",
    "tot_mdcr_plymt_amt",
    "Tot_Mdcr_Pymt_Amt",
    "tot_mdcr_pymt_amt",
)
TOTAL_BENES_FIELDS = ("Tot_Benes", "tot_benes")
TOTAL_SERVICES_FIELDS = ("Tot_Srvcs", "tot_srvcs")
HCPCS_CODE_FIELDS = ("HCPCS_Cd", "hcpcs_cd")
AVG_PAYMENT_FIELDS = ("Avg_Mdcr_Pymt_Amt", "avg_mdcr_pymt_amt")

IDENTITY_FIELDS = {
    "name": ("Rndrng_Prvdr_Last_Org_Name", "rndrng_prvdr_last_org_name"),
    "first_name": ("Rndrng_Prvdr_First_Name", "rndrng_prvdr_first_name"),
    "specialty": ("Rndrng_Prvdr_Type", "rndrng_prvdr_type"),
    "city": ("Rndrng_Prvdr_City", "rndrng_prvdr_city"),
    "state": ("Rndrng_Prvdr_State_Abrvtn", "rndrng_prvdr_state_abrvtn"),
    "entity_type": ("Rndrng_Prvdr_Ent_Cd", "rndrng_prvdr_ent_cd"),
}


def first_present(row: dict[str, Any], names: tuple[str, ...], default: Any = None) -> Any:
    """Return the first non-empty value among ``names`` in ``row``."""
    for name in names:
        value = row.get(name)
        if value is not None and value != "":
            return value
    return default


def to_float(value: Any) -> float:
    """Parse an upstream numeric value, defaulting to 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0
    return result if math.isfinite(result) else 0.0


def to_int(value: Any) -> int:
    """Parse an upstream count, truncating any fractional part."""
    return int(to_float(value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return int(math.floor(value + 0.5))


async def gather_joined(*aws: Awaitable[Any]) -> list[Any]:
    """Await every awaitable, then raise the first failure if any.

    Unlike a plain ``asyncio.gather``, no sibling is left running when one
    of them fails.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


def build_billing_record(
    npi: str,
    totals_rows: list[dict[str, Any]],
    service_rows: list[dict[str, Any]],
) -> BillingRecord | None:
    """Merge the aggregate and service-level rows into a BillingRecord.

    Args:
        npi: Rendering provider NPI
        totals_rows: Rows from the By Provider dataset (first row is used)
        service_rows: Rows from the By Provider & Service dataset

    Returns:
        BillingRecord, or None when both inputs are empty
    """
    if not totals_rows and not service_rows:
        return None

    totals = totals_rows[0] if totals_rows else {}

    identity = {
        key: str(first_present(totals, names, ""))
        for key, names in IDENTITY_FIELDS.items()
    }

    breakdown = empty_breakdown()
    for row in service_rows:
        code = str(first_present(row, HCPCS_CODE_FIELDS, "")).strip()
        if not is_vbc_code(code):
            continue
        services = to_int(first_present(row, TOTAL_SERVICES_FIELDS, 0))
        breakdown[code].add(
            services=services,
            beneficiaries=to_int(first_present(row, TOTAL_BENES_FIELDS, 0)),
            payment=round_half_up(
                to_float(first_present(row, AVG_PAYMENT_FIELDS, 0)) * services
            ),
        )

    return BillingRecord(
        npi=npi,
        total_payment=to_float(first_present(totals, TOTAL_PAYMENT_FIELDS, 0)),
        total_beneficiaries=to_int(first_present(totals, TOTAL_BENES_FIELDS, 0)),
        total_services=to_int(first_present(totals, TOTAL_SERVICES_FIELDS, 0)),
        procedure_breakdown=breakdown,
        **identity,
    )


async def lookup_billing(cms: CMSDataClient, npi: str) -> BillingRecord | None:
    """Fetch both CMS datasets concurrently and merge them.

    Non-success responses count as empty; transport failures propagate as
    APIConnectionError once both reads have finished.

    Returns:
        BillingRecord, or None if CMS has no rows for this NPI
    """
    require_valid_npi(npi)

    totals_rows, service_rows = await gather_joined(
        cms.fetch_provider_totals(npi),
        cms.fetch_provider_services(npi),
    )

    record = build_billing_record(npi, totals_rows, service_rows)
    if record is None:
        logger.info(f"No CMS billing rows for NPI {npi}")
    return record
