"""Provider billing lookup with organization-member fallback."""

from .aggregation import combine_records, fetch_member_records, run_lookup
from .billing import build_billing_record, lookup_billing
from .codes import REPORTING_YEAR, VBC_CODES
from .models import (
    AggregateResult,
    BillingRecord,
    EntityType,
    LookupOutcome,
    OrganizationMembership,
    OutcomeKind,
    ProcedureBucket,
    RegistryEntry,
)
from .organization import resolve_organization
from .registry import lookup_registry, parse_registry_entry

__all__ = [
    "run_lookup",
    "combine_records",
    "fetch_member_records",
    "build_billing_record",
    "lookup_billing",
    "lookup_registry",
    "parse_registry_entry",
    "resolve_organization",
    "REPORTING_YEAR",
    "VBC_CODES",
    "AggregateResult",
    "BillingRecord",
    "EntityType",
    "LookupOutcome",
    "OrganizationMembership",
    "OutcomeKind",
    "ProcedureBucket",
    "RegistryEntry",
]
