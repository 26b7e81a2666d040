"""Data models for provider billing lookups."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .codes import REPORTING_YEAR, VBC_CODES


@dataclass
class ProcedureBucket:
    """Billing volume for a single HCPCS code."""

    display_name: str
    services: int = 0
    beneficiaries: int = 0
    payment: int = 0

    def add(self, services: int, beneficiaries: int, payment: int) -> None:
        self.services += services
        self.beneficiaries += beneficiaries
        self.payment += payment

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.display_name,
            "services": self.services,
            "beneficiaries": self.beneficiaries,
            "payment": self.payment,
        }


def empty_breakdown() -> dict[str, ProcedureBucket]:
    """Create a breakdown holding every VBC code at zero."""
    return {code: ProcedureBucket(display_name=name) for code, name in VBC_CODES.items()}


def breakdown_to_dict(breakdown: dict[str, ProcedureBucket]) -> dict[str, Any]:
    return {code: bucket.to_dict() for code, bucket in breakdown.items()}


@dataclass
class BillingRecord:
    """One provider's normalized Medicare billing summary."""

    npi: str
    total_payment: float = 0.0
    total_beneficiaries: int = 0
    total_services: int = 0

    # Identity fields from the aggregate dataset
    name: str = ""
    first_name: str = ""
    specialty: str = ""
    city: str = ""
    state: str = ""
    entity_type: str = ""

    procedure_breakdown: dict[str, ProcedureBucket] = field(
        default_factory=empty_breakdown
    )
    year: int = REPORTING_YEAR

    def to_public_dict(self) -> dict[str, Any]:
        """Totals and breakdown only; identity fields are not surfaced."""
        return {
            "npi": self.npi,
            "year": self.year,
            "total_medicare_payment": self.total_payment,
            "total_beneficiaries": self.total_beneficiaries,
            "total_services": self.total_services,
            "hcpcs": breakdown_to_dict(self.procedure_breakdown),
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, including identity fields."""
        data = self.to_public_dict()
        data.update(
            {
                "name": self.name,
                "first_name": self.first_name,
                "specialty": self.specialty,
                "city": self.city,
                "state": self.state,
                "entity_type": self.entity_type,
            }
        )
        return data


class EntityType(str, Enum):
    """NPPES enumeration type, normalized."""

    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RegistryEntry:
    """Identity and classification of an NPI from the NPPES registry."""

    npi: str
    enumeration_type: EntityType = EntityType.UNKNOWN
    organization_name: str = ""
    first_name: str = ""
    last_name: str = ""
    city: str = ""
    state: str = ""

    @property
    def is_organization(self) -> bool:
        return self.enumeration_type == EntityType.ORGANIZATION

    def to_dict(self) -> dict[str, Any]:
        return {
            "npi": self.npi,
            "enumeration_type": self.enumeration_type.value,
            "organization_name": self.organization_name,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address": {"city": self.city, "state": self.state},
        }


@dataclass(frozen=True)
class OrganizationMembership:
    """Individual providers discovered for an organization NPI."""

    organization_name: str = ""
    city: str = ""
    state: str = ""
    member_npis: tuple[str, ...] = ()

    @property
    def member_count(self) -> int:
        return len(self.member_npis)

    def to_dict(self) -> dict[str, Any]:
        return {
            "organization_name": self.organization_name,
            "city": self.city,
            "state": self.state,
            "member_count": self.member_count,
            "member_npis": list(self.member_npis),
        }


@dataclass
class AggregateResult:
    """Billing summed across an organization's member providers."""

    npi: str
    org_name: str
    member_npis: list[str]
    members_with_data: int
    total_payment: float = 0.0
    total_beneficiaries: int = 0
    total_services: int = 0
    procedure_breakdown: dict[str, ProcedureBucket] = field(
        default_factory=empty_breakdown
    )
    city: str = ""
    state: str = ""
    year: int = REPORTING_YEAR

    @property
    def member_count(self) -> int:
        return len(self.member_npis)

    @property
    def note(self) -> str:
        location = f" ({self.state})" if self.state else ""
        return (
            f"Organization NPI has no direct Medicare billing. Totals are "
            f"aggregated from {self.members_with_data} of {self.member_count} "
            f"affiliated individual providers matched by name in NPPES for "
            f"{self.org_name}{location}."
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "npi": self.npi,
            "year": self.year,
            "is_org": True,
            "is_aggregated": True,
            "org_name": self.org_name,
            "member_count": self.member_count,
            "members_with_data": self.members_with_data,
            "member_npis": list(self.member_npis),
            "note": self.note,
            "total_medicare_payment": self.total_payment,
            "total_beneficiaries": self.total_beneficiaries,
            "total_services": self.total_services,
            "hcpcs": breakdown_to_dict(self.procedure_breakdown),
        }


class OutcomeKind(str, Enum):
    """Terminal states of the lookup fallback chain."""

    DIRECT = "direct"
    AGGREGATED = "aggregated"
    NOT_FOUND = "not_found"


NO_DATA_MESSAGE = "No CMS data found for this NPI"
NO_MEMBER_DATA_MESSAGE = (
    "Organization found, but no CMS billing data for its affiliated providers"
)


@dataclass(frozen=True)
class LookupOutcome:
    """Tagged result of a billing lookup.

    Exactly one of ``record`` / ``aggregate`` is set for the two success
    kinds. A NOT_FOUND outcome carries the organization context when the
    organization resolved but none of its members had billing data.
    """

    kind: OutcomeKind
    npi: str
    record: BillingRecord | None = None
    aggregate: AggregateResult | None = None
    org_name: str | None = None
    members_checked: int | None = None

    @classmethod
    def direct(cls, record: BillingRecord) -> LookupOutcome:
        return cls(kind=OutcomeKind.DIRECT, npi=record.npi, record=record)

    @classmethod
    def aggregated(cls, aggregate: AggregateResult) -> LookupOutcome:
        return cls(kind=OutcomeKind.AGGREGATED, npi=aggregate.npi, aggregate=aggregate)

    @classmethod
    def not_found(
        cls,
        npi: str,
        org_name: str | None = None,
        members_checked: int | None = None,
    ) -> LookupOutcome:
        return cls(
            kind=OutcomeKind.NOT_FOUND,
            npi=npi,
            org_name=org_name,
            members_checked=members_checked,
        )

    @property
    def found(self) -> bool:
        return self.kind != OutcomeKind.NOT_FOUND

    def to_body(self) -> dict[str, Any]:
        """Public JSON body for this outcome."""
        if self.kind == OutcomeKind.DIRECT and self.record is not None:
            return self.record.to_public_dict()
        if self.kind == OutcomeKind.AGGREGATED and self.aggregate is not None:
            return self.aggregate.to_dict()

        if self.org_name is not None:
            return {
                "error": NO_MEMBER_DATA_MESSAGE,
                "npi": self.npi,
                "org_name": self.org_name,
                "members_checked": self.members_checked or 0,
            }
        return {"error": NO_DATA_MESSAGE, "npi": self.npi}
