"""Tests for registry lookup and organization member resolution."""

from __future__ import annotations

import pytest

from lookup import EntityType, lookup_registry, parse_registry_entry, resolve_organization
from lookup.organization import extract_member_npis
from utils import InvalidNPIError

from conftest import nppes_result

ORG_NPI = "1999999999"


def member_npis(count: int, start: int = 1000000000) -> list[str]:
    return [str(start + i) for i in range(count)]


class TestRegistryLookup:
    """Parsing NPPES registry entries."""

    def test_parses_organization(self) -> None:
        entry = parse_registry_entry(
            ORG_NPI,
            nppes_result(ORG_NPI, "NPI-2", organization_name="Acme Clinic", city="Fresno", state="CA"),
        )

        assert entry.enumeration_type == EntityType.ORGANIZATION
        assert entry.is_organization
        assert entry.organization_name == "Acme Clinic"
        assert entry.city == "Fresno"
        assert entry.state == "CA"

    def test_location_address_preferred(self) -> None:
        """The LOCATION address wins over the mailing address."""
        entry = parse_registry_entry(ORG_NPI, nppes_result(ORG_NPI, "NPI-2", state="TX"))

        assert entry.state == "TX"

    def test_first_address_when_no_location(self) -> None:
        result = {
            "number": ORG_NPI,
            "enumeration_type": "NPI-1",
            "addresses": [{"address_purpose": "MAILING", "city": "Reno", "state": "NV"}],
        }
        entry = parse_registry_entry(ORG_NPI, result)

        assert entry.enumeration_type == EntityType.INDIVIDUAL
        assert (entry.city, entry.state) == ("Reno", "NV")

    def test_unknown_enumeration_type(self) -> None:
        entry = parse_registry_entry(ORG_NPI, {"enumeration_type": "NPI-9"})

        assert entry.enumeration_type == EntityType.UNKNOWN
        assert entry.to_dict()["address"] == {"city": "", "state": ""}

    def test_lookup_not_found(self, upstream, run_upstream) -> None:
        assert run_upstream(lambda cms, nppes: lookup_registry(nppes, ORG_NPI)) is None

    def test_lookup_non_success_is_not_found(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Acme Clinic")
        upstream.status["lookup"] = 500

        assert run_upstream(lambda cms, nppes: lookup_registry(nppes, ORG_NPI)) is None

    def test_lookup_sends_version_and_number(self, upstream, run_upstream) -> None:
        upstream.add_individual("1111111111", first="Ana", last="Lopez")

        entry = run_upstream(lambda cms, nppes: lookup_registry(nppes, "1111111111"))

        assert entry.first_name == "Ana"
        params = upstream.nppes_calls[0].url.params
        assert params["version"] == "2.1"
        assert params["number"] == "1111111111"

    def test_lookup_rejects_bad_npi(self, upstream, run_upstream) -> None:
        with pytest.raises(InvalidNPIError):
            run_upstream(lambda cms, nppes: lookup_registry(nppes, "abc"))
        assert upstream.requests == []


class TestExtractMemberNpis:
    """Filtering registry search results into member NPIs."""

    def test_keeps_order_and_skips_noise(self) -> None:
        results = [
            nppes_result("1000000002", "NPI-1"),
            nppes_result("1000000001", "NPI-1"),
            nppes_result("1000000003", "NPI-2"),
            nppes_result("1000000002", "NPI-1"),
            nppes_result(ORG_NPI, "NPI-1"),
            {"number": "12", "enumeration_type": "NPI-1"},
            {"enumeration_type": "NPI-1"},
        ]

        assert extract_member_npis(results, exclude=ORG_NPI) == [
            "1000000002",
            "1000000001",
        ]


class TestResolveOrganization:
    """Organization NPI -> member NPIs."""

    def test_state_scoped_search(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Acme Clinic", state="CA", city="Fresno")
        upstream.add_search("Acme Clinic", "CA", member_npis(3))

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.organization_name == "Acme Clinic"
        assert membership.state == "CA"
        assert membership.member_npis == tuple(member_npis(3))
        search = upstream.nppes_calls[1].url.params
        assert search["enumeration_type"] == "NPI-1"
        assert search["organization_name"] == "Acme Clinic"
        assert search["state"] == "CA"
        assert search["limit"] == "200"

    def test_falls_back_to_nationwide_search(self, upstream, run_upstream) -> None:
        """An empty state-scoped search is retried without the state."""
        upstream.add_organization(ORG_NPI, "Acme Clinic", state="CA")
        upstream.add_search("Acme Clinic", None, member_npis(2))

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_count == 2
        assert len(upstream.nppes_calls) == 3
        assert "state" not in upstream.nppes_calls[2].url.params

    def test_no_state_searches_once(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Acme Clinic")

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == ()
        assert len(upstream.nppes_calls) == 2

    def test_members_capped_at_fifty(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Big Health", state="NY")
        upstream.add_search("Big Health", "NY", member_npis(120))

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == tuple(member_npis(50))

    def test_cap_counts_distinct_members(self, upstream, run_upstream) -> None:
        """Duplicates and the organization itself do not use up the cap."""
        upstream.add_organization(ORG_NPI, "Big Health", state="NY")
        noisy = [ORG_NPI] + [n for n in member_npis(60) for _ in (0, 1)]
        upstream.add_search("Big Health", "NY", noisy)

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == tuple(member_npis(50))

    def test_individual_npi_is_not_resolved(self, upstream, run_upstream) -> None:
        upstream.add_individual(ORG_NPI)

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == ()
        assert membership.organization_name == ""
        assert len(upstream.nppes_calls) == 1

    def test_organization_without_name(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "")

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == ()

    def test_registry_transport_failure_degrades(self, upstream, run_upstream) -> None:
        upstream.broken.add("lookup")

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == ()

    def test_search_failure_degrades(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Acme Clinic", state="CA")
        upstream.broken.add("search")

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.organization_name == "Acme Clinic"
        assert membership.member_npis == ()

    def test_search_error_status_degrades(self, upstream, run_upstream) -> None:
        upstream.add_organization(ORG_NPI, "Acme Clinic", state="CA")
        upstream.status["search"] = 502

        membership = run_upstream(lambda cms, nppes: resolve_organization(nppes, ORG_NPI))

        assert membership.member_npis == ()
