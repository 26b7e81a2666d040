"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

import httpx
import pytest

# Add backend to path for imports
backend_path = str(Path(__file__).parent.parent / "backend")
if backend_path not in sys.path:
    sys.path.insert(0, backend_path)

# Keep the per-client rate limit out of the way of the endpoint tests
os.environ["LOOKUP_RATE_LIMIT"] = "10000/minute"

from config import CMS_AGGREGATE_DATASET_ID, CMS_BY_SERVICE_DATASET_ID  # noqa: E402
from connectors.api import CMSDataClient, NPPESClient  # noqa: E402

CMS_HOST = "data.cms.gov"
NPPES_HOST = "npiregistry.cms.hhs.gov"


class FakeUpstream:
    """In-memory stand-in for the CMS data API and the NPPES registry.

    Served through httpx.MockTransport; every request is recorded so tests
    can assert on call counts and query parameters.
    """

    def __init__(self) -> None:
        self.totals: dict[str, list[dict[str, Any]]] = {}
        self.services: dict[str, list[dict[str, Any]]] = {}
        self.registry: dict[str, dict[str, Any]] = {}
        self.searches: dict[tuple[str, str | None], list[dict[str, Any]]] = {}
        # "totals", "services", "lookup" or "search" -> forced HTTP status
        self.status: dict[str, int] = {}
        # same keys -> raise a transport error instead of answering
        self.broken: set[str] = set()
        self.requests: list[httpx.Request] = []

    # Registration helpers
    def add_organization(self, npi: str, name: str, state: str = "", city: str = "") -> None:
        self.registry[npi] = nppes_result(npi, "NPI-2", organization_name=name, state=state, city=city)

    def add_individual(self, npi: str, first: str = "Pat", last: str = "Doe", state: str = "") -> None:
        self.registry[npi] = nppes_result(npi, "NPI-1", first_name=first, last_name=last, state=state)

    def add_search(self, name: str, state: str | None, npis: list[str]) -> None:
        self.searches[(name, state)] = [nppes_result(n, "NPI-1") for n in npis]

    # Request accounting
    def calls(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    @property
    def cms_calls(self) -> list[httpx.Request]:
        return self.calls(CMS_HOST)

    @property
    def nppes_calls(self) -> list[httpx.Request]:
        return self.calls(NPPES_HOST)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params

        if request.url.host == CMS_HOST:
            npi = params.get("filter[Rndrng_NPI]")
            if CMS_AGGREGATE_DATASET_ID in request.url.path:
                kind, rows = "totals", self.totals.get(npi, [])
            elif CMS_BY_SERVICE_DATASET_ID in request.url.path:
                kind, rows = "services", self.services.get(npi, [])
            else:
                return httpx.Response(404, json={"error": "unknown dataset"})
            return self._answer(kind, request, rows)

        if request.url.host == NPPES_HOST:
            if "number" in params:
                result = self.registry.get(params["number"])
                results = [result] if result else []
                kind = "lookup"
            else:
                key = (params.get("organization_name"), params.get("state"))
                results = self.searches.get(key, [])
                kind = "search"
            return self._answer(
                kind, request, {"result_count": len(results), "results": results}
            )

        return httpx.Response(404)

    def _answer(self, kind: str, request: httpx.Request, payload: Any) -> httpx.Response:
        if kind in self.broken:
            raise httpx.ConnectError("connection refused", request=request)
        status = self.status.get(kind, 200)
        if status != 200:
            return httpx.Response(status, json={"message": "upstream error"})
        return httpx.Response(200, json=payload)


def nppes_result(
    npi: str,
    enumeration_type: str,
    organization_name: str = "",
    first_name: str = "",
    last_name: str = "",
    city: str = "",
    state: str = "",
) -> dict[str, Any]:
    """Build a registry result entry in NPPES API v2.1 shape."""
    basic: dict[str, Any] = {}
    if organization_name:
        basic["organization_name"] = organization_name
    if first_name:
        basic["first_name"] = first_name
    if last_name:
        basic["last_name"] = last_name
    return {
        "number": npi,
        "enumeration_type": enumeration_type,
        "basic": basic,
        "addresses": [
            {"address_purpose": "MAILING", "city": "PO BOX CITY", "state": "ZZ"},
            {"address_purpose": "LOCATION", "city": city, "state": state},
        ],
    }


@pytest.fixture
def upstream() -> FakeUpstream:
    """Empty fake upstream; tests register the data they need."""
    return FakeUpstream()


@pytest.fixture
def run_upstream(
    upstream: FakeUpstream,
) -> Callable[[Callable[[CMSDataClient, NPPESClient], Awaitable[Any]]], Any]:
    """Run an async callable against clients wired to the fake upstream."""

    def _run(fn: Callable[[CMSDataClient, NPPESClient], Awaitable[Any]]) -> Any:
        async def _main() -> Any:
            async with httpx.AsyncClient(transport=upstream.transport()) as client:
                return await fn(CMSDataClient(client), NPPESClient(client))

        return asyncio.run(_main())

    return _run


@pytest.fixture
def aggregate_row() -> dict[str, Any]:
    """Provider-level aggregate row for NPI 1234567890."""
    return {
        "Rndrng_NPI": "1234567890",
        "Rndrng_Prvdr_Last_Org_Name": "Smith",
        "Rndrng_Prvdr_First_Name": "Jane",
        "Rndrng_Prvdr_Type": "Internal Medicine",
        "Rndrng_Prvdr_City": "Sacramento",
        "Rndrng_Prvdr_State_Abrvtn": "CA",
        "Rndrng_Prvdr_Ent_Cd": "I",
        "Tot_Mdcr_Plymt_Amt": "1000.50",
        "Tot_Benes": "20",
        "Tot_Srvcs": "40",
    }


@pytest.fixture
def ccm_service_row() -> dict[str, Any]:
    """Service-level row for HCPCS 99490 (chronic care management)."""
    return {
        "Rndrng_NPI": "1234567890",
        "HCPCS_Cd": "99490",
        "Avg_Mdcr_Pymt_Amt": "62.5",
        "Tot_Srvcs": "10",
        "Tot_Benes": "8",
    }
