"""Provider lookup routes.

Every endpoint takes a single required ``npi`` query parameter and
answers with one of four JSON envelopes:

- 200: lookup payload, publicly cacheable for a day
- 400: ``{error}`` for a malformed NPI (no upstream call is made)
- 404: ``{error, npi, ...}`` when nothing was found
- 500: ``{error, detail}`` on a transport or unexpected failure
"""

import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from config import CACHE_MAX_AGE_SECONDS, LOOKUP_RATE_LIMIT, UPSTREAM_TIMEOUT_SECONDS
from connectors.api import CMSDataClient, NPPESClient
from lookup import lookup_registry, resolve_organization, run_lookup
from rate_limit import limiter
from utils import INVALID_NPI_MESSAGE, is_valid_npi, sanitize_for_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lookup"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
}
CACHE_HEADERS = {"Cache-Control": f"public, max-age={CACHE_MAX_AGE_SECONDS}"}

NPI_QUERY = Query(default=None, description="10-digit National Provider Identifier")


@dataclass
class UpstreamClients:
    """Upstream API clients sharing one request-scoped HTTP client."""

    cms: CMSDataClient
    nppes: NPPESClient


async def get_upstream_clients() -> AsyncIterator[UpstreamClients]:
    """Open an HTTP client for the duration of one request."""
    timeout = httpx.Timeout(UPSTREAM_TIMEOUT_SECONDS, connect=5.0)
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        yield UpstreamClients(cms=CMSDataClient(client), nppes=NPPESClient(client))


# Response envelopes
def ok_response(body: Any) -> JSONResponse:
    return JSONResponse(
        status_code=200, content=body, headers={**CORS_HEADERS, **CACHE_HEADERS}
    )


def error_response(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


def bad_npi_response() -> JSONResponse:
    return error_response(400, {"error": INVALID_NPI_MESSAGE})


def failure_response(error: str, exc: Exception) -> JSONResponse:
    logger.error(f"{error}: {sanitize_for_log(str(exc))}", exc_info=True)
    return error_response(500, {"error": error, "detail": str(exc)})


# Routes
@router.get("/cms-lookup")
@limiter.limit(LOOKUP_RATE_LIMIT)
async def cms_lookup(
    request: Request,
    npi: str | None = NPI_QUERY,
    clients: UpstreamClients = Depends(get_upstream_clients),
):
    """Medicare billing summary for an NPI.

    Falls back to aggregating affiliated individual providers when the
    NPI is an organization without direct billing.
    """
    if not is_valid_npi(npi):
        return bad_npi_response()

    try:
        outcome = await run_lookup(clients.cms, clients.nppes, npi)
    except Exception as e:
        return failure_response("CMS API request failed", e)

    logger.info(f"cms-lookup {npi}: {outcome.kind.value}")
    if not outcome.found:
        return error_response(404, outcome.to_body())
    return ok_response(outcome.to_body())


@router.get("/nppes-lookup")
@limiter.limit(LOOKUP_RATE_LIMIT)
async def nppes_lookup(
    request: Request,
    npi: str | None = NPI_QUERY,
    clients: UpstreamClients = Depends(get_upstream_clients),
):
    """Relay the raw NPPES registry response for an NPI."""
    if not is_valid_npi(npi):
        return bad_npi_response()

    try:
        response = await clients.nppes.get_raw(npi)
        if not response.is_success:
            return error_response(
                response.status_code,
                {"error": f"NPPES API returned {response.status_code}"},
            )
        data = response.json()
    except Exception as e:
        return failure_response("NPPES API request failed", e)

    return ok_response(data)


@router.get("/registry-lookup")
@limiter.limit(LOOKUP_RATE_LIMIT)
async def registry_lookup(
    request: Request,
    npi: str | None = NPI_QUERY,
    clients: UpstreamClients = Depends(get_upstream_clients),
):
    """Normalized registry identity (name, entity type, city, state)."""
    if not is_valid_npi(npi):
        return bad_npi_response()

    try:
        entry = await lookup_registry(clients.nppes, npi)
    except Exception as e:
        return failure_response("NPPES API request failed", e)

    if entry is None:
        return error_response(404, {"error": "NPI not found in NPPES", "npi": npi})
    return ok_response(entry.to_dict())


@router.get("/org-members")
@limiter.limit(LOOKUP_RATE_LIMIT)
async def org_members(
    request: Request,
    npi: str | None = NPI_QUERY,
    clients: UpstreamClients = Depends(get_upstream_clients),
):
    """Individual providers matched to an organization NPI.

    Best-effort: an unresolvable NPI yields an empty member list.
    """
    if not is_valid_npi(npi):
        return bad_npi_response()

    try:
        membership = await resolve_organization(clients.nppes, npi)
    except Exception as e:
        return failure_response("NPPES API request failed", e)

    return ok_response({"npi": npi, **membership.to_dict()})
