"""Provider Billing Lookup Backend Package.

This package provides the FastAPI backend that proxies CMS Medicare
billing data and the NPPES registry, including:

- Direct per-NPI billing summaries for value-based care HCPCS codes
- Organization NPI fallback that aggregates affiliated providers
- Raw and normalized NPPES registry lookups

Usage:
    # Development (from project root):
    PYTHONPATH=backend uvicorn app:app --reload --port 8080

Modules:
    app: FastAPI application entry point
    lookup: Billing lookup, organization resolver and aggregation engine
    connectors: CMS and NPPES API clients
    routes: HTTP endpoints and response envelopes
    utils: NPI validation and log sanitization
"""

__version__ = "0.1.0"
