"""Shared configuration for the provider billing lookup backend.

This module centralizes environment variable access and default values
to prevent drift between modules.
"""

import os

# CMS Medicare data API
CMS_API_BASE_URL = os.getenv("CMS_API_BASE_URL", "https://data.cms.gov/data-api/v1")
CMS_AGGREGATE_DATASET_ID = os.getenv(
    "CMS_AGGREGATE_DATASET_ID", "8889d81e-2ee7-448f-8713-f071038289b5"
)  # By Provider
CMS_BY_SERVICE_DATASET_ID = os.getenv(
    "CMS_BY_SERVICE_DATASET_ID", "92396110-2aed-4d63-a6a2-5d6207d46a29"
)  # By Provider & Service (HCPCS)

# NPPES registry API
NPPES_API_URL = os.getenv("NPPES_API_URL", "https://npiregistry.cms.hhs.gov/api/")
NPPES_API_VERSION = os.getenv("NPPES_API_VERSION", "2.1")

# Upstream request timeout (seconds). Requests run inside a short-lived
# execution window, so keep this well under the caller's deadline.
UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "8"))

# Organization fan-out bounds
MEMBER_BATCH_SIZE = int(os.getenv("MEMBER_BATCH_SIZE", "10"))
MAX_ORG_MEMBERS = int(os.getenv("MAX_ORG_MEMBERS", "50"))
ORG_SEARCH_LIMIT = int(os.getenv("ORG_SEARCH_LIMIT", "200"))

# HTTP surface
LOOKUP_RATE_LIMIT = os.getenv("LOOKUP_RATE_LIMIT", "120/minute")
CACHE_MAX_AGE_SECONDS = int(os.getenv("CACHE_MAX_AGE_SECONDS", "86400"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
