"""FastAPI backend for the provider billing lookup service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from config import LOG_LEVEL
from rate_limit import limiter
from routes import lookup_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Provider Billing Lookup",
    description=(
        "Proxy for CMS Medicare billing and NPPES registry data, with "
        "organization NPIs aggregated across affiliated providers"
    ),
    version="0.1.0",
)

# Rate limiting configuration
# Lookup endpoints: LOOKUP_RATE_LIMIT per client (each call fans out upstream)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS configuration
# Any origin may call the lookup endpoints
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Register API routers
app.include_router(lookup_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
