"""API route modules for the provider billing lookup service.

This package contains focused routers that are registered with the main FastAPI app.

Routers:
- lookup: CMS billing lookup, NPPES passthrough, registry and org-member lookups
"""

from .lookup import router as lookup_router

__all__ = ["lookup_router"]
