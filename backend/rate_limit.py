"""Shared rate limiter for the API routes.

Lookup endpoints fan out to public CMS services, so each client is
limited to LOOKUP_RATE_LIMIT requests.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
