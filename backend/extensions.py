"""
Flask extensions for the fleet backend.

This module initializes Flask extensions that need to be shared
across the application to avoid circular imports.
"""

import os

from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Rate limiting storage (Redis in production, memory for development)
RATE_LIMIT_STORAGE = os.environ.get("RATE_LIMIT_STORAGE_URI", "memory://")

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per hour", "200 per minute"],
    storage_uri=RATE_LIMIT_STORAGE,
    strategy="fixed-window",
    headers_enabled=True,
)

cache = Cache()


def init_cache(app):
    """Initialize cache based on environment."""
    if app.config.get('TESTING') or os.environ.get('FLASK_TESTING'):
        cache.init_app(app, config={'CACHE_TYPE': 'NullCache'})
    else:
        cache.init_app(app, config={
            'CACHE_TYPE': 'SimpleCache',
            'CACHE_DEFAULT_TIMEOUT': app.config.get('CACHE_TIMEOUT_SECONDS', 60)
        })


class RateLimits:
    """Common rate limit configurations for different endpoint types."""

    # Read-heavy endpoints (dashboard, fuel listing)
    READ_HEAVY = "500 per hour"

    # Write endpoints (POST/PUT/DELETE)
    WRITE_MODERATE = "100 per hour"

    # Report generation and export
    EXPENSIVE = "20 per hour"
