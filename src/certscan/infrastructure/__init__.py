"""Infrastructure layer."""

from certscan.infrastructure.http import HTTPClient
from certscan.infrastructure.ratelimit import RateLimiter, connection_limiter

__all__ = ["HTTPClient", "RateLimiter", "connection_limiter"]
