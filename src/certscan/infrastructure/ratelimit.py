"""Rate limiting implementation."""

from aiolimiter import AsyncLimiter


class RateLimiter:
    """Rate limiter using token bucket algorithm."""

    def __init__(
        self,
        rate: float,
        time_period: float = 1.0,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            rate: Maximum number of operations
            time_period: Time period in seconds (default: 1.0)
        """
        self._limiter = AsyncLimiter(rate, time_period)

    async def acquire(self) -> None:
        """Acquire a token (wait if necessary)."""
        await self._limiter.acquire()


def connection_limiter() -> RateLimiter:
    """Limiter pacing new TLS connections, sized from settings."""
    from certscan.core.config import get_settings

    settings = get_settings()
    return RateLimiter(settings.connections_per_second)
