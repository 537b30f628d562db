"""HTTP client wrapper."""

from typing import Any

import httpx

from certscan.core.config import get_settings
from certscan.version import __version__


class HTTPClient:
    """Async HTTP client wrapper."""

    def __init__(self, timeout: float | None = None) -> None:
        self.settings = get_settings()
        self.timeout = timeout or self.settings.connect_timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HTTPClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": f"certscan/{__version__}"},
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client:
            await self._client.aclose()

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make GET request."""
        if not self._client:
            raise RuntimeError("Client not initialized. Use async with.")
        return await self._client.get(url, **kwargs)
