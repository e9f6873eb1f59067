"""httpx-based origin client.

Fetches from the mirrored site and its upstreams with a shared
``httpx.AsyncClient``. Responses are fully buffered: every body either
gets rewritten or cached, so streaming would buy nothing.
"""

import logging

import httpx

from profile_mirror.config import settings
from profile_mirror.entities import OriginResponse
from profile_mirror.errors import OriginUnavailableError

logger = logging.getLogger(__name__)


class HttpxOriginClient:
    """httpx implementation of the OriginClient protocol.

    Redirects are followed, matching what a browser fetch would do.

    Example:
        ```python
        origin = HttpxOriginClient.create()
        response = await origin.fetch("https://bento.me/someone", headers={})
        print(response.status_code, response.content_type)
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the origin client.

        Args:
            client: Preconfigured client (tests pass one with a mock transport).
            timeout: Request timeout in seconds. Defaults to settings.origin_timeout.
        """
        self._timeout = timeout or settings.origin_timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpxOriginClient":
        """Factory method to create HttpxOriginClient with defaults.

        Args:
            timeout: Request timeout. If None, uses settings.

        Returns:
            Configured HttpxOriginClient
        """
        return cls(timeout=timeout)

    async def fetch(
        self,
        url: str,
        headers: dict[str, str],
        method: str = "GET",
        content: bytes | None = None,
    ) -> OriginResponse:
        """Fetch a URL and buffer the response.

        Args:
            url: Absolute upstream URL
            headers: Headers to send
            method: HTTP method
            content: Optional request body

        Returns:
            OriginResponse with lower-cased header names

        Raises:
            OriginUnavailableError: 504 on timeout, 502 on any other transport error
        """
        logger.debug("Fetching %s %s", method, url)
        try:
            response = await self.client.request(method, url, headers=headers, content=content or None)
        except httpx.TimeoutException as e:
            logger.error("Origin timeout for %s: %s", url, e)
            raise OriginUnavailableError(
                f"Timed out fetching {url}", status_code=504, detail="Gateway timeout"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Origin request failed for %s: %s", url, e)
            raise OriginUnavailableError(f"Failed to fetch {url}: {e}") from e

        return OriginResponse(
            status_code=response.status_code,
            headers={name.lower(): value for name, value in response.headers.items()},
            content=response.content,
        )

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
