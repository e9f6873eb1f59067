"""Origin client protocol.

Defines the interface for the outbound HTTP client used to reach the
mirrored site and its API / storage upstreams.
"""

from typing import Protocol, runtime_checkable

from profile_mirror.entities import OriginResponse


@runtime_checkable
class OriginClient(Protocol):
    """Protocol for outbound fetches to the upstreams."""

    async def fetch(
        self,
        url: str,
        headers: dict[str, str],
        method: str = "GET",
        content: bytes | None = None,
    ) -> OriginResponse:
        """Fetch a URL and buffer the whole response.

        Args:
            url: Absolute upstream URL
            headers: Headers to send
            method: HTTP method
            content: Optional request body

        Returns:
            The buffered response, whatever its status

        Raises:
            OriginUnavailableError: If the upstream cannot be reached
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
