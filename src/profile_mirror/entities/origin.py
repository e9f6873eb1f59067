"""Origin-side entities: where a request goes and what comes back."""

from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class OriginTarget:
    """An upstream host plus the path rewrite applied before forwarding.

    Attributes:
        base_host: Scheme and host of the upstream, without trailing slash
        path_rewrite: Maps the inbound path to the upstream path
    """

    base_host: str
    path_rewrite: Callable[[str], str]

    def url_for(self, path: str) -> str:
        """Build the absolute upstream URL for an inbound path."""
        return f"{self.base_host}{self.path_rewrite(path)}"


@dataclass(frozen=True)
class OriginResponse:
    """A fully buffered upstream response.

    Attributes:
        status_code: HTTP status returned by the upstream
        headers: Response headers with lower-cased names
        content: Decompressed body bytes
    """

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def ok(self) -> bool:
        """Whether the upstream answered with a 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")
