"""Inbound request and outbound response entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MirrorRequest:
    """An incoming request, reduced to what the dispatcher needs.

    Attributes:
        path: URL path, always starting with "/"
        method: Upper-case HTTP method
        referer: Referer header value, if any
        query: Raw query string without the leading "?"
        body: Request body, forwarded on proxied POSTs
    """

    path: str
    method: str
    referer: str | None = None
    query: str = ""
    body: bytes = b""


@dataclass(frozen=True)
class MirrorResponse:
    """The single response produced for a request."""

    status_code: int
    body: str | bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                return value
        return None
