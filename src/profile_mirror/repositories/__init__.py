"""Repository layer for external collaborators.

This layer wraps the object store, the outbound HTTP client and the
HTML parser behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis -> R2, httpx -> aiohttp, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from profile_mirror.protocols import HtmlRewriter, ObjectStore, OriginClient

from .httpx_origin_client import HttpxOriginClient
from .redis_object_store import RedisObjectStore
from .soup_html_rewriter import SoupHtmlRewriter

__all__ = [
    "HtmlRewriter",
    "ObjectStore",
    "OriginClient",
    "HttpxOriginClient",
    "RedisObjectStore",
    "SoupHtmlRewriter",
]
