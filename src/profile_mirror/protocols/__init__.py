"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis -> S3/R2, httpx -> aiohttp, etc.)
- Unit testing with in-memory implementations
- Clear separation of concerns

Usage:
    ```python
    from profile_mirror.protocols import ObjectStore, OriginClient

    store: ObjectStore = RedisObjectStore.create()
    origin: OriginClient = HttpxOriginClient.create()
    ```
"""

from .html_rewriter import HtmlRewriter
from .object_store import ObjectStore
from .origin_client import OriginClient

__all__ = [
    "HtmlRewriter",
    "ObjectStore",
    "OriginClient",
]
