"""Profile Mirror - serve a hosted profile page under your own domain.

This package provides a layered architecture for a caching reverse proxy:

Layers:
    - protocols: Interface contracts (ObjectStore, OriginClient, HtmlRewriter)
    - repositories: Implementations (Redis, httpx, BeautifulSoup)
    - services: Business logic (classification, resolution, caching, rewriting)
    - handlers: Request dispatcher (per-request state machine)
    - dto: Data transfer objects (JSON bodies produced locally)
    - entities: Domain models (internal)

Usage:
    ```python
    from profile_mirror import RequestDispatcher, RedisObjectStore, HttpxOriginClient, settings

    dispatcher = RequestDispatcher.create(
        config=settings,
        store=RedisObjectStore.create(),
        origin=HttpxOriginClient.create(),
    )
    ```

For HTTP API:
    ```python
    from profile_mirror.api.app import app
    ```
"""

from profile_mirror.config import Settings, get_redis_client, load_rewrite_rules, settings
from profile_mirror.entities import CachedObject, MirrorRequest, MirrorResponse, RewriteRule
from profile_mirror.errors import ContentDecodeError, MirrorError, OriginUnavailableError
from profile_mirror.handlers import RequestDispatcher
from profile_mirror.protocols import HtmlRewriter, ObjectStore, OriginClient
from profile_mirror.repositories import HttpxOriginClient, RedisObjectStore, SoupHtmlRewriter
from profile_mirror.services import (
    ContentTransformer,
    ObjectCacheService,
    OriginResolver,
    PathClassifier,
)

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_redis_client",
    "load_rewrite_rules",
    # Protocols (interfaces)
    "HtmlRewriter",
    "ObjectStore",
    "OriginClient",
    # Services (business logic)
    "ContentTransformer",
    "ObjectCacheService",
    "OriginResolver",
    "PathClassifier",
    # Handlers
    "RequestDispatcher",
    # Repositories
    "HttpxOriginClient",
    "RedisObjectStore",
    "SoupHtmlRewriter",
    # Entities (domain models)
    "CachedObject",
    "MirrorRequest",
    "MirrorResponse",
    "RewriteRule",
    # Errors
    "ContentDecodeError",
    "MirrorError",
    "OriginUnavailableError",
]
