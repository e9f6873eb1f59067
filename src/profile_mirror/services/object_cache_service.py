"""Object cache service for static resources.

Read-through / write-through cache in front of the origin, backed by an
ObjectStore. Caching is an optimization: store failures on the read and
write paths degrade to origin fetches and never fail the request.
"""

import logging
import time

from profile_mirror.config import settings
from profile_mirror.entities import CachedObject, OriginResponse
from profile_mirror.protocols import ObjectStore, OriginClient

logger = logging.getLogger(__name__)

# Fallback content types for objects whose origin sent none
EXTENSION_CONTENT_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "eot": "application/vnd.ms-fontobject",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "css": "text/css",
    "webmanifest": "application/manifest+json",
}
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def object_key(path: str) -> str:
    """Derive the store key for a request path (leading separator stripped)."""
    return path[1:] if path.startswith("/") else path


def guess_content_type(path: str) -> str:
    """Guess a content type from the path extension."""
    segment = path.rsplit("/", 1)[-1]
    if "." not in segment:
        return DEFAULT_CONTENT_TYPE
    return EXTENSION_CONTENT_TYPES.get(segment.rsplit(".", 1)[-1].lower(), DEFAULT_CONTENT_TYPE)


class ObjectCacheService:
    """Core cache orchestration for static resources.

    This service depends on PROTOCOLS, not concrete implementations:
    - ObjectStore: can be Redis, an S3/R2 bucket, etc.
    - OriginClient: can be httpx, aiohttp, etc.

    Eviction is pure TTL: age since upload is the only signal.

    Example:
        ```python
        cache = ObjectCacheService.create(
            store=RedisObjectStore.create(),
            origin=HttpxOriginClient.create(),
        )
        cached = await cache.try_serve("/favicon.ico")
        if cached is None:
            response = await cache.fetch_and_store("/favicon.ico", url, headers)
        ```
    """

    def __init__(
        self,
        store: ObjectStore,
        origin: OriginClient,
        retention_seconds: int | None = None,
        page_size: int = 1000,
    ) -> None:
        """Initialize the object cache service.

        Args:
            store: Object storage backend (required).
            origin: Outbound HTTP client (required).
            retention_seconds: Default eviction threshold. Defaults to settings.
            page_size: Listing page size hint used by the sweep.
        """
        self._store = store
        self._origin = origin
        self._retention = retention_seconds or settings.cache_retention_seconds
        self._page_size = page_size

    @classmethod
    def create(
        cls,
        store: ObjectStore,
        origin: OriginClient,
        retention_seconds: int | None = None,
    ) -> "ObjectCacheService":
        """Factory method to create ObjectCacheService with sensible defaults.

        Args:
            store: Object storage backend (required).
            origin: Outbound HTTP client (required).
            retention_seconds: Eviction threshold. If None, uses settings.

        Returns:
            Configured ObjectCacheService instance
        """
        return cls(store=store, origin=origin, retention_seconds=retention_seconds)

    async def try_serve(self, path: str) -> CachedObject | None:
        """Look up a cached object for a path.

        Args:
            path: Request path

        Returns:
            The cached object, or None on a miss or a store failure
        """
        key = object_key(path)
        try:
            return await self._store.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s, falling back to origin: %s", key, e)
            return None

    async def fetch_and_store(
        self,
        path: str,
        origin_url: str,
        headers: dict[str, str],
    ) -> OriginResponse:
        """Fetch a static resource from the origin and cache it on success.

        Business logic:
        1. Fetch from origin (transport failures propagate)
        2. Non-2xx responses are returned unmodified and not cached
        3. 2xx bodies are stored whole under the derived key
        4. Store failures are logged and swallowed

        Args:
            path: Request path (the cache key is derived from it)
            origin_url: Absolute upstream URL
            headers: Outbound request headers

        Returns:
            The origin response, whatever its status
        """
        response = await self._origin.fetch(origin_url, headers=headers)
        if not response.ok:
            logger.info("Origin returned %s for %s, not caching", response.status_code, origin_url)
            return response

        key = object_key(path)
        content_type = response.content_type or guess_content_type(path)
        try:
            await self._store.put(key, response.content, content_type)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)

        return response

    async def sweep_expired(self, retention_seconds: int | None = None) -> int:
        """Delete every object older than the retention period.

        Walks the full listing page by page, issuing one batched delete
        per page, until the store stops returning a cursor. A listing
        failure stops the sweep early; the next run picks up the rest.

        Args:
            retention_seconds: Override the default retention period

        Returns:
            Number of objects deleted
        """
        retention = retention_seconds or self._retention
        now = time.time()
        deleted = 0
        cursor: str | None = None

        while True:
            try:
                page = await self._store.list_objects(cursor=cursor, limit=self._page_size)
            except Exception as e:
                logger.error("Cache listing failed, stopping sweep after %d deletions: %s", deleted, e)
                break

            expired = [
                info.key
                for info in page.objects
                if info.key and info.uploaded_at is not None and now - info.uploaded_at > retention
            ]
            if expired:
                try:
                    deleted += await self._store.delete(expired)
                except Exception as e:
                    logger.warning("Cache delete failed for %d keys: %s", len(expired), e)

            cursor = page.cursor
            if not cursor:
                break

        logger.info("Cache sweep removed %d expired objects", deleted)
        return deleted

    async def is_healthy(self) -> bool:
        return await self._store.health_check()

    @property
    def retention_seconds(self) -> int:
        """Get the default retention period in seconds."""
        return self._retention

    @property
    def store(self) -> ObjectStore:
        """Get the underlying object store (for testing)."""
        return self._store
