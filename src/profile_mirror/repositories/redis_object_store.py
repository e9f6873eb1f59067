"""Redis implementation of ObjectStore.

Each cached object is one Redis hash at ``<namespace>:<key>`` holding the
raw body, its content type and the upload timestamp. A single HSET writes
every field, so readers never see a partially written object.
"""

import logging
import time

import redis.asyncio as redis

from profile_mirror.config import get_redis_client, settings
from profile_mirror.entities import CachedObject, ObjectListing, StoredObjectInfo

logger = logging.getLogger(__name__)


class RedisObjectStore:
    """Redis implementation using one hash per object.

    This class satisfies the ObjectStore protocol through structural
    typing - no explicit inheritance needed.

    Listing uses SCAN, whose cursor maps directly onto the opaque
    continuation cursor of the protocol (cursor "0" ends the listing).
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> None:
        """Initialize the Redis object store.

        Args:
            redis_client: Asyncio Redis client. If None, creates default.
            namespace: Key prefix for stored objects.
        """
        self._client = redis_client or get_redis_client()
        self._namespace = namespace or settings.object_namespace

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        namespace: str | None = None,
    ) -> "RedisObjectStore":
        """Factory method to create RedisObjectStore with defaults.

        Args:
            redis_client: Asyncio Redis client. If None, uses settings.
            namespace: Key prefix. If None, uses settings.

        Returns:
            Configured RedisObjectStore
        """
        return cls(redis_client=redis_client, namespace=namespace)

    def _redis_key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def _object_key(self, redis_key: bytes | str) -> str:
        if isinstance(redis_key, bytes):
            redis_key = redis_key.decode()
        return redis_key[len(self._namespace) + 1:]

    async def get(self, key: str) -> CachedObject | None:
        """Fetch an object by key.

        Args:
            key: The object key

        Returns:
            The stored object, or None if absent
        """
        data = await self._client.hgetall(self._redis_key(key))
        if not data or b"body" not in data:
            return None

        return CachedObject(
            key=key,
            body=data[b"body"],
            content_type=data.get(b"content_type", b"").decode(),
            uploaded_at=float(data.get(b"uploaded", b"0")),
        )

    async def put(self, key: str, body: bytes, content_type: str) -> CachedObject:
        """Store an object, replacing any previous value.

        Args:
            key: The object key
            body: Raw bytes to store
            content_type: Content type metadata

        Returns:
            The stored object
        """
        uploaded_at = time.time()
        await self._client.hset(
            self._redis_key(key),
            mapping={
                "body": body,
                "content_type": content_type,
                "uploaded": str(uploaded_at),
            },
        )
        return CachedObject(key=key, body=body, content_type=content_type, uploaded_at=uploaded_at)

    async def list_objects(self, cursor: str | None = None, limit: int = 1000) -> ObjectListing:
        """List one page of stored objects with their upload timestamps.

        Args:
            cursor: SCAN cursor from the previous page, None to start
            limit: SCAN COUNT hint

        Returns:
            The page, with cursor None once SCAN wraps back to 0
        """
        next_cursor, redis_keys = await self._client.scan(
            cursor=int(cursor or 0),
            match=f"{self._namespace}:*",
            count=limit,
        )

        objects = []
        if redis_keys:
            # Fetch all timestamps for the page in one round trip
            async with self._client.pipeline(transaction=False) as pipe:
                for redis_key in redis_keys:
                    pipe.hget(redis_key, "uploaded")
                timestamps = await pipe.execute()

            for redis_key, uploaded in zip(redis_keys, timestamps):
                objects.append(
                    StoredObjectInfo(
                        key=self._object_key(redis_key),
                        uploaded_at=float(uploaded) if uploaded is not None else None,
                    )
                )

        next_cursor = int(next_cursor)
        return ObjectListing(objects=objects, cursor=str(next_cursor) if next_cursor else None)

    async def delete(self, keys: list[str]) -> int:
        """Delete a batch of objects with a single DEL.

        Args:
            keys: Object keys to delete

        Returns:
            Number of objects deleted
        """
        if not keys:
            return 0
        result: int = await self._client.delete(*(self._redis_key(key) for key in keys))
        return result

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = await self._client.ping()
            return bool(result)
        except Exception as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    async def close(self) -> None:
        """Close the underlying Redis connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
