"""Object store protocol.

Defines the interface for the persistent key/value backend holding
cached static resources together with their content type and upload
timestamp.

Implementations can include:
- Redis (default)
- S3 / R2 compatible buckets
- Any store offering whole-object put/get, cursor listing and batched delete
"""

from typing import Protocol, runtime_checkable

from profile_mirror.entities import CachedObject, ObjectListing


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for object storage backends.

    Writes are whole-object: a reader never observes a partially
    written object. No read-modify-write is ever performed on a key.
    """

    async def get(self, key: str) -> CachedObject | None:
        """Fetch an object by key.

        Args:
            key: The object key

        Returns:
            The stored object, or None if absent
        """
        ...

    async def put(self, key: str, body: bytes, content_type: str) -> CachedObject:
        """Store an object, replacing any previous value.

        Args:
            key: The object key
            body: Raw bytes to store
            content_type: Content type metadata

        Returns:
            The stored object, including its upload timestamp
        """
        ...

    async def list_objects(self, cursor: str | None = None, limit: int = 1000) -> ObjectListing:
        """List one page of stored objects.

        Args:
            cursor: Continuation cursor from the previous page, None to start
            limit: Page size hint

        Returns:
            The page, with cursor None once the listing is exhausted
        """
        ...

    async def delete(self, keys: list[str]) -> int:
        """Delete a batch of objects in a single call.

        Args:
            keys: Object keys to delete

        Returns:
            Number of objects deleted
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
