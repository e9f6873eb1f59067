"""Cached object domain entities."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CachedObject:
    """A static resource persisted in the object store.

    Objects are written whole and never patched; a re-fetch overwrites
    the previous object under the same key.

    Attributes:
        key: Request path with the leading separator stripped
        body: Raw bytes as fetched from the origin
        content_type: Content type reported by the origin
        uploaded_at: When the object was written (Unix timestamp)
    """

    key: str
    body: bytes
    content_type: str
    uploaded_at: float


@dataclass(frozen=True)
class StoredObjectInfo:
    """A single entry of an object store listing.

    Attributes:
        key: The object key
        uploaded_at: Upload timestamp, or None if the store could not report one
    """

    key: str
    uploaded_at: float | None


@dataclass(frozen=True)
class ObjectListing:
    """One page of an object store listing.

    Attributes:
        objects: Entries on this page
        cursor: Opaque continuation cursor, None once the listing is exhausted
    """

    objects: list[StoredObjectInfo] = field(default_factory=list)
    cursor: str | None = None
