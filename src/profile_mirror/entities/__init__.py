"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services,
handlers and repositories. They are NOT used for API contracts - use
DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cached_object import CachedObject, ObjectListing, StoredObjectInfo
from .exchange import MirrorRequest, MirrorResponse
from .origin import OriginResponse, OriginTarget
from .rewrite_rule import RewriteRule

__all__ = [
    "CachedObject",
    "MirrorRequest",
    "MirrorResponse",
    "ObjectListing",
    "OriginResponse",
    "OriginTarget",
    "RewriteRule",
    "StoredObjectInfo",
]
