"""Service layer for business logic.

This layer contains the classification, resolution, caching and
transformation logic. Services depend on protocols (interfaces), not
concrete implementations, making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Object store / origin / HTML parser)
"""

from .content_transformer import ContentCategory, ContentTransformer, classify_content_type
from .object_cache_service import ObjectCacheService, guess_content_type, object_key
from .origin_resolver import OriginResolver
from .path_classifier import PathClassifier

__all__ = [
    "ContentCategory",
    "ContentTransformer",
    "ObjectCacheService",
    "OriginResolver",
    "PathClassifier",
    "classify_content_type",
    "guess_content_type",
    "object_key",
]
