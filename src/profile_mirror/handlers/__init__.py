"""Handler layer for incoming requests.

This layer contains the request dispatcher that turns an incoming
request into exactly one response. Handlers depend on services
(business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Object store / origin)
"""

from .request_dispatcher import CORS_HEADERS, RequestDispatcher

__all__ = [
    "CORS_HEADERS",
    "RequestDispatcher",
]
