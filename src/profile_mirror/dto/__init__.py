"""Data Transfer Objects for API contracts.

These Pydantic models define the JSON bodies this service produces
itself. Mirrored content is never modelled here.

Internal domain logic should use entities from the entities package.
"""

from .responses import HealthCheckResponse, SessionProbeResponse

__all__ = [
    "HealthCheckResponse",
    "SessionProbeResponse",
]
