"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Dispatcher stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from profile_mirror.config import Settings, configure_logging, get_redis_client, settings
from profile_mirror.handlers import RequestDispatcher
from profile_mirror.repositories import HttpxOriginClient, RedisObjectStore

logger = logging.getLogger(__name__)


def get_dispatcher(request: Request) -> RequestDispatcher:
    """Dependency injection for RequestDispatcher from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The RequestDispatcher instance from app.state

    Raises:
        RuntimeError: If dispatcher is not initialized
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("RequestDispatcher not initialized. Check lifespan setup.")
    return dispatcher


async def maintenance_loop(dispatcher: RequestDispatcher, interval_seconds: int) -> None:
    """Run the eviction sweep every ``interval_seconds`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await dispatcher.run_scheduled_maintenance()
        except Exception as e:
            logger.error("Scheduled cache sweep failed: %s", e)


def build_lifespan(config: Settings | None = None, dispatcher: RequestDispatcher | None = None):
    """Build the lifespan context manager for the FastAPI app.

    Args:
        config: Settings to wire from. Defaults to the global settings.
        dispatcher: Prebuilt dispatcher (tests inject one backed by fakes).
            When given, the caller owns its resources.

    Returns:
        An async context manager suitable for ``FastAPI(lifespan=...)``
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the dispatcher and the maintenance task.

        Initializes all layers and stores in app.state:
        1. Repositories (Redis object store, httpx origin client)
        2. Dispatcher - stored in app.state.dispatcher
        3. Maintenance task, when CLEANUP_INTERVAL_SECONDS > 0
        """
        configure_logging(config)

        store = origin = None
        if dispatcher is None:
            store = RedisObjectStore.create(
                redis_client=get_redis_client(config),
                namespace=config.object_namespace,
            )
            origin = HttpxOriginClient.create(timeout=config.origin_timeout)
            app.state.dispatcher = RequestDispatcher.create(config=config, store=store, origin=origin)
        else:
            app.state.dispatcher = dispatcher

        logger.info("Mirroring %s/%s at %s", config.mirror_origin, config.profile_username, config.base_url)
        logger.info("Cache retention: %ss", config.cache_retention_seconds)

        task = None
        if config.cleanup_interval_seconds > 0:
            task = asyncio.create_task(
                maintenance_loop(app.state.dispatcher, config.cleanup_interval_seconds)
            )
            logger.info("Scheduled cache sweep every %ss", config.cleanup_interval_seconds)

        yield

        # Cleanup
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if origin is not None:
            await origin.close()
        if store is not None:
            await store.close()
        del app.state.dispatcher
        logger.info("Profile mirror shut down")

    return lifespan


# Type alias for cleaner dependency injection
DispatcherDep = Annotated[RequestDispatcher, Depends(get_dispatcher)]
