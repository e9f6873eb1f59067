#!/usr/bin/env python3
"""
Run one cache eviction sweep.

Meant for an external scheduler (cron, a Kubernetes CronJob, ...) as an
alternative to the in-process CLEANUP_INTERVAL_SECONDS loop. Uses the
same settings as the API.
"""

import asyncio
import logging

from profile_mirror import HttpxOriginClient, RedisObjectStore, RequestDispatcher, settings
from profile_mirror.config import configure_logging

logger = logging.getLogger("profile_mirror.cleanup")


async def main() -> int:
    """Sweep expired objects once and return the number deleted."""
    store = RedisObjectStore.create()
    origin = HttpxOriginClient.create()
    dispatcher = RequestDispatcher.create(config=settings, store=store, origin=origin)
    try:
        deleted = await dispatcher.run_scheduled_maintenance()
    finally:
        await origin.close()
        await store.close()
    logger.info("Deleted %d expired objects", deleted)
    return deleted


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
