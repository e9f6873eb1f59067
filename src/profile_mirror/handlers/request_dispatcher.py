"""Per-request orchestration of the mirror.

Each request moves through a small state machine:

    Received -> Classified -> {Rejected | CleanupRequested | StaticResource | Proxied} -> Responded

Every terminal state yields exactly one MirrorResponse, and every
response carries the CORS headers.
"""

import logging

from profile_mirror.config import Settings, load_rewrite_rules
from profile_mirror.dto import SessionProbeResponse
from profile_mirror.entities import MirrorRequest, MirrorResponse, OriginResponse
from profile_mirror.protocols import HtmlRewriter, ObjectStore, OriginClient
from profile_mirror.repositories import SoupHtmlRewriter
from profile_mirror.services import (
    ContentTransformer,
    ObjectCacheService,
    OriginResolver,
    PathClassifier,
    guess_content_type,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,POST,OPTIONS",
}

# Headers sent with every outbound fetch
OUTBOUND_HEADERS = dict(CORS_HEADERS)

# The upstream front end polls this to decide whether to show a signed-in view
SESSION_PROBE_PATH = "/v1/users/me"

FORBIDDEN_BODY = "Forbidden"
UNAUTHORIZED_BODY = "Unauthorized access"
CLEANUP_BODY = "Cleanup completed"


class RequestDispatcher:
    """Entry points of the mirror: ``handle`` and ``run_scheduled_maintenance``.

    The dispatcher holds no per-request state; all persistent state lives
    in the object store behind the cache service.

    Example:
        ```python
        dispatcher = RequestDispatcher.create(
            config=settings,
            store=RedisObjectStore.create(),
            origin=HttpxOriginClient.create(),
        )
        response = await dispatcher.handle(MirrorRequest(path="/", method="GET"))
        ```
    """

    def __init__(
        self,
        config: Settings,
        classifier: PathClassifier,
        resolver: OriginResolver,
        cache: ObjectCacheService,
        origin: OriginClient,
        transformer: ContentTransformer,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            config: Settings (retention period and friends).
            classifier: Path/method allow-list.
            resolver: Upstream URL mapping.
            cache: Static resource cache.
            origin: Outbound HTTP client for proxied requests.
            transformer: Body decoding and rewriting.
        """
        self._config = config
        self._classifier = classifier
        self._resolver = resolver
        self._cache = cache
        self._origin = origin
        self._transformer = transformer

    @classmethod
    def create(
        cls,
        config: Settings,
        store: ObjectStore,
        origin: OriginClient,
        html_rewriter: HtmlRewriter | None = None,
    ) -> "RequestDispatcher":
        """Factory method wiring every service from a configuration.

        Args:
            config: Settings to build from (required).
            store: Object storage backend (required).
            origin: Outbound HTTP client (required).
            html_rewriter: Body injector. Defaults to SoupHtmlRewriter.

        Returns:
            Configured RequestDispatcher
        """
        transformer = ContentTransformer(
            rules=load_rewrite_rules(config),
            html_rewriter=html_rewriter or SoupHtmlRewriter(),
            inject_css=config.inject_css,
            inject_js=config.inject_js,
        )
        return cls(
            config=config,
            classifier=PathClassifier(),
            resolver=OriginResolver(config),
            cache=ObjectCacheService.create(
                store=store,
                origin=origin,
                retention_seconds=config.cache_retention_seconds,
            ),
            origin=origin,
            transformer=transformer,
        )

    async def handle(self, request: MirrorRequest) -> MirrorResponse:
        """Produce the response for one incoming request.

        Args:
            request: The incoming request

        Returns:
            Exactly one response, always carrying the CORS headers

        Raises:
            MirrorError: If the origin is unreachable or a body cannot be decoded
        """
        path, method = request.path, request.method.upper()

        if method == "GET" and path == SESSION_PROBE_PATH:
            return self._respond(
                401,
                SessionProbeResponse().model_dump_json(),
                "application/json",
            )

        if not self._classifier.is_allowed(path, method):
            logger.debug("Rejected %s %s", method, path)
            return self._respond(403, FORBIDDEN_BODY)

        if self._classifier.is_cleanup_trigger(path, method):
            await self.run_scheduled_maintenance()
            return self._respond(200, CLEANUP_BODY)

        if method == "GET" and self._classifier.is_static_resource(path):
            return await self._serve_static(request)

        return await self._proxy(request)

    async def run_scheduled_maintenance(self) -> int:
        """Evict cached objects older than the retention period.

        Returns:
            Number of objects deleted
        """
        return await self._cache.sweep_expired(self._config.cache_retention_seconds)

    async def is_healthy(self) -> bool:
        return await self._cache.is_healthy()

    async def _serve_static(self, request: MirrorRequest) -> MirrorResponse:
        cached = await self._cache.try_serve(request.path)
        if cached is not None:
            logger.debug("Cache hit for %s", request.path)
            content_type = cached.content_type or guess_content_type(request.path)
            return self._render(200, cached.body, content_type)

        url = self._origin_url(request)
        if url is None:
            return self._respond(403, UNAUTHORIZED_BODY)

        response = await self._cache.fetch_and_store(request.path, url, OUTBOUND_HEADERS)
        return self._from_origin(response, fallback_content_type=guess_content_type(request.path))

    async def _proxy(self, request: MirrorRequest) -> MirrorResponse:
        url = self._origin_url(request)
        if url is None:
            return self._respond(403, UNAUTHORIZED_BODY)

        logger.debug("Proxying %s %s -> %s", request.method, request.path, url)
        response = await self._origin.fetch(
            url,
            headers=OUTBOUND_HEADERS,
            method=request.method.upper(),
            content=request.body or None,
        )
        return self._from_origin(response)

    def _origin_url(self, request: MirrorRequest) -> str | None:
        url = self._resolver.resolve(request.path, request.referer)
        if url is not None and request.query:
            url = f"{url}?{request.query}"
        return url

    def _from_origin(
        self,
        response: OriginResponse,
        fallback_content_type: str | None = None,
    ) -> MirrorResponse:
        if not response.ok:
            # Unsuccessful origin responses pass through untouched
            return self._respond(response.status_code, response.content, response.content_type)
        content_type = response.content_type or fallback_content_type
        return self._render(response.status_code, response.content, content_type)

    def _render(self, status_code: int, body: bytes, content_type: str | None) -> MirrorResponse:
        return self._respond(status_code, self._transformer.render(body, content_type), content_type)

    @staticmethod
    def _respond(
        status_code: int,
        body: str | bytes,
        content_type: str | None = "text/plain; charset=utf-8",
    ) -> MirrorResponse:
        headers = dict(CORS_HEADERS)
        if content_type:
            headers["Content-Type"] = content_type
        return MirrorResponse(status_code=status_code, body=body, headers=headers)
