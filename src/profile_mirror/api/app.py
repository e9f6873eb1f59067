import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from profile_mirror.api.dependencies import DispatcherDep, build_lifespan
from profile_mirror.config import Settings, settings
from profile_mirror.dto import HealthCheckResponse
from profile_mirror.entities import MirrorRequest
from profile_mirror.errors import MirrorError
from profile_mirror.handlers import CORS_HEADERS, RequestDispatcher

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

logger = logging.getLogger(__name__)


async def mirror_error_handler(request: Request, exc: MirrorError) -> PlainTextResponse:
    """Turn request-fatal errors into plain-text responses that still carry CORS headers."""
    return PlainTextResponse(exc.detail, status_code=exc.status_code, headers=CORS_HEADERS)


async def unexpected_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Answer unexpected failures with a bare 500 that still carries CORS headers."""
    logger.error("Unhandled error for %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse(
        "Internal Server Error",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        headers=CORS_HEADERS,
    )


def create_app(config: Settings | None = None, dispatcher: RequestDispatcher | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Settings to wire from. Defaults to the global settings.
        dispatcher: Prebuilt dispatcher; skips building Redis/httpx clients.

    Returns:
        The configured application
    """
    app = FastAPI(
        title="Profile Mirror",
        description="Reverse proxy mirroring a hosted profile under a custom domain",
        version="0.1.0",
        lifespan=build_lifespan(config, dispatcher),
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_exception_handler(MirrorError, mirror_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    @app.get("/_mirror/health", response_model=HealthCheckResponse)
    async def health(dispatcher: DispatcherDep) -> JSONResponse:
        """Health check endpoint."""
        healthy = await dispatcher.is_healthy()
        body = HealthCheckResponse(status="healthy" if healthy else "unhealthy", store_healthy=healthy)
        return JSONResponse(
            body.model_dump(),
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.api_route("/{path:path}", methods=ALL_METHODS)
    async def mirror(request: Request, dispatcher: DispatcherDep) -> Response:
        """Catch-all route handing every request to the dispatcher."""
        result = await dispatcher.handle(
            MirrorRequest(
                path=request.url.path,
                method=request.method,
                referer=request.headers.get("referer"),
                query=request.url.query,
                body=await request.body(),
            )
        )
        return Response(content=result.body, status_code=result.status_code, headers=result.headers)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "profile_mirror.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
