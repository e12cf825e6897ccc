"""Minimal Starlette app guarded by AkskMiddleware."""

from __future__ import annotations

from collections.abc import Mapping

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from aksk.common.http import RequestIdMiddleware
from aksk.common.logging import get_logger, setup_logging
from aksk.common.metrics import metrics_endpoint
from aksk.common.settings import Settings, get_settings
from aksk.middleware import ErrorHandler, create_aksk_middleware
from aksk.request.validator import KeyResolver

logger = get_logger(__name__)


def static_key_resolver(credentials: Mapping[str, str]) -> KeyResolver:
    """Resolve secrets from a fixed access key -> secret key map."""
    table = dict(credentials)

    def resolve(access_key: str) -> str | None:
        return table.get(access_key)

    return resolve


async def handle_echo(request: Request) -> JSONResponse:
    """Echo the authenticated access key and request body."""
    body = await request.body()
    auth = getattr(request.state, "aksk", None)
    return JSONResponse(
        {
            "access_key": auth.access_key if auth else None,
            "method": request.method,
            "body": body.decode("utf-8", errors="replace"),
        }
    )


async def handle_health(_request: Request) -> JSONResponse:
    """Health check."""
    return JSONResponse({"status": "healthy"})


def create_app(
    settings: Settings | None = None,
    key_resolver: KeyResolver | None = None,
    error_handler: ErrorHandler | None = None,
) -> Starlette:
    """Create the Starlette application."""
    settings = settings or get_settings()
    resolver = key_resolver or static_key_resolver(settings.credentials)

    routes = [
        Route("/echo", handle_echo, methods=["GET", "POST", "PUT", "PATCH", "DELETE"]),
        Route("/health", handle_health, methods=["GET"]),
        Route("/metrics", metrics_endpoint, methods=["GET"]),
    ]
    middleware = [
        Middleware(RequestIdMiddleware),
        create_aksk_middleware(settings, resolver, error_handler=error_handler),
    ]
    return Starlette(routes=routes, middleware=middleware)


def run(settings: Settings | None = None) -> None:
    """Serve the app with uvicorn."""
    settings = settings or get_settings()
    if not settings.credentials:
        logger.warning("No credentials configured; every signed request will be rejected")
    app = create_app(settings)
    logger.info("Starting server", host=settings.host, port=settings.port)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Entry point for the bundled server."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_json)
    run(settings)


if __name__ == "__main__":
    main()
