"""Starlette middleware verifying signed requests."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable

from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from aksk.common.errors import AuthError
from aksk.common.http import set_access_key
from aksk.common.logging import get_logger
from aksk.common.metrics import record_auth_result
from aksk.common.replay import NonceCache
from aksk.common.settings import Settings
from aksk.core.auth import Auth
from aksk.request.validator import AuthenticatedRequest, KeyResolver, RequestValidator

logger = get_logger(__name__)

ErrorHandler = Callable[[Request, AuthError], Response]


def default_error_handler(_request: Request, exc: AuthError) -> Response:
    """401 with {"message": ...}."""
    return JSONResponse({"message": exc.message}, status_code=401)


class AkskMiddleware(BaseHTTPMiddleware):
    """
    Rejects requests whose signature headers do not verify.

    Headers are checked before the body is read; the body is only buffered
    once the signature is known to be good, and Starlette replays it to the
    downstream endpoint.
    """

    def __init__(
        self,
        app: ASGIApp,
        validator: RequestValidator,
        exempt_paths: Iterable[str] = (),
        error_handler: ErrorHandler | None = None,
    ) -> None:
        super().__init__(app)
        self._validator = validator
        self._exempt_paths = set(exempt_paths)
        self._error_handler = error_handler or default_error_handler

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        start = time.perf_counter()
        try:
            # key resolvers may block on a secret store
            bundle = await run_in_threadpool(self._validator.validate_headers, request.headers)
            if not self._validator.skip_body:
                body = await request.body()
                self._validator.validate_body(body, bundle)
            self._validator.check_replay(bundle)
        except AuthError as exc:
            record_auth_result("denied", exc.code, time.perf_counter() - start)
            logger.warning(
                "Request authentication failed",
                path=request.url.path,
                method=request.method,
                reason=exc.code,
            )
            return self._error_handler(request, exc)

        record_auth_result("allowed", "ok", time.perf_counter() - start)
        request.state.aksk = AuthenticatedRequest(access_key=bundle.access_key, headers=bundle)
        set_access_key(bundle.access_key)
        return await call_next(request)


def create_aksk_middleware(
    settings: Settings,
    key_resolver: KeyResolver,
    auth: Auth | None = None,
    error_handler: ErrorHandler | None = None,
) -> Middleware:
    """Build the middleware entry for Starlette(middleware=[...])."""
    auth = auth or Auth.from_settings(settings)
    replay_cache = None
    if settings.replay_protection_enabled:
        replay_cache = NonceCache(
            ttl_seconds=2 * auth.acceptable_skew.total_seconds() + 1,
            max_entries=settings.replay_cache_max_entries,
        )
    validator = RequestValidator(
        key_resolver,
        auth=auth,
        skip_body=settings.skip_body,
        replay_cache=replay_cache,
    )
    return Middleware(
        AkskMiddleware,
        validator=validator,
        exempt_paths=settings.exempt_paths,
        error_handler=error_handler,
    )
