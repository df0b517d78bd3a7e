"""FastAPI application that admits only CAP1-signed requests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from cap1_hmac._key_store import MemoryKeyStore
from cap1_hmac._settings import get_max_clock_skew, get_secrets
from cap1_hmac._verifier import DEFAULT_MAX_CLOCK_SKEW, verify

logger = logging.getLogger(__name__)

_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _problem_response(status: int, title: str, detail: str, pointer: str = "/authorization") -> JSONResponse:
    """Return an ``application/problem+json`` error response."""
    return JSONResponse(
        status_code=status,
        content={
            "type": f"about:blank#{title.lower().replace(' ', '-')}",
            "title": title,
            "errors": [{"detail": detail, "pointer": pointer}],
        },
        media_type="application/problem+json",
    )


def _request_path(request: Request) -> str:
    """Return the still-encoded request path, as the client signed it."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.decode("latin-1").partition("?")[0]
    return request.url.path


async def verify_request(
    request: Request,
    secret_resolver: Callable[[str], Any],
    max_clock_skew: timedelta = DEFAULT_MAX_CLOCK_SKEW,
) -> JSONResponse | None:
    """Verify the CAP1 signature on a request. Returns an error response, or None if authorized."""
    authorized = await verify(
        headers=request.headers,
        secret_resolver=secret_resolver,
        method=request.method,
        path=_request_path(request),
        query_string=request.url.query,
        max_clock_skew=max_clock_skew,
    )
    if not authorized:
        # The response never says which check failed
        return _problem_response(401, "Unauthorized", "Request signature could not be verified")
    return None


def create_app(
    secret_resolver: Callable[[str], Any],
    max_clock_skew: timedelta = DEFAULT_MAX_CLOCK_SKEW,
) -> FastAPI:
    """Build an app whose every route answers 200 to signed requests and 401 otherwise."""
    application = FastAPI()

    @application.api_route("/{path:path}", methods=_METHODS)
    async def signed_endpoint(path: str, request: Request) -> Response:
        error = await verify_request(request, secret_resolver, max_clock_skew)
        logger.info("%s /%s authorized=%s", request.method, path, error is None)
        if error is not None:
            return error
        return Response(status_code=200)

    return application


key_store = MemoryKeyStore(get_secrets())
app = create_app(key_store, get_max_clock_skew())
