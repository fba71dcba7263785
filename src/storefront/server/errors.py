"""Error handling pipeline.

Maps HTTPError exceptions and unexpected failures to responses, using
registered error handlers or plain-text defaults.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from storefront._internal.invoke import invoke
from storefront.errors import HTTPError
from storefront.http.request import Request
from storefront.http.response import Response
from storefront.server.negotiation import json_response, negotiate

logger = logging.getLogger("storefront.server")

type ErrorHandlers = dict[int | type, Callable[..., Any]]


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke an error handler taking zero, one (request) or two (request, exc) args."""
    params = list(inspect.signature(handler).parameters.values())
    if len(params) >= 2:
        result = await invoke(handler, request, exc)
    elif len(params) == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)
    return negotiate(result)


def _lookup(handlers: ErrorHandlers, exc: Exception, status: int) -> Callable[..., Any] | None:
    for exc_type in type(exc).__mro__:
        if exc_type in handlers:
            return handlers[exc_type]
    return handlers.get(status)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    handler = _lookup(error_handlers, exc, exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"
    if request.is_json:
        response = json_response({"status": exc.status, "detail": detail}, exc.status)
    else:
        response = Response(body=detail, status=exc.status, content_type="text/plain; charset=utf-8")
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: ErrorHandlers,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(500) or _lookup(error_handlers, exc, 500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        return response if response.status != 200 else response.with_status(500)

    body = f"Internal Server Error: {type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return Response(body=body, status=500, content_type="text/plain; charset=utf-8")
