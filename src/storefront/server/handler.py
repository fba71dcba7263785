"""ASGI handler — translates ASGI scope/messages to storefront types.

The only component that touches raw HTTP scopes. Builds a Request,
resolves its path through the route provider, calls the view
registered for the matched entity's class, and sends the Response back
through ASGI send().
"""

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from storefront._internal.asgi import Receive, Scope, Send
from storefront._internal.invoke import invoke
from storefront.context import locale_var, request_var
from storefront.errors import HTTPError, NotFound
from storefront.http.request import Request
from storefront.routing.provider import RouteProvider
from storefront.routing.route import RouteDescriptor
from storefront.server.errors import ErrorHandlers, handle_http_error, handle_internal_error
from storefront.server.negotiation import negotiate
from storefront.server.sender import send_response

type View = Callable[..., Any]


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    provider: RouteProvider,
    views: Mapping[type, View],
    error_handlers: ErrorHandlers,
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    request_token = request_var.set(request)
    locale_token = None

    try:
        if request.method not in ("GET", "HEAD"):
            raise HTTPError(405, "Method Not Allowed", (("Allow", "GET, HEAD"),))

        routes = await provider.match_request(request)
        if request.locale is not None:
            locale_token = locale_var.set(request.locale)
        if not routes:
            raise NotFound(f"No route matches {request.path!r}")

        route = next(iter(routes.values()))
        view = _find_view(views, type(route.entity))
        if view is None:
            raise NotFound(f"No view registered for {type(route.entity).__name__}")

        result = await invoke(view, **_build_view_kwargs(view, request, route))
        response = negotiate(result)

    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)
    finally:
        if locale_token is not None:
            locale_var.reset(locale_token)
        request_var.reset(request_token)

    await send_response(response, send, head=request.method == "HEAD")


def _find_view(views: Mapping[type, View], entity_class: type) -> View | None:
    for cls in entity_class.__mro__:
        if cls in views:
            return views[cls]
    return None


def _build_view_kwargs(
    view: View,
    request: Request,
    route: RouteDescriptor,
) -> dict[str, Any]:
    """Inspect the view signature and build kwargs.

    Resolution order:
    1. ``request`` (by name or ``Request`` annotation)
    2. ``route`` (by name or ``RouteDescriptor`` annotation)
    3. ``entity`` by name, or any parameter annotated with the entity's class
    4. ``locale`` and ``format`` by name
    """
    sig = inspect.signature(view, eval_str=True)
    entity = route.entity
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation
        if name == "request" or annotation is Request:
            kwargs[name] = request
        elif name == "route" or annotation is RouteDescriptor:
            kwargs[name] = route
        elif name == "entity" or (
            isinstance(annotation, type) and isinstance(entity, annotation)
        ):
            kwargs[name] = entity
        elif name == "locale":
            kwargs[name] = route.locale
        elif name == "format":
            kwargs[name] = route.format

    return kwargs

