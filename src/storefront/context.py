"""Request-scoped context via ContextVar.

Provides:
- ``request_var``: The current ``Request`` for this task/thread.
- ``locale_var``: The locale negotiated for the current request.

Both are set by the handler pipeline and reset after each request.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar

from storefront.http.request import Request

request_var: ContextVar[Request] = ContextVar("storefront_request")
"""The current request. Set by the ASGI handler before dispatch."""

locale_var: ContextVar[str] = ContextVar("storefront_locale")
"""The current locale. Set by the ASGI handler once the path is matched."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def get_locale(default: str | None = None) -> str | None:
    """Return the locale of the current request, or *default*."""
    return locale_var.get(default)
