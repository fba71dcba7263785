"""Storefront exception hierarchy.

Shared across the route provider, kernel, and server pipeline so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class StorefrontError(Exception):
    """Base for all storefront-specific errors."""


class ConfigurationError(StorefrontError):
    """Raised when kernel or locale configuration is invalid.

    Typically raised while the kernel freezes at startup.
    """


class InvalidArgument(StorefrontError, ValueError):  # noqa: N818
    """Raised when a registration call receives an unusable argument."""


@dataclass(frozen=True, slots=True)
class HTTPError(StorefrontError):
    """An error that maps directly to an HTTP status code.

    Raised by the route provider, the kernel, or views. The ASGI handler
    catches these and dispatches to the matching ``@kernel.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — no route or entity matched."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
