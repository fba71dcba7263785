"""Locale collaborators consumed by the slug route provider.

``LocaleProvider`` answers which locales the store supports.
``LocaleContext`` answers which locale the current request runs in.
Both are protocols — any object with the right methods works.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from storefront.context import locale_var
from storefront.errors import ConfigurationError


@runtime_checkable
class LocaleProvider(Protocol):
    """Source of the supported locale codes."""

    def get_locales(self) -> Sequence[str]: ...

    def get_default_locale(self) -> str: ...


@runtime_checkable
class LocaleContext(Protocol):
    """Source of the current locale."""

    def get_locale(self) -> str: ...


@dataclass(frozen=True, slots=True)
class StaticLocaleProvider:
    """Locales fixed at startup, typically from ``AppConfig``.

    Usage::

        provider = StaticLocaleProvider(("en", "fr"), default_locale="en")
    """

    locales: tuple[str, ...]
    default_locale: str

    def __post_init__(self) -> None:
        if not self.locales:
            msg = "At least one locale must be configured."
            raise ConfigurationError(msg)
        if self.default_locale not in self.locales:
            msg = (
                f"Default locale {self.default_locale!r} is not among the "
                f"configured locales: {', '.join(self.locales)}"
            )
            raise ConfigurationError(msg)

    def get_locales(self) -> tuple[str, ...]:
        return self.locales

    def get_default_locale(self) -> str:
        return self.default_locale


class RequestLocaleContext:
    """Current locale read from the request-scoped ``locale_var``.

    Falls back to the provider's default locale outside a request, or
    before the handler pipeline has negotiated one.
    """

    __slots__ = ("_provider",)

    def __init__(self, provider: LocaleProvider) -> None:
        self._provider = provider

    def get_locale(self) -> str:
        return locale_var.get(self._provider.get_default_locale())
