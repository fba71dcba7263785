"""Route configuration and resolved route descriptors."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

ENTITY_KEY = "_entity"
LOCALE_KEY = "_locale"
FORMAT_KEY = "_format"


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """How one entity class maps onto URLs.

    ``field`` names the entity attribute holding the slug.
    ``prefix`` is the static path segment in front of it::

        RouteConfig(field="slug", prefix="/products")
        # /products/red-shirt  ->  Product with slug == "red-shirt"
    """

    field: str
    prefix: str = ""

    @property
    def static_prefix(self) -> str:
        """The prefix normalized to a single leading slash."""
        return "/" + self.prefix.strip("/")


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A route resolved from exactly one entity and one configured field.

    ``defaults`` always holds the entity, ``{field: value}`` and the
    locale; it holds the format only when one was requested.
    ``variable_pattern`` is built from the raw value — characters that
    are significant in a regex are not escaped.
    """

    static_prefix: str
    variable_pattern: str
    defaults: Mapping[str, Any]
    add_format_pattern: bool = False
    add_locale_pattern: bool = True

    @property
    def entity(self) -> Any:
        return self.defaults[ENTITY_KEY]

    @property
    def locale(self) -> str:
        return self.defaults[LOCALE_KEY]

    @property
    def format(self) -> str | None:
        return self.defaults.get(FORMAT_KEY)

    @property
    def path(self) -> str:
        """Static prefix and variable pattern joined, without a double slash."""
        if self.static_prefix == "/":
            return self.variable_pattern
        return self.static_prefix + self.variable_pattern


class RouteCollection(Mapping[str, RouteDescriptor]):
    """Ordered collection of descriptors keyed by route name.

    Adding a name that already exists replaces the earlier descriptor
    and moves the name to the end.
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, RouteDescriptor] = {}

    def add(self, name: str, route: RouteDescriptor) -> None:
        self._routes.pop(name, None)
        self._routes[name] = route

    def __getitem__(self, name: str) -> RouteDescriptor:
        return self._routes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteCollection({list(self._routes)!r})"


@dataclass(frozen=True, slots=True)
class PathMatch:
    """Result of matching a request path against every configured class.

    ``locale`` is the locale resolved by the last structural match, or
    ``None`` when no configured pattern matched the path at all.
    Falsy when no descriptor was produced.
    """

    routes: RouteCollection
    locale: str | None = None

    def __bool__(self) -> bool:
        return len(self.routes) > 0


def freeze_defaults(defaults: dict[str, Any]) -> Mapping[str, Any]:
    """Wrap a defaults dict in a read-only view."""
    return MappingProxyType(defaults)
