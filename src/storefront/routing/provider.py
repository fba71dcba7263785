"""Slug route provider — resolves human-readable slugs to entity routes.

Each routable entity class is configured with the attribute that holds
its slug and the URL prefix it lives under::

    provider = SlugRouteProvider(
        {
            Product: RouteConfig(field="slug", prefix="/products"),
            Taxon: RouteConfig(field="permalink", prefix="/taxons"),
        },
        locale_provider=StaticLocaleProvider(("en", "fr"), "en"),
        locale_context=context,
    )
    provider.register_repository(Product, products)
    provider.register_repository(Taxon, taxons)

    await provider.resolve_by_name("red-mug")        # outbound, by slug
    await provider.match_path("/fr/products/red-mug")  # inbound, by path

Registered classes are searched in registration order and the first
match wins, so two classes sharing a slug resolve to the earlier one.

Thread safety:
    Repositories are registered during setup. The first resolution call
    freezes the provider (Lock + double-check); registering afterwards
    raises ``RuntimeError``. After the freeze only the memoized locale
    list is written, and it is idempotent.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, overload

from storefront.data.repository import Repository
from storefront.errors import InvalidArgument, NotFound
from storefront.routing.route import (
    ENTITY_KEY,
    FORMAT_KEY,
    LOCALE_KEY,
    PathMatch,
    RouteCollection,
    RouteConfig,
    RouteDescriptor,
    freeze_defaults,
)

if TYPE_CHECKING:
    from storefront.http.request import Request
    from storefront.locale import LocaleContext, LocaleProvider

logger = logging.getLogger("storefront.routing")

# A trailing ".json" / ".xml" on the slug selects the response format
_FORMAT_RE = re.compile(r".+\.([a-z]+)$", re.IGNORECASE)


class RouteProvider(Protocol):
    """What the kernel needs from a route source."""

    async def resolve_by_name(self, name: object) -> RouteDescriptor: ...

    async def resolve_all_by_names(
        self, names: Iterable[object] | None = None
    ) -> RouteCollection | list[RouteDescriptor]: ...

    async def match_request(self, request: Request) -> RouteCollection: ...


class SlugRouteProvider:
    """Route provider backed by per-class entity repositories."""

    __slots__ = (
        "_configs",
        "_freeze_lock",
        "_frozen",
        "_locale_context",
        "_locale_provider",
        "_locales",
        "_repositories",
        "route_collection_limit",
    )

    def __init__(
        self,
        route_configs: Mapping[type, RouteConfig],
        *,
        locale_provider: LocaleProvider,
        locale_context: LocaleContext,
        route_collection_limit: int | None = None,
    ) -> None:
        self._configs: dict[type, RouteConfig] = dict(route_configs)
        self._locale_provider = locale_provider
        self._locale_context = locale_context
        self.route_collection_limit = route_collection_limit
        self._repositories: dict[type, Repository[Any]] = {}
        self._locales: tuple[str, ...] | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Registration --

    def register_repository(self, entity_class: type, repository: Repository[Any]) -> None:
        """Associate *entity_class* with the repository used to look it up.

        Registering a class again replaces its repository but keeps its
        position in the search order.
        """
        if self._frozen:
            msg = "Cannot register repositories after the route provider has started resolving."
            raise RuntimeError(msg)
        if not isinstance(repository, Repository):
            msg = (
                f"Expected a repository for {entity_class.__name__}, "
                f"got {type(repository).__name__}"
            )
            raise InvalidArgument(msg)
        if entity_class not in self._configs:
            msg = f"No route configuration for {entity_class.__name__}"
            raise InvalidArgument(msg)
        self._repositories[entity_class] = repository
        logger.debug("Registered %s repository for slug routing", entity_class.__name__)

    @property
    def route_configs(self) -> Mapping[type, RouteConfig]:
        return self._configs

    @property
    def registered_classes(self) -> tuple[type, ...]:
        """Classes with a repository, in search order."""
        return tuple(self._repositories)

    def freeze(self) -> None:
        """Close registration. Idempotent and safe to call from several threads."""
        if self._frozen:
            return
        with self._freeze_lock:
            self._frozen = True

    # -- Outbound: names to routes --

    async def resolve_by_name(self, name: object) -> RouteDescriptor:
        """Resolve an entity instance or a slug to its route.

        Raises ``NotFound`` when no registered class has an entity whose
        configured field equals *name*.
        """
        self.freeze()
        if self._config_for(name) is not None:
            return self._create_route(name)

        for entity_class, repository in self._repositories.items():
            field = self._configs[entity_class].field
            entity = await repository.find_one_by({field: name})
            if entity is not None:
                return self._create_route(entity)

        msg = f"No route found for name '{name}'"
        raise NotFound(msg)

    @overload
    async def resolve_all_by_names(self, names: None = None) -> RouteCollection: ...
    @overload
    async def resolve_all_by_names(self, names: Iterable[object]) -> list[RouteDescriptor]: ...

    async def resolve_all_by_names(
        self, names: Iterable[object] | None = None
    ) -> RouteCollection | list[RouteDescriptor]:
        """Resolve many names at once.

        With no names, lists up to ``route_collection_limit`` entities of
        every registered class (all of them when the limit is ``None`` or
        ``0``), keyed by slug. With names, resolves each one and drops the
        names that do not resolve.
        """
        self.freeze()
        if names is None:
            limit = self.route_collection_limit or None
            collection = RouteCollection()
            for entity_class, repository in self._repositories.items():
                field = self._configs[entity_class].field
                for entity in await repository.find_by({}, limit=limit):
                    collection.add(str(getattr(entity, field)), self._create_route(entity))
            return collection

        routes: list[RouteDescriptor] = []
        for name in names:
            try:
                routes.append(await self.resolve_by_name(name))
            except NotFound:
                logger.debug("Skipping unresolvable route name %r", name)
        return routes

    # -- Inbound: paths to routes --

    async def match_path(self, path: str) -> PathMatch:
        """Match *path* against every registered class.

        Returns the descriptors of all classes whose prefix pattern
        matches and whose repository holds the slug, plus the locale the
        path resolved to (``None`` when no pattern matched).
        """
        self.freeze()
        collection = RouteCollection()
        if not path:
            return PathMatch(collection)

        locale: str | None = None
        for entity_class, repository in self._repositories.items():
            config = self._configs[entity_class]
            match = self._path_pattern(config).match(path)
            if match is None:
                continue
            locale = match.group(1) or self._locale_provider.get_default_locale()
            value = match.group(2)
            if not value:
                continue

            found = await self._find_for_path(repository, config.field, value)
            if found is None:
                logger.debug("No %s with %s=%r", entity_class.__name__, config.field, value)
                continue
            entity, value, format_ = found
            collection.add(value, self._create_route(entity, value, locale, format_))

        return PathMatch(collection, locale)

    async def match_request(self, request: Request) -> RouteCollection:
        """Match the request path and record the resolved locale on the request."""
        result = await self.match_path(request.path)
        if result.locale is not None:
            request.set_locale(result.locale)
        return result.routes

    async def _find_for_path(
        self, repository: Repository[Any], field: str, value: str
    ) -> tuple[Any, str, str | None] | None:
        """Look up a path value, honoring an optional ``.format`` suffix.

        The value without the suffix is tried first. When that misses,
        the full value is tried, so slugs that contain a dot still
        resolve; in that case no format applies.
        """
        format_match = _FORMAT_RE.match(value)
        if format_match is not None:
            format_ = format_match.group(1)
            stem = value[: -len(format_) - 1]
            entity = await repository.find_one_by({field: stem})
            if entity is not None:
                return entity, stem, format_

        entity = await repository.find_one_by({field: value})
        if entity is None:
            return None
        return entity, value, None

    def _config_for(self, entity: object) -> tuple[type, RouteConfig] | None:
        """The configured class *entity* is an instance of, nearest first."""
        for cls in type(entity).__mro__:
            config = self._configs.get(cls)
            if config is not None:
                return cls, config
        return None

    def _path_pattern(self, config: RouteConfig) -> re.Pattern[str]:
        locales = "|".join(re.escape(locale) for locale in self._get_locales())
        prefix = config.prefix.strip("/")
        prefix_part = re.escape(prefix) + "/?" if prefix else ""
        return re.compile(rf"^/(?:({locales})/)?{prefix_part}([^/].*?)/?$")

    def _get_locales(self) -> tuple[str, ...]:
        if self._locales is None:
            self._locales = tuple(self._locale_provider.get_locales())
        return self._locales

    # -- Descriptor construction --

    def _create_route(
        self,
        entity: Any,
        value: str | None = None,
        locale: str | None = None,
        format_: str | None = None,
    ) -> RouteDescriptor:
        found = self._config_for(entity)
        assert found is not None
        config = found[1]
        if locale is None:
            locale = self._locale_context.get_locale()
        if value is None:
            value = str(getattr(entity, config.field))

        defaults: dict[str, Any] = {
            ENTITY_KEY: entity,
            config.field: value,
            LOCALE_KEY: locale,
        }
        if format_:
            defaults[FORMAT_KEY] = format_

        return RouteDescriptor(
            static_prefix=config.static_prefix,
            # Not regex-escaped: the value is used verbatim.
            variable_pattern="/" + value,
            defaults=freeze_defaults(defaults),
            add_format_pattern=bool(format_),
            add_locale_pattern=True,
        )
