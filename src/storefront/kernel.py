"""Storefront kernel — the ASGI application.

Mutable during setup (bundles, views, error handlers, hooks). Frozen
when it starts: bundles are collected, the slug route provider is
built, and every bundle's repository is registered before the first
request is resolved.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import anyio

from storefront._internal.asgi import Receive, Scope, Send
from storefront._internal.invoke import invoke
from storefront.bundles import Bundle
from storefront.config import AppConfig
from storefront.data.database import Database
from storefront.errors import ConfigurationError
from storefront.locale import LocaleProvider, RequestLocaleContext, StaticLocaleProvider
from storefront.routing.provider import SlugRouteProvider
from storefront.routing.route import RouteConfig
from storefront.server.errors import ErrorHandlers
from storefront.server.handler import View, handle_request


class Kernel:
    """The storefront application.

    Usage::

        kernel = Kernel(
            AppConfig(locales=("en", "fr")),
            bundles=[product_bundle, taxon_bundle],
            db="sqlite:///shop.db",
        )

        @kernel.view(Product)
        def show_product(product: Product, locale: str) -> dict:
            return {"name": product.name, "locale": locale}

    Subclasses may override ``register_bundles()`` instead of passing
    ``bundles=``.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the route provider. Startup (repository
        registration) is serialized by an ``anyio.Lock`` and always
        completes before any request is resolved.
    """

    __slots__ = (
        "_bundles",
        "_db",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_locale_provider",
        "_provider",
        "_registered",
        "_shutdown_hooks",
        "_start_lock",
        "_started",
        "_startup_hooks",
        "_views",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        bundles: Iterable[Bundle] = (),
        db: Database | str | None = None,
        locale_provider: LocaleProvider | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._bundles: list[Bundle] = list(bundles)
        self._views: dict[type, View] = {}
        self._error_handlers: ErrorHandlers = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._locale_provider = locale_provider
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._started = False
        self._registered = False
        self._start_lock: anyio.Lock | None = None

        if db is None and self.config.database_url is not None:
            db = self.config.database_url
        if isinstance(db, str):
            db = Database(db, echo=self.config.db_echo)
        self._db: Database | None = db

        self._provider: SlugRouteProvider | None = None

    # -- Setup --

    def register_bundles(self) -> Sequence[Bundle]:
        """Return the bundles this kernel runs, in routing priority order."""
        return tuple(self._bundles)

    def add_bundle(self, bundle: Bundle) -> None:
        self._check_not_frozen()
        self._bundles.append(bundle)

    def view(self, entity_class: type) -> Callable[[View], View]:
        """Register the view rendering entities of *entity_class*.

        Views may ask for ``request``, ``route``, ``entity`` (or a
        parameter annotated with the entity class), ``locale`` and
        ``format``.
        """

        def decorator(func: View) -> View:
            self._check_not_frozen()
            self._views[entity_class] = func
            return func

        return decorator

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register an error handler via decorator."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run after repositories are registered."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run before the database disconnects."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Accessors --

    @property
    def db(self) -> Database:
        if self._db is None:
            msg = "No database configured. Pass db= to Kernel() or set AppConfig.database_url."
            raise RuntimeError(msg)
        return self._db

    @property
    def provider(self) -> SlugRouteProvider:
        """The slug route provider. Freezes the kernel on first access."""
        self._ensure_frozen()
        assert self._provider is not None
        return self._provider

    @property
    def started(self) -> bool:
        return self._started

    # -- Lifecycle --

    async def startup(self) -> None:
        """Connect the database, register repositories, run startup hooks.

        Idempotent. Concurrent callers wait for the first one to finish.
        Repositories are registered once; starting again after
        ``shutdown()`` only reconnects and reruns the hooks.
        """
        if self._started:
            return
        if self._start_lock is None:
            self._start_lock = anyio.Lock()
        async with self._start_lock:
            if self._started:
                return
            provider = self.provider
            if self._db is not None:
                await self._db.connect()
            if not self._registered:
                for bundle in self.register_bundles():
                    repository = await bundle.build_repository(self._db)
                    provider.register_repository(bundle.entity, repository)
                provider.freeze()
                self._registered = True
            for hook in self._startup_hooks:
                await invoke(hook)
            self._started = True

    async def shutdown(self) -> None:
        """Run shutdown hooks and disconnect the database."""
        for hook in self._shutdown_hooks:
            await invoke(hook)
        if self._db is not None:
            await self._db.disconnect()
        self._started = False

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await self.startup()
        await handle_request(
            scope,
            receive,
            send,
            provider=self.provider,
            views=self._views,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the route provider from the registered bundles.

        MUST only be called while holding _freeze_lock.
        """
        route_configs: dict[type, RouteConfig] = {}
        for bundle in self.register_bundles():
            if bundle.entity in route_configs:
                msg = f"Bundle {bundle.name!r}: {bundle.entity.__name__} is already routed"
                raise ConfigurationError(msg)
            route_configs[bundle.entity] = bundle.route

        locale_provider = self._locale_provider or StaticLocaleProvider(
            self.config.locales, self.config.default_locale
        )
        self._provider = SlugRouteProvider(
            route_configs,
            locale_provider=locale_provider,
            locale_context=RequestLocaleContext(locale_provider),
            route_collection_limit=self.config.route_collection_limit,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the kernel after it has started. "
                "Register bundles, views, and handlers before the first request."
            )
            raise RuntimeError(msg)
