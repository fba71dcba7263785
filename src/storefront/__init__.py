"""Storefront — slug routing and promotion forms for plugin-based shops.

A kernel assembled from bundles, each contributing one routable entity
class, its route configuration and its repository::

    from storefront import Bundle, Kernel, RouteConfig
    from storefront.data import InMemoryRepository
    from storefront.models import Product

    products = InMemoryRepository([Product(1, "MUG", "Red mug", "red-mug")])
    kernel = Kernel(bundles=[
        Bundle("product", Product, RouteConfig("slug", "/products"), products),
    ])

    @kernel.view(Product)
    def show(product: Product, locale: str) -> dict:
        return {"name": product.name, "locale": locale}

Data access::

    from storefront.data import Database, SQLRepository
    db = Database("sqlite:///shop.db")
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AppConfig",
    "Bundle",
    "ConfigurationError",
    "HTTPError",
    "InvalidArgument",
    "Kernel",
    "NotFound",
    "Request",
    "Response",
    "RouteConfig",
    "RouteDescriptor",
    "SlugRouteProvider",
    "StorefrontError",
    "get_locale",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import storefront`` fast while providing a clean top-level API.
    """
    if name == "Kernel":
        from storefront.kernel import Kernel

        return Kernel

    if name == "Bundle":
        from storefront.bundles import Bundle

        return Bundle

    if name == "AppConfig":
        from storefront.config import AppConfig

        return AppConfig

    if name == "Request":
        from storefront.http.request import Request

        return Request

    if name == "Response":
        from storefront.http.response import Response

        return Response

    if name in ("RouteConfig", "RouteDescriptor", "SlugRouteProvider"):
        import storefront.routing as routing

        return getattr(routing, name)

    if name in ("get_locale", "get_request"):
        import storefront.context as context

        return getattr(context, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "InvalidArgument",
        "NotFound",
        "StorefrontError",
    ):
        import storefront.errors as errors

        return getattr(errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
