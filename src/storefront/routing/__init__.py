"""Routing — slug routes resolved through entity repositories.

Route configurations are fixed at startup; repositories are registered
during kernel setup and the provider freezes on first resolution.
"""

from storefront.routing.provider import RouteProvider, SlugRouteProvider
from storefront.routing.route import PathMatch, RouteCollection, RouteConfig, RouteDescriptor

__all__ = [
    "PathMatch",
    "RouteCollection",
    "RouteConfig",
    "RouteDescriptor",
    "RouteProvider",
    "SlugRouteProvider",
]
