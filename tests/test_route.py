"""Tests for storefront.routing.route — configs, descriptors, collections."""

import dataclasses

import pytest

from storefront.models import Product
from storefront.routing import PathMatch, RouteCollection, RouteConfig, RouteDescriptor
from storefront.routing.route import freeze_defaults

MUG = Product(1, "MUG", "Red mug", "red-mug")


def make_route(value: str = "red-mug", **extra) -> RouteDescriptor:
    defaults = {"_entity": MUG, "slug": value, "_locale": "en", **extra}
    return RouteDescriptor(
        static_prefix="/products",
        variable_pattern="/" + value,
        defaults=freeze_defaults(defaults),
    )


class TestRouteConfig:
    @pytest.mark.parametrize(
        ("prefix", "expected"),
        [
            ("/products", "/products"),
            ("products/", "/products"),
            ("//products//", "/products"),
            ("", "/"),
            ("/", "/"),
            ("/catalog/products", "/catalog/products"),
        ],
    )
    def test_static_prefix(self, prefix: str, expected: str) -> None:
        assert RouteConfig(field="slug", prefix=prefix).static_prefix == expected

    def test_frozen(self) -> None:
        config = RouteConfig(field="slug")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.field = "code"  # type: ignore[misc]


class TestRouteDescriptor:
    def test_accessors(self) -> None:
        route = make_route(_format="json")
        assert route.entity is MUG
        assert route.locale == "en"
        assert route.format == "json"
        assert route.path == "/products/red-mug"

    def test_format_absent(self) -> None:
        assert make_route().format is None

    def test_defaults_are_read_only(self) -> None:
        route = make_route()
        with pytest.raises(TypeError):
            route.defaults["slug"] = "other"  # type: ignore[index]

    def test_default_flags(self) -> None:
        route = make_route()
        assert route.add_locale_pattern is True
        assert route.add_format_pattern is False


class TestRouteCollection:
    def test_preserves_insertion_order(self) -> None:
        collection = RouteCollection()
        collection.add("b", make_route("b"))
        collection.add("a", make_route("a"))
        assert list(collection) == ["b", "a"]
        assert len(collection) == 2

    def test_duplicate_name_replaces_and_moves_to_end(self) -> None:
        collection = RouteCollection()
        first = make_route("a")
        second = make_route("a", _format="xml")
        collection.add("a", first)
        collection.add("b", make_route("b"))
        collection.add("a", second)
        assert list(collection) == ["b", "a"]
        assert collection["a"] is second

    def test_missing_name_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            RouteCollection()["nope"]

    def test_repr_lists_names(self) -> None:
        collection = RouteCollection()
        collection.add("a", make_route("a"))
        assert repr(collection) == "RouteCollection(['a'])"


class TestPathMatch:
    def test_empty_is_falsy(self) -> None:
        assert not PathMatch(RouteCollection())

    def test_with_routes_is_truthy(self) -> None:
        collection = RouteCollection()
        collection.add("a", make_route("a"))
        assert PathMatch(collection, "en")
