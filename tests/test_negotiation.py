"""Tests for storefront.server.negotiation — view return value dispatch."""

import json

import pytest

from storefront.errors import ConfigurationError
from storefront.http.response import Response
from storefront.models import Product
from storefront.server.negotiation import negotiate


class TestNegotiate:
    def test_response_passthrough(self) -> None:
        original = Response(body="hello", status=201)
        assert negotiate(original) is original

    def test_str_is_html(self) -> None:
        result = negotiate("<h1>Mug</h1>")
        assert result.status == 200
        assert result.content_type.startswith("text/html")
        assert result.text == "<h1>Mug</h1>"

    def test_bytes(self) -> None:
        result = negotiate(b"\x00\x01")
        assert result.content_type == "application/octet-stream"
        assert result.body_bytes == b"\x00\x01"

    def test_dict_is_json(self) -> None:
        result = negotiate({"slug": "red-mug"})
        assert result.content_type == "application/json"
        assert json.loads(result.text) == {"slug": "red-mug"}

    def test_dataclasses_serialize_as_dicts(self) -> None:
        result = negotiate([Product(1, "MUG", "Red mug", "red-mug")])
        assert json.loads(result.text) == [
            {"id": 1, "code": "MUG", "name": "Red mug", "slug": "red-mug"}
        ]

    def test_tuple_overrides_status(self) -> None:
        result = negotiate(({"errors": {}}, 422))
        assert result.status == 422
        assert result.content_type == "application/json"

    def test_unsupported_type(self) -> None:
        with pytest.raises(ConfigurationError, match="View returned int"):
            negotiate(42)


class TestResponse:
    def test_with_chain_is_immutable(self) -> None:
        base = Response("x")
        changed = base.with_status(201).with_header("X-Slug", "red-mug")
        assert base.status == 200
        assert base.headers == ()
        assert changed.status == 201
        assert changed.header("x-slug") == "red-mug"

    def test_with_headers_and_content_type(self) -> None:
        response = Response("x").with_headers({"A": "1"}).with_content_type("text/plain")
        assert response.header("a") == "1"
        assert response.content_type == "text/plain"
        assert response.header("missing") is None
