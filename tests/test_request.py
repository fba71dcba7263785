"""Tests for storefront.http.request and storefront.server.sender."""

from storefront.http.request import Request
from storefront.http.response import Response
from storefront.server.sender import send_response


class TestRequest:
    def test_from_asgi(self) -> None:
        scope = {
            "type": "http",
            "method": "GET",
            "path": "/fr/products/red-mug",
            "query_string": b"page=2&sort=name",
            "headers": [(b"Accept", b"application/json")],
        }
        request = Request.from_asgi(scope)
        assert request.method == "GET"
        assert request.path == "/fr/products/red-mug"
        assert request.headers["accept"] == "application/json"
        assert request.query == {"page": "2", "sort": "name"}
        assert request.is_json

    def test_locale_unset_by_default(self) -> None:
        assert Request("GET", "/").locale is None

    def test_set_locale(self) -> None:
        request = Request("GET", "/")
        request.set_locale("fr")
        assert request.locale == "fr"
        assert request.attributes == {"_locale": "fr"}

    def test_not_json_without_accept(self) -> None:
        assert not Request("GET", "/").is_json


class TestSendResponse:
    async def test_start_and_body(self) -> None:
        sent: list[dict] = []

        async def send(message):
            sent.append(message)

        await send_response(Response("héllo").with_header("X-Slug", "mug"), send)

        start, body = sent
        assert start["status"] == 200
        assert (b"x-slug", b"mug") in start["headers"]
        assert (b"content-length", b"6") in start["headers"]
        assert body["body"] == "héllo".encode()

    async def test_head_sends_empty_body(self) -> None:
        sent: list[dict] = []

        async def send(message):
            sent.append(message)

        await send_response(Response("hello"), send, head=True)
        assert sent[1]["body"] == b""
        assert (b"content-length", b"5") in sent[0]["headers"]

    async def test_no_body_for_204(self) -> None:
        sent: list[dict] = []

        async def send(message):
            sent.append(message)

        await send_response(Response("ignored", status=204), send)
        assert sent[1]["body"] == b""
