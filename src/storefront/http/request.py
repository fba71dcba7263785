"""HTTP request.

Frozen metadata plus a mutable ``attributes`` dict. Path resolution
writes negotiated values (such as ``_locale``) into the attributes;
everything received from the client stays fixed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl


@dataclass(frozen=True, slots=True)
class Request:
    """An HTTP request.

    ``attributes`` holds values resolved while handling the request
    (the dict contents are mutable even though the field reference is
    frozen). The locale lives under the ``_locale`` key.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=dict)
    query: Mapping[str, str] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict, compare=False)

    # -- Locale --

    @property
    def locale(self) -> str | None:
        """The locale negotiated for this request, if any."""
        return self.attributes.get("_locale")

    def set_locale(self, locale: str) -> None:
        """Record the negotiated locale on this request."""
        self.attributes["_locale"] = locale

    @property
    def is_json(self) -> bool:
        """True when the client asked for JSON via the Accept header."""
        return "application/json" in self.headers.get("accept", "")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        query_string = scope.get("query_string", b"").decode("latin-1")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=MappingProxyType(headers),
            query=MappingProxyType(dict(parse_qsl(query_string))),
        )
