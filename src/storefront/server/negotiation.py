"""Content negotiation — maps view return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from storefront.errors import ConfigurationError
from storefront.http.response import Response


def _json_default(value: Any) -> Any:
    # Frozen dataclass entities serialize as their field dict
    import dataclasses

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def json_response(value: Any, status: int = 200) -> Response:
    body = json_module.dumps(value, default=_json_default)
    return Response(body=body, status=status, content_type="application/json")


def negotiate(value: Any) -> Response:
    """Convert a view's return value to a Response.

    Dispatch order:

    1. ``Response``          -> pass through
    2. ``str``               -> 200, text/html
    3. ``bytes``             -> 200, application/octet-stream
    4. ``dict`` / ``list``   -> 200, application/json
    5. ``(value, int)``      -> negotiate value, override status
    """
    match value:
        case Response():
            return value
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return json_response(value)
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case _:
            msg = (
                f"View returned {type(value).__name__}; expected Response, str, "
                "bytes, dict, list or a (value, status) tuple."
            )
            raise ConfigurationError(msg)
