"""HTTP primitives: ``Request`` and ``Response``."""

from storefront.http.request import Request
from storefront.http.response import Response

__all__ = ["Request", "Response"]
