"""Test utilities for storefront kernels.

::

    from storefront.testing import TestClient
"""

from storefront.testing.client import TestClient

__all__ = ["TestClient"]
