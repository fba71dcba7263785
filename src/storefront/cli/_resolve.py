"""Kernel import resolution — resolves ``"module:attribute"`` strings to kernels.

Shared by ``storefront routes`` and ``storefront match``.
"""

import importlib

from storefront.kernel import Kernel


def resolve_kernel(import_string: str) -> Kernel:
    """Resolve an import string to a storefront Kernel instance.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"kernel"`` (``"shop"`` resolves to ``shop.kernel``).
    A callable that is not a Kernel is treated as a factory and called.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a Kernel.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "kernel"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, Kernel):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, Kernel):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a storefront.Kernel"
        raise TypeError(msg)

    return obj
