"""Call sync or async callables uniformly.

Views, error handlers, lifecycle hooks and repository factories can all
be ``def`` or ``async def``; this is the one place that checks.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
