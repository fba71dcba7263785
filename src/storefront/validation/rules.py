"""Built-in validation rules for storefront forms.

Each validator is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

Any callable matching ``(str) -> str | None`` works with ``validate()``;
form modules define their own (see ``storefront.promotion.forms.money``).
"""

from collections.abc import Callable

type Validator = Callable[[str], str | None]


def required(value: str) -> str | None:
    """Field must be present and non-empty."""
    if not value or not value.strip():
        return "This field is required"
    return None
