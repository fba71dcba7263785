"""Form validation — composable rules, clean results.

Usage::

    from storefront.validation import validate, required

    result = validate(form, {"amount": [required, money]})
    if not result:
        ...  # result.errors == {"amount": ["This field is required"]}
"""

from collections.abc import Mapping

from storefront.validation.result import ValidationResult
from storefront.validation.rules import Validator, required

__all__ = [
    "ValidationResult",
    "Validator",
    "required",
    "validate",
]


def validate(
    data: Mapping[str, str],
    rules: Mapping[str, list[Validator]],
) -> ValidationResult:
    """Validate *data* against *rules*.

    Every rule of a field runs, except that a failed ``required`` stops
    the remaining checks for that field. Valid fields are copied into
    ``result.data``; invalid ones collect their messages in
    ``result.errors``.
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, str] = {}

    for field_name, validators in rules.items():
        value = (data.get(field_name) or "").strip()
        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is None:
                continue
            field_errors.append(error)
            if validator is required:
                break
        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
