"""Validation result — immutable container for cleaned data or errors."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating form data against a set of rules.

    Falsy when invalid, so you can write::

        result = validate(form, rules)
        if not result:
            return {"errors": result.errors}, 422

    ``errors`` maps field names to lists of error messages::

        {"amount": ["This field is required"]}
    """

    data: dict[str, str]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid
