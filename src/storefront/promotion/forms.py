"""Promotion action configuration forms.

``UnitFixedDiscountConfigurationType`` edits a fixed amount taken off
every unit, in one currency. ``ChannelBasedUnitFixedDiscountConfigurationType``
repeats it once per sales channel, labelled with the channel name and
priced in the channel's base currency.

Amounts are entered as decimals (``"12.50"``) and stored in minor units
(``1250``). Channel forms post flat field names::

    WEB_US[amount]=12.50&WEB_EU[amount]=10

Usage::

    form = ChannelBasedUnitFixedDiscountConfigurationType(channels)
    result = form.bind({"WEB_US[amount]": "12.50", "WEB_EU[amount]": "10"})
    if not result:
        return {"errors": result.errors}, 422
    action.configuration = result.configuration
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

from storefront.models import Channel
from storefront.validation import Validator, required, validate

_AMOUNT_RE = re.compile(r"^\d+(?:\.\d{1,2})?$")
_FIELD_RE = re.compile(r"^(?P<channel>[^\[\]]+)\[(?P<field>[^\[\]]+)\]$")


def money(value: str) -> str | None:
    """Non-negative amount with at most two decimal places."""
    if not _AMOUNT_RE.match(value):
        return "Must be a non-negative amount with at most 2 decimal places"
    return None


def to_minor_units(value: str) -> int:
    """``"12.5"`` -> ``1250``. Expects a value that passed ``money``."""
    try:
        return int(Decimal(value) * 100)
    except InvalidOperation as exc:
        msg = f"Invalid amount: {value!r}"
        raise ValueError(msg) from exc


def format_minor_units(amount: int) -> str:
    """``1250`` -> ``"12.50"``."""
    return f"{Decimal(amount) / 100:.2f}"


@dataclass(frozen=True, slots=True)
class UnitFixedDiscountConfiguration:
    amount: int
    currency: str

    def to_dict(self) -> dict[str, int]:
        return {"amount": self.amount}


@dataclass(frozen=True, slots=True)
class BoundEntry:
    """A bound single-currency form: a configuration or field errors."""

    configuration: UnitFixedDiscountConfiguration | None
    errors: dict[str, list[str]] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.configuration is not None


@dataclass(frozen=True, slots=True)
class UnitFixedDiscountConfigurationType:
    """Fixed amount off each unit, in one currency."""

    fields: ClassVar[dict[str, list[Validator]]] = {"amount": [required, money]}

    label: str = ""
    currency: str = "USD"

    def bind(self, data: Mapping[str, str]) -> BoundEntry:
        result = validate(data, self.fields)
        if not result:
            return BoundEntry(None, result.errors)
        amount = to_minor_units(result.data["amount"])
        return BoundEntry(UnitFixedDiscountConfiguration(amount=amount, currency=self.currency))


@dataclass(frozen=True, slots=True)
class ChannelBasedResult:
    """Per-channel outcome of binding a channel-based form.

    ``configurations`` holds the channels that validated; ``errors`` maps
    channel codes to their field errors. Falsy when any channel failed.
    """

    configurations: dict[str, UnitFixedDiscountConfiguration]
    errors: dict[str, dict[str, list[str]]]

    def __bool__(self) -> bool:
        return not self.errors

    @property
    def configuration(self) -> dict[str, dict[str, int]]:
        """The stored shape of the promotion action configuration."""
        return {code: conf.to_dict() for code, conf in self.configurations.items()}


class ChannelBasedUnitFixedDiscountConfigurationType:
    """One ``UnitFixedDiscountConfigurationType`` entry per channel, keyed by channel code."""

    entry_type: ClassVar[type[UnitFixedDiscountConfigurationType]] = (
        UnitFixedDiscountConfigurationType
    )

    __slots__ = ("_channels",)

    def __init__(self, channels: Iterable[Channel]) -> None:
        self._channels: dict[str, Channel] = {channel.code: channel for channel in channels}

    @staticmethod
    def entry_options(channel: Channel) -> dict[str, Any]:
        return {
            "label": channel.name,
            "currency": channel.base_currency.code,
        }

    @property
    def entries(self) -> dict[str, UnitFixedDiscountConfigurationType]:
        return {
            code: self.entry_type(**self.entry_options(channel))
            for code, channel in self._channels.items()
        }

    @property
    def field_names(self) -> list[str]:
        return [
            f"{code}[{name}]" for code in self._channels for name in self.entry_type.fields
        ]

    def bind(self, form: Mapping[str, str]) -> ChannelBasedResult:
        """Validate every channel entry from flat ``<code>[<field>]`` form data.

        Fields for unknown channels are ignored.
        """
        per_channel: dict[str, dict[str, str]] = {code: {} for code in self._channels}
        for key, value in form.items():
            match = _FIELD_RE.match(key)
            if match is not None and match["channel"] in per_channel:
                per_channel[match["channel"]][match["field"]] = value

        configurations: dict[str, UnitFixedDiscountConfiguration] = {}
        errors: dict[str, dict[str, list[str]]] = {}
        for code, entry in self.entries.items():
            bound = entry.bind(per_channel[code])
            if bound.configuration is not None:
                configurations[code] = bound.configuration
            else:
                errors[code] = bound.errors
        return ChannelBasedResult(configurations, errors)

    def initial(self, configuration: Mapping[str, Mapping[str, int]]) -> dict[str, str]:
        """Flat form values for an existing configuration, for re-editing."""
        values: dict[str, str] = {}
        for code, entry in configuration.items():
            if code in self._channels and "amount" in entry:
                values[f"{code}[amount]"] = format_minor_units(entry["amount"])
        return values
