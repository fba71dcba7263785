"""Promotion actions and their configuration forms."""

from storefront.promotion.forms import (
    ChannelBasedResult,
    ChannelBasedUnitFixedDiscountConfigurationType,
    UnitFixedDiscountConfiguration,
    UnitFixedDiscountConfigurationType,
)

__all__ = [
    "ChannelBasedResult",
    "ChannelBasedUnitFixedDiscountConfigurationType",
    "UnitFixedDiscountConfiguration",
    "UnitFixedDiscountConfigurationType",
]
