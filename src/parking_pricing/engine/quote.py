"""Booking quotes — price a whole stay rather than one hour.

The hourly rate is evaluated at the booking start (time-of-day and holiday
rules do not split across the stay), multiplied by the duration in hours,
then discounted and taxed as a single amount.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping

from parking_pricing.config.discount import DiscountConfiguration
from parking_pricing.config.pricing import PricingConfig
from parking_pricing.engine.calculator import compute_hourly_rate, price, select_discounts, settle
from parking_pricing.errors import ValidationError
from parking_pricing.models.results import BookingContext, PriceQuote


def quote(
    config: PricingConfig,
    context: BookingContext,
    end: dt.datetime,
    discounts: Mapping[str, DiscountConfiguration] | None = None,
    tz: dt.tzinfo | None = None,
    money_decimals: int = 2,
) -> PriceQuote:
    """Quote a stay from ``context.timestamp`` to ``end``."""
    start = context.timestamp
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise ValidationError("booking start and end must both be naive or both be timezone-aware")
    if end <= start:
        raise ValidationError(f"booking end {end.isoformat()} must be after start {start.isoformat()}")

    duration_hours = (end - start).total_seconds() / 3600
    hourly = compute_hourly_rate(config, context, tz)
    subtotal = hourly.rate * duration_hours
    applicable = select_discounts(context, discounts, subtotal)
    s = settle(subtotal, config.vat_rate, applicable, money_decimals)

    return PriceQuote(
        hourly=price(config, context, discounts, tz, money_decimals),
        start=start,
        end=end,
        duration_hours=round(duration_hours, 4),
        subtotal=s.subtotal,
        applied_discount_ids=[d.id for d in applicable],
        discount_amount=s.discount_amount,
        vat_exempt=s.vat_exempt,
        vat_amount=s.vat_amount,
        total_amount=s.total_amount,
    )
