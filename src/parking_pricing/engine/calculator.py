"""Rate calculator — effective config + booking context → chargeable amount.

Steps, in this order (each feeds the next):
  1. Base selection     vehicle-type rate if one matches, else base rate
  2. Time of day        × narrowest matching weekday window (ties: list order)
  3. Holiday            × matching holiday (exact dates before recurring ones)
  4. Occupancy          × dynamic occupancy band × node's static multiplier
  5. Discounts          − Σ percentage of the step-4 subtotal, clamped at 0
  6. VAT                0 if any applied discount is VAT-exempt, else rate × VAT%
  7. Total              post-discount rate + VAT

``price`` is pure: same config + context + discounts → same result.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from parking_pricing.config.discount import DiscountConfiguration
from parking_pricing.config.pricing import HolidayRate, PricingConfig, TimeBasedRate
from parking_pricing.engine.occupancy import occupancy_band
from parking_pricing.engine.validation import validate_pricing_config
from parking_pricing.errors import NotFoundError
from parking_pricing.models.results import AppliedMultiplier, BookingContext, PricedResult


def to_local(timestamp: dt.datetime, tz: dt.tzinfo | None = None) -> dt.datetime:
    """Aware timestamps are converted to ``tz``; naive ones are already local."""
    if tz is not None and timestamp.tzinfo is not None:
        return timestamp.astimezone(tz)
    return timestamp


def day_of_week(day: dt.date) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (day.weekday() + 1) % 7


def match_time_based_rate(rates: Sequence[TimeBasedRate], when: dt.datetime) -> TimeBasedRate | None:
    weekday = day_of_week(when.date())
    minute = when.hour * 60 + when.minute
    matches = [
        (rate.window_minutes, i, rate)
        for i, rate in enumerate(rates)
        if rate.contains(weekday, minute)
    ]
    if not matches:
        return None
    return min(matches, key=lambda m: (m[0], m[1]))[2]


def match_holiday_rate(rates: Sequence[HolidayRate], day: dt.date) -> HolidayRate | None:
    for rate in rates:
        if not rate.is_recurring and rate.applies_to(day):
            return rate
    for rate in rates:
        if rate.is_recurring and rate.applies_to(day):
            return rate
    return None


# ═══════════════════════════════════════════════════════════════════════════
# Steps 1–4: hourly rate
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class HourlyRate:
    base_rate: float
    base_rate_source: Literal["vehicle_type", "base"]
    multipliers: tuple[AppliedMultiplier, ...]
    rate: float


def compute_hourly_rate(
    config: PricingConfig,
    context: BookingContext,
    tz: dt.tzinfo | None = None,
) -> HourlyRate:
    validate_pricing_config(config)
    when = to_local(context.timestamp, tz)

    vehicle_rate = config.vehicle_rate(context.vehicle_type)
    if vehicle_rate is not None:
        base, base_source = vehicle_rate.rate, "vehicle_type"
    else:
        base, base_source = config.base_rate, "base"

    rate = base
    applied: list[AppliedMultiplier] = []

    time_rule = match_time_based_rate(config.time_based_rates, when)
    if time_rule is not None:
        rate *= time_rule.multiplier
        applied.append(AppliedMultiplier(kind="time_of_day", name=time_rule.label, multiplier=time_rule.multiplier))

    holiday = match_holiday_rate(config.holiday_rates, when.date())
    if holiday is not None:
        rate *= holiday.multiplier
        applied.append(AppliedMultiplier(kind="holiday", name=holiday.name, multiplier=holiday.multiplier))

    if context.current_occupancy_ratio is not None:
        label, band = occupancy_band(context.current_occupancy_ratio)
        rate *= band
        applied.append(AppliedMultiplier(kind="occupancy_band", name=label, multiplier=band))

    rate *= config.occupancy_multiplier
    applied.append(AppliedMultiplier(
        kind="occupancy_static", name="occupancy multiplier", multiplier=config.occupancy_multiplier,
    ))

    return HourlyRate(base, base_source, tuple(applied), rate)


# ═══════════════════════════════════════════════════════════════════════════
# Steps 5–7: discounts, VAT, total
# ═══════════════════════════════════════════════════════════════════════════

def conditions_met(discount: DiscountConfiguration, context: BookingContext, amount: float) -> bool:
    cond = discount.conditions
    if cond.min_amount is not None and amount < cond.min_amount:
        return False
    if cond.max_usage is not None and context.discount_usage.get(discount.id, 0) >= cond.max_usage:
        return False
    if cond.vehicle_types is not None and context.vehicle_type not in cond.vehicle_types:
        return False
    return True


def select_discounts(
    context: BookingContext,
    discounts: Mapping[str, DiscountConfiguration] | None,
    amount: float,
) -> list[DiscountConfiguration]:
    """Active discounts from the context whose conditions hold for ``amount``.

    Raises NotFoundError for an id with no configuration.
    """
    catalogue = discounts or {}
    selected: list[DiscountConfiguration] = []
    for discount_id in dict.fromkeys(context.applied_discount_ids):
        discount = catalogue.get(discount_id)
        if discount is None:
            raise NotFoundError(f"unknown discount {discount_id}")
        if discount.is_active and conditions_met(discount, context, amount):
            selected.append(discount)
    return selected


@dataclass(frozen=True)
class Settlement:
    subtotal: float
    discount_amount: float
    vat_exempt: bool
    vat_amount: float
    total_amount: float


def settle(
    amount: float,
    vat_rate: float,
    discounts: Sequence[DiscountConfiguration],
    money_decimals: int = 2,
) -> Settlement:
    """Apply discounts (additively, against ``amount``) and VAT.

    Every part is rounded before the next is derived from it, so
    ``subtotal - discount_amount + vat_amount == total_amount``.
    """
    subtotal = round(amount, money_decimals)
    discount_pct = sum(d.percentage for d in discounts)
    discount_amount = min(round(subtotal * discount_pct / 100, money_decimals), subtotal)
    net = max(round(subtotal - discount_amount, money_decimals), 0.0)
    vat_exempt = any(d.is_vat_exempt for d in discounts)
    vat_amount = 0.0 if vat_exempt else round(net * vat_rate / 100, money_decimals)
    total_amount = round(net + vat_amount, money_decimals)
    return Settlement(subtotal, discount_amount, vat_exempt, vat_amount, total_amount)


# ═══════════════════════════════════════════════════════════════════════════
# Public entry point
# ═══════════════════════════════════════════════════════════════════════════

def price(
    config: PricingConfig,
    context: BookingContext,
    discounts: Mapping[str, DiscountConfiguration] | None = None,
    tz: dt.tzinfo | None = None,
    money_decimals: int = 2,
) -> PricedResult:
    """Compute the hourly price for one booking context.

    Raises ValidationError for a negative base rate or a multiplier outside
    [0.1, 5.0], NotFoundError for an unknown discount id.
    """
    hourly = compute_hourly_rate(config, context, tz)
    applicable = select_discounts(context, discounts, hourly.rate)
    s = settle(hourly.rate, config.vat_rate, applicable, money_decimals)

    return PricedResult(
        base_rate=round(hourly.base_rate, money_decimals),
        base_rate_source=hourly.base_rate_source,
        applied_multipliers=list(hourly.multipliers),
        subtotal=s.subtotal,
        applied_discount_ids=[d.id for d in applicable],
        discount_amount=s.discount_amount,
        vat_exempt=s.vat_exempt,
        vat_amount=s.vat_amount,
        total_amount=s.total_amount,
    )
