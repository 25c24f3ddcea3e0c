"""Result types — read models returned by the resolver, calculator and analytics.

None of these are persisted; they are recomputed on every query.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

from parking_pricing.config.pricing import PricingConfig, VehicleType
from parking_pricing.models.hierarchy import HierarchyLevel

RateSource = Literal["own", "inherited", "default"]


# ═══════════════════════════════════════════════════════════════════════════
# Inheritance
# ═══════════════════════════════════════════════════════════════════════════

class RateValue(BaseModel):
    """An amount together with where it came from."""

    amount: float
    source: RateSource


class PricingInheritanceResult(BaseModel):
    """Outcome of resolving one node's effective pricing."""

    level: HierarchyLevel
    id: str
    name: str
    effective_pricing: PricingConfig
    own_pricing: PricingConfig | None = None
    inherited_pricing: PricingConfig | None = None
    """The nearest ancestor's config, set only when ``source == "inherited"``."""
    inherited_from: str | None = None
    """Id of the ancestor that supplied ``inherited_pricing``."""
    source: RateSource

    @property
    def base_rate(self) -> RateValue:
        return RateValue(amount=self.effective_pricing.base_rate, source=self.source)

    @property
    def vat_rate(self) -> RateValue:
        return RateValue(amount=self.effective_pricing.vat_rate, source=self.source)

    def vehicle_type_rates(self) -> dict[str, RateValue]:
        return {
            vtr.vehicle_type: RateValue(amount=vtr.rate, source=self.source)
            for vtr in self.effective_pricing.vehicle_type_rates
        }


class EffectivePricingNode(BaseModel):
    """One node of the hierarchy tree annotated with its effective pricing."""

    id: str
    level: HierarchyLevel
    name: str
    source: RateSource
    own_pricing: PricingConfig | None = None
    effective_pricing: PricingConfig
    status: str | None = None
    children: list[EffectivePricingNode] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════
# Rate calculation
# ═══════════════════════════════════════════════════════════════════════════

class BookingContext(BaseModel):
    """Everything about a booking that affects its rate."""

    vehicle_type: VehicleType = "car"
    timestamp: dt.datetime
    current_occupancy_ratio: float | None = Field(
        default=None, ge=0, le=1,
        description="Occupied share of the location (0–1). None = no occupancy band.",
    )
    applied_discount_ids: list[str] = Field(default_factory=list)
    discount_usage: dict[str, int] = Field(
        default_factory=dict,
        description="Times the customer has already used each discount (for max_usage)",
    )


class AppliedMultiplier(BaseModel):
    """One adjustment in the order it was applied."""

    kind: Literal["time_of_day", "holiday", "occupancy_band", "occupancy_static"]
    name: str
    multiplier: float


class PricedResult(BaseModel):
    """Hourly price with the audit trail of every rule that fired."""

    base_rate: float
    """Starting hourly rate: the vehicle-type rate if one matched, else the base rate."""
    base_rate_source: Literal["vehicle_type", "base"]
    applied_multipliers: list[AppliedMultiplier] = Field(default_factory=list)
    subtotal: float
    """Rate after all multipliers, before discounts."""
    applied_discount_ids: list[str] = Field(default_factory=list)
    discount_amount: float = 0.0
    vat_exempt: bool = False
    vat_amount: float = 0.0
    total_amount: float


class PriceQuote(BaseModel):
    """Price for a whole stay: hourly rate × duration, then discounts and VAT."""

    hourly: PricedResult
    start: dt.datetime
    end: dt.datetime
    duration_hours: float
    subtotal: float
    applied_discount_ids: list[str] = Field(default_factory=list)
    discount_amount: float = 0.0
    vat_exempt: bool = False
    vat_amount: float = 0.0
    total_amount: float


# ═══════════════════════════════════════════════════════════════════════════
# Analytics
# ═══════════════════════════════════════════════════════════════════════════

class BookingRecord(BaseModel):
    """Completed booking as seen by analytics."""

    id: str | None = None
    total_amount: float = Field(ge=0)
    created_at: dt.datetime | None = None


class PriceBandStats(BaseModel):
    band: str
    lower: float
    upper: float | None
    demand: int
    revenue: float


class PricingPerformance(BaseModel):
    total_revenue: float
    total_bookings: int
    average_booking_value: float
    occupancy_ratio: float
    price_bands: list[PriceBandStats]
    price_elasticity: float
    optimal_price_band: str | None
    recommendations: list[str]
