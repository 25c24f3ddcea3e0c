"""Hierarchy and result models — the contract between engine, service and API."""

from parking_pricing.models.hierarchy import HierarchyLevel, HierarchyNode, PricingHierarchy
from parking_pricing.models.results import (
    AppliedMultiplier,
    BookingContext,
    BookingRecord,
    EffectivePricingNode,
    PriceBandStats,
    PricedResult,
    PriceQuote,
    PricingInheritanceResult,
    PricingPerformance,
    RateSource,
    RateValue,
)

__all__ = [
    "HierarchyLevel",
    "HierarchyNode",
    "PricingHierarchy",
    "RateSource",
    "RateValue",
    "PricingInheritanceResult",
    "EffectivePricingNode",
    "BookingContext",
    "AppliedMultiplier",
    "PricedResult",
    "PriceQuote",
    "BookingRecord",
    "PriceBandStats",
    "PricingPerformance",
]
