"""Pricing performance analytics over completed bookings.

Buckets bookings into fixed price bands, finds the band that earns the most,
estimates price elasticity between the cheapest and dearest populated bands,
and turns occupancy + elasticity into plain recommendations.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from parking_pricing.models.results import BookingRecord, PriceBandStats, PricingPerformance

# Upper edges of the 0-50, 50-100, 100-150, 150-200 bands; anything above is 200+
PRICE_BAND_EDGES = np.array([50.0, 100.0, 150.0, 200.0])
PRICE_BAND_LABELS = ("0-50", "50-100", "100-150", "150-200", "200+")
# Representative price per band for the elasticity estimate
PRICE_BAND_MIDPOINTS = np.array([25.0, 75.0, 125.0, 175.0, 225.0])

HIGH_OCCUPANCY = 0.80
LOW_OCCUPANCY = 0.50
ELASTIC_BELOW = -1.0
INELASTIC_ABOVE = -0.5


def _band_bounds(i: int) -> tuple[float, float | None]:
    lower = 0.0 if i == 0 else float(PRICE_BAND_EDGES[i - 1])
    upper = float(PRICE_BAND_EDGES[i]) if i < len(PRICE_BAND_EDGES) else None
    return lower, upper


def price_elasticity(demand: np.ndarray, populated: np.ndarray) -> float:
    """Midpoint arc elasticity between the cheapest and dearest populated bands.

    0.0 when fewer than two bands have bookings.
    """
    idx = np.flatnonzero(populated)
    if len(idx) < 2:
        return 0.0
    lo, hi = idx[0], idx[-1]
    p = PRICE_BAND_MIDPOINTS[[lo, hi]]
    q = demand[[lo, hi]].astype(float)
    price_change = (p[1] - p[0]) / p.mean()
    demand_change = (q[1] - q[0]) / q.mean()
    return float(demand_change / price_change)


def analyze_pricing_performance(
    bookings: Sequence[BookingRecord],
    occupancy_ratio: float,
) -> PricingPerformance:
    amounts = np.array([b.total_amount for b in bookings], dtype=float)
    n_bands = len(PRICE_BAND_LABELS)

    band_idx = np.digitize(amounts, PRICE_BAND_EDGES, right=False)
    demand = np.bincount(band_idx, minlength=n_bands)
    revenue = np.bincount(band_idx, weights=amounts, minlength=n_bands)
    populated = demand > 0

    bands: list[PriceBandStats] = []
    for i in np.flatnonzero(populated):
        lower, upper = _band_bounds(int(i))
        bands.append(PriceBandStats(
            band=PRICE_BAND_LABELS[i],
            lower=lower,
            upper=upper,
            demand=int(demand[i]),
            revenue=round(float(revenue[i]), 2),
        ))

    total_revenue = float(amounts.sum())
    total_bookings = len(amounts)
    elasticity = price_elasticity(demand, populated)
    optimal = PRICE_BAND_LABELS[int(np.argmax(revenue))] if total_bookings else None

    recommendations: list[str] = []
    if occupancy_ratio > HIGH_OCCUPANCY:
        recommendations.append("Consider increasing prices during peak hours due to high occupancy")
    elif occupancy_ratio < LOW_OCCUPANCY:
        recommendations.append("Consider promotional pricing to increase occupancy")
    if populated.sum() >= 2:
        if elasticity < ELASTIC_BELOW:
            recommendations.append(
                "Demand is elastic - small price decreases could significantly increase bookings"
            )
        elif elasticity > INELASTIC_ABOVE:
            recommendations.append(
                "Demand is inelastic - price increases may not significantly reduce bookings"
            )

    return PricingPerformance(
        total_revenue=round(total_revenue, 2),
        total_bookings=total_bookings,
        average_booking_value=round(total_revenue / total_bookings, 2) if total_bookings else 0.0,
        occupancy_ratio=occupancy_ratio,
        price_bands=bands,
        price_elasticity=round(elasticity, 4),
        optimal_price_band=optimal,
        recommendations=recommendations,
    )
