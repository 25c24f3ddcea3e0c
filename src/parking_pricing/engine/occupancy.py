"""Demand-based occupancy bands.

Maps the occupied share of a location to a price multiplier:

  ratio ≥ 0.90         → 1.50
  0.75 ≤ ratio < 0.90  → 1.25
  0.50 ≤ ratio < 0.75  → 1.10
  0.25 < ratio < 0.50  → 1.00
  ratio ≤ 0.25         → 0.90
"""

from __future__ import annotations

from collections.abc import Iterable

from parking_pricing.errors import ValidationError
from parking_pricing.models.hierarchy import SPOT_TAKEN_STATUSES

# (inclusive lower bound, multiplier, label), checked top-down
_SURGE_BANDS: tuple[tuple[float, float, str], ...] = (
    (0.90, 1.50, "occupancy >= 90%"),
    (0.75, 1.25, "occupancy 75-89%"),
    (0.50, 1.10, "occupancy 50-74%"),
)
_LOW_DEMAND_CEILING = 0.25
_LOW_DEMAND = (0.90, "occupancy <= 25%")
_NEUTRAL = (1.00, "occupancy 26-49%")


def occupancy_band(ratio: float) -> tuple[str, float]:
    """Return ``(label, multiplier)`` for an occupancy ratio in [0, 1]."""
    if not 0.0 <= ratio <= 1.0:
        raise ValidationError(f"occupancy ratio must be within [0, 1], got {ratio}")
    for lower, multiplier, label in _SURGE_BANDS:
        if ratio >= lower:
            return label, multiplier
    if ratio <= _LOW_DEMAND_CEILING:
        multiplier, label = _LOW_DEMAND
        return label, multiplier
    multiplier, label = _NEUTRAL
    return label, multiplier


def occupancy_multiplier(ratio: float) -> float:
    return occupancy_band(ratio)[1]


def occupancy_ratio(statuses: Iterable[str | None]) -> float:
    """Share of spots that are occupied or reserved; 0.0 when there are no spots."""
    statuses = list(statuses)
    if not statuses:
        return 0.0
    taken = sum(1 for s in statuses if s in SPOT_TAKEN_STATUSES)
    return taken / len(statuses)
