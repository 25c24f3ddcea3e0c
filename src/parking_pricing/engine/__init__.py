"""Engine — pure inheritance resolution and rate computation."""

from parking_pricing.engine.occupancy import occupancy_band, occupancy_multiplier, occupancy_ratio
from parking_pricing.engine.validation import parse_input, parse_pricing_config, validate_pricing_config
from parking_pricing.engine.resolver import (
    annotate_effective_pricing,
    copy_to_children,
    inherit_pricing,
    remove_pricing,
    resolve,
    set_pricing,
)
from parking_pricing.engine.calculator import compute_hourly_rate, price
from parking_pricing.engine.quote import quote
from parking_pricing.engine.analytics import analyze_pricing_performance

__all__ = [
    "occupancy_band",
    "occupancy_multiplier",
    "occupancy_ratio",
    "parse_input",
    "parse_pricing_config",
    "validate_pricing_config",
    "resolve",
    "annotate_effective_pricing",
    "set_pricing",
    "remove_pricing",
    "copy_to_children",
    "inherit_pricing",
    "compute_hourly_rate",
    "price",
    "quote",
    "analyze_pricing_performance",
]
