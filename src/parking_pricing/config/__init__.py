"""Configuration models — pricing rules, discounts and engine settings."""

from parking_pricing.config.pricing import (
    HolidayRate,
    PricingConfig,
    PricingOverrides,
    TimeBasedRate,
    VehicleType,
    VehicleTypeRate,
)
from parking_pricing.config.discount import (
    DiscountConditions,
    DiscountConfiguration,
    DiscountCreate,
    DiscountUpdate,
)
from parking_pricing.config.settings import EngineSettings, configure_logging, get_settings

__all__ = [
    "VehicleType",
    "VehicleTypeRate",
    "TimeBasedRate",
    "HolidayRate",
    "PricingConfig",
    "PricingOverrides",
    "DiscountConditions",
    "DiscountConfiguration",
    "DiscountCreate",
    "DiscountUpdate",
    "EngineSettings",
    "get_settings",
    "configure_logging",
]
