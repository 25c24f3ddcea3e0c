"""Range and consistency checks run before any write and before pricing.

Pydantic enforces field ranges on construction; these checks repeat them so
that configs built with ``model_construct`` or mutated in place are caught
too, and add the cross-field rules (unique vehicle types).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from parking_pricing.config.pricing import MULTIPLIER_MAX, MULTIPLIER_MIN, PricingConfig, time_to_minutes
from parking_pricing.errors import ConflictError, ValidationError

M = TypeVar("M", bound=BaseModel)


def parse_input(model_cls: type[M], data: M | Mapping[str, Any]) -> M:
    """Validate raw input into ``model_cls``, raising the engine's ValidationError."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(f"invalid {model_cls.__name__}: {details}") from exc


def check_multiplier(name: str, value: float) -> None:
    if not MULTIPLIER_MIN <= value <= MULTIPLIER_MAX:
        raise ValidationError(
            f"multiplier '{name}' = {value} outside [{MULTIPLIER_MIN}, {MULTIPLIER_MAX}]"
        )


def validate_pricing_config(config: PricingConfig) -> PricingConfig:
    """Raise ValidationError / ConflictError if ``config`` cannot be used."""
    if config.base_rate < 0:
        raise ValidationError(f"base rate must be >= 0, got {config.base_rate}")
    if not 0 <= config.vat_rate <= 100:
        raise ValidationError(f"VAT rate must be within [0, 100], got {config.vat_rate}")
    check_multiplier("occupancy_multiplier", config.occupancy_multiplier)

    seen: set[str] = set()
    for vtr in config.vehicle_type_rates:
        if vtr.vehicle_type in seen:
            raise ConflictError(f"duplicate rate for vehicle type '{vtr.vehicle_type}'")
        seen.add(vtr.vehicle_type)
        if vtr.rate < 0:
            raise ValidationError(f"rate for '{vtr.vehicle_type}' must be >= 0, got {vtr.rate}")

    for tbr in config.time_based_rates:
        check_multiplier(tbr.name or "time_based_rate", tbr.multiplier)
        if time_to_minutes(tbr.start_time) >= time_to_minutes(tbr.end_time):
            raise ValidationError(
                f"time window '{tbr.name}' must start before it ends "
                f"({tbr.start_time} >= {tbr.end_time})"
            )

    for hr in config.holiday_rates:
        check_multiplier(hr.name, hr.multiplier)

    return config


def parse_pricing_config(data: PricingConfig | Mapping[str, Any]) -> PricingConfig:
    return validate_pricing_config(parse_input(PricingConfig, data))
