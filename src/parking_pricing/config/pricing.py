"""Pricing configuration — the bundle of rate rules owned by one hierarchy node.

Field names are snake_case; the camelCase spelling used by stored payloads
(``baseRate``, ``vehicleTypeRates`` …) is accepted as an alias.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

VehicleType = Literal["car", "motorcycle", "truck", "van", "bus", "suv"]

MULTIPLIER_MIN = 0.1
MULTIPLIER_MAX = 5.0

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_TIME_PATTERN = r"^(?:(?:[01]\d|2[0-3]):[0-5]\d|24:00)$"

# camelCase accepted on input; output stays snake_case
_CAMEL_INPUT = AliasGenerator(validation_alias=to_camel)


def time_to_minutes(value: str) -> int:
    """``"HH:MM"`` → minutes after midnight."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class _RateModel(BaseModel):
    model_config = ConfigDict(alias_generator=_CAMEL_INPUT, populate_by_name=True)


class VehicleTypeRate(_RateModel):
    """Hourly rate that replaces the base rate for one vehicle type."""

    vehicle_type: VehicleType = Field(description="Vehicle type this rate applies to")
    rate: float = Field(ge=0, description="Hourly rate (PHP/hour)")


class TimeBasedRate(_RateModel):
    """Multiplier for a weekday time window, half-open ``[start_time, end_time)``."""

    name: str = Field(default="", description="Human label, e.g. 'Weekday rush'")
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday … 6 = Saturday")
    start_time: str = Field(pattern=_TIME_PATTERN, description="Local start time 'HH:MM'")
    end_time: str = Field(
        pattern=_TIME_PATTERN,
        description="Local end time 'HH:MM' (exclusive). '24:00' reaches midnight. "
                    "Windows never wrap past midnight.",
    )
    multiplier: float = Field(ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX)

    @model_validator(mode="after")
    def _check_window(self) -> TimeBasedRate:
        if self.start_minutes >= self.end_minutes:
            raise ValueError(
                f"time window '{self.name}' must start before it ends "
                f"({self.start_time} >= {self.end_time})"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end_time)

    @property
    def window_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    @property
    def label(self) -> str:
        return self.name or f"{self.day_name} {self.start_time}-{self.end_time}"

    def contains(self, day_of_week: int, minute_of_day: int) -> bool:
        return (
            day_of_week == self.day_of_week
            and self.start_minutes <= minute_of_day < self.end_minutes
        )


class HolidayRate(_RateModel):
    """Multiplier for a calendar date.

    Recurring holidays match month + day every year; one-off holidays match
    the exact date only.
    """

    name: str
    date: dt.date
    multiplier: float = Field(ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX)
    is_recurring: bool = False

    def applies_to(self, day: dt.date) -> bool:
        if self.is_recurring:
            return (day.month, day.day) == (self.date.month, self.date.day)
        return day == self.date


class PricingConfig(_RateModel):
    """Every rate rule attached to one Location, Section, Zone or Spot."""

    base_rate: float = Field(ge=0, description="Hourly base rate (PHP/hour)")
    vat_rate: float = Field(default=12.0, ge=0, le=100, description="VAT percentage")
    occupancy_multiplier: float = Field(
        default=1.0, ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX,
        description="Static demand knob applied on top of the dynamic occupancy band",
    )
    vehicle_type_rates: list[VehicleTypeRate] = Field(default_factory=list)
    time_based_rates: list[TimeBasedRate] = Field(default_factory=list)
    holiday_rates: list[HolidayRate] = Field(default_factory=list)

    def vehicle_rate(self, vehicle_type: str) -> VehicleTypeRate | None:
        for vtr in self.vehicle_type_rates:
            if vtr.vehicle_type == vehicle_type:
                return vtr
        return None


class PricingOverrides(_RateModel):
    """Partial config for a child; ``None`` fields are taken from the parent."""

    base_rate: float | None = Field(default=None, ge=0)
    vat_rate: float | None = Field(default=None, ge=0, le=100)
    occupancy_multiplier: float | None = Field(default=None, ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX)
    vehicle_type_rates: list[VehicleTypeRate] | None = None
    time_based_rates: list[TimeBasedRate] | None = None
    holiday_rates: list[HolidayRate] | None = None
