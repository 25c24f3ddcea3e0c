"""Engine settings loaded from the environment (prefix ``PARKING_PRICING_``)."""

from __future__ import annotations

import logging
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from parking_pricing.config.pricing import MULTIPLIER_MAX, MULTIPLIER_MIN, PricingConfig


class EngineSettings(BaseSettings):
    """System-wide defaults and process settings."""

    model_config = SettingsConfigDict(env_prefix="PARKING_PRICING_", env_file=".env", extra="ignore")

    # --- System default pricing (used when no ancestor owns a config) ---
    default_base_rate: float = Field(default=50.0, ge=0, description="PHP per hour")
    default_vat_rate: float = Field(default=12.0, ge=0, le=100)
    default_occupancy_multiplier: float = Field(default=1.0, ge=MULTIPLIER_MIN, le=MULTIPLIER_MAX)

    # --- Presentation / locale ---
    currency: str = "PHP"
    timezone: str = Field(
        default="Asia/Manila",
        description="Aware booking timestamps are converted to this zone before "
                    "weekday, time-of-day and holiday matching.",
    )
    money_decimals: int = Field(default=2, ge=0, le=6)

    # --- Process ---
    seed_file: str | None = Field(default=None, description="YAML file used to seed the in-memory store")
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def default_pricing(self) -> PricingConfig:
        return PricingConfig(
            base_rate=self.default_base_rate,
            vat_rate=self.default_vat_rate,
            occupancy_multiplier=self.default_occupancy_multiplier,
        )


@lru_cache()
def get_settings() -> EngineSettings:
    """Get cached settings instance."""
    return EngineSettings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
