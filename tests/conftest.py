"""Shared test fixtures — a priced location tree, a seeded store and service."""

from __future__ import annotations

from typing import Any

import pytest

from parking_pricing.config import DiscountConfiguration, EngineSettings, PricingConfig
from parking_pricing.models import PricingHierarchy
from parking_pricing.service import PricingService
from parking_pricing.storage import InMemoryPricingStore, build_hierarchy, seed_store


@pytest.fixture
def location_payload() -> dict[str, Any]:
    """Downtown Garage.

    loc-1 (own: 60/h)
      sec-a (own: 80/h, motorcycle 30/h, Monday 07:00-09:00 ×1.2)
        zone-a1
          spot-a1-1 (own: 100/h, occupied)
          spot-a1-2 (available)
        zone-a2
          spot-a2-1 (reserved)
      sec-b
        zone-b1
          spot-b1-1 (available)
    """
    return {
        "id": "loc-1",
        "name": "Downtown Garage",
        "pricing_config": {"base_rate": 60, "vat_rate": 12},
        "sections": [
            {
                "id": "sec-a",
                "name": "Section A",
                "pricing_config": {
                    "base_rate": 80,
                    "vat_rate": 12,
                    "vehicle_type_rates": [{"vehicle_type": "motorcycle", "rate": 30}],
                    "time_based_rates": [
                        {"name": "Weekday rush", "day_of_week": 1,
                         "start_time": "07:00", "end_time": "09:00", "multiplier": 1.2},
                    ],
                },
                "zones": [
                    {
                        "id": "zone-a1",
                        "name": "Zone A1",
                        "spots": [
                            {"id": "spot-a1-1", "number": "A1-01", "status": "occupied",
                             "pricing_config": {"base_rate": 100, "vat_rate": 12}},
                            {"id": "spot-a1-2", "number": "A1-02", "status": "available"},
                        ],
                    },
                    {
                        "id": "zone-a2",
                        "name": "Zone A2",
                        "spots": [{"id": "spot-a2-1", "number": "A2-01", "status": "reserved"}],
                    },
                ],
            },
            {
                "id": "sec-b",
                "name": "Section B",
                "zones": [
                    {
                        "id": "zone-b1",
                        "name": "Zone B1",
                        "spots": [{"id": "spot-b1-1", "number": "B1-01", "status": "available"}],
                    },
                ],
            },
        ],
    }


@pytest.fixture
def unpriced_payload() -> dict[str, Any]:
    """A location where nothing owns a config."""
    return {
        "id": "loc-2",
        "name": "Riverside Lot",
        "sections": [
            {"id": "sec-r", "name": "Open Air",
             "zones": [{"id": "zone-r1", "name": "R1",
                        "spots": [{"id": "spot-r1-1", "number": "R-1", "status": "available"}]}]},
        ],
    }


@pytest.fixture
def hierarchy(location_payload: dict[str, Any]) -> PricingHierarchy:
    return build_hierarchy(location_payload)


@pytest.fixture
def discount_seed() -> list[dict[str, Any]]:
    return [
        {"id": "senior", "name": "Senior Citizen Discount", "type": "senior",
         "percentage": 20, "is_vat_exempt": True},
        {"id": "promo10", "name": "Ten percent promo", "type": "custom", "operator_id": "op-1",
         "percentage": 10, "conditions": {"min_amount": 50}},
        {"id": "staff", "name": "Staff", "type": "custom", "operator_id": "op-2", "percentage": 20},
        {"id": "expired", "name": "Old promo", "type": "custom",
         "percentage": 50, "is_active": False},
    ]


@pytest.fixture
def store(location_payload, unpriced_payload, discount_seed) -> InMemoryPricingStore:
    return seed_store({"locations": [location_payload, unpriced_payload], "discounts": discount_seed})


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(_env_file=None)


@pytest.fixture
def service(store: InMemoryPricingStore, settings: EngineSettings) -> PricingService:
    return PricingService(store, settings)


@pytest.fixture
def flat_config() -> PricingConfig:
    """50/h, 12% VAT, no rules."""
    return PricingConfig(base_rate=50, vat_rate=12)


@pytest.fixture
def discounts() -> dict[str, DiscountConfiguration]:
    items = [
        DiscountConfiguration(id="senior", name="Senior", type="senior", percentage=20, is_vat_exempt=True),
        DiscountConfiguration(id="pwd", name="PWD", type="pwd", percentage=20, is_vat_exempt=True),
        DiscountConfiguration(id="promo20", name="Promo", percentage=20),
        DiscountConfiguration(id="promo70", name="Big promo", percentage=70),
        DiscountConfiguration(id="inactive", name="Off", percentage=30, is_active=False),
        DiscountConfiguration(id="min100", name="Spend 100", percentage=10, conditions={"min_amount": 100}),
        DiscountConfiguration(id="once", name="First booking", percentage=15, conditions={"max_usage": 1}),
        DiscountConfiguration(id="moto", name="Moto only", percentage=5,
                              conditions={"vehicle_types": ["motorcycle"]}),
    ]
    return {d.id: d for d in items}

