"""Seed an in-memory store from YAML.

Format::

    locations:
      - id: loc-1
        name: Downtown Garage
        pricing_config: {base_rate: 60, vat_rate: 12}
        sections: [...]
    discounts:
      - id: senior
        name: Senior Citizen Discount
        type: senior
        percentage: 20
        is_vat_exempt: true
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from parking_pricing.config.discount import DiscountCreate
from parking_pricing.engine.validation import parse_input
from parking_pricing.errors import ValidationError
from parking_pricing.storage.memory import InMemoryPricingStore
from parking_pricing.storage.payload import build_hierarchy


def seed_store(data: Mapping[str, Any], store: InMemoryPricingStore | None = None) -> InMemoryPricingStore:
    store = store if store is not None else InMemoryPricingStore()
    for location in data.get("locations") or []:
        store.add_location(build_hierarchy(location))
    for raw in data.get("discounts") or []:
        raw = dict(raw)
        discount_id = raw.pop("id", None)
        created_by = raw.pop("created_by", None)
        store.add_discount(parse_input(DiscountCreate, raw), created_by, discount_id)
    return store


def load_store_from_yaml(path: str | Path) -> InMemoryPricingStore:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, Mapping):
        raise ValidationError(f"{path}: expected a mapping with 'locations' and 'discounts'")
    return seed_store(data)
