"""Storage — persistence collaborator for hierarchies and discounts."""

from parking_pricing.storage.base import PricingStore
from parking_pricing.storage.memory import InMemoryPricingStore
from parking_pricing.storage.payload import build_hierarchy, hierarchy_to_payload
from parking_pricing.storage.seed import load_store_from_yaml, seed_store

__all__ = [
    "PricingStore",
    "InMemoryPricingStore",
    "build_hierarchy",
    "hierarchy_to_payload",
    "seed_store",
    "load_store_from_yaml",
]
