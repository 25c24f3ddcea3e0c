"""Persistence collaborator contract used by ``PricingService``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, TypeVar

from parking_pricing.config.discount import DiscountConfiguration, DiscountCreate
from parking_pricing.models.hierarchy import PricingHierarchy

T = TypeVar("T")


class PricingStore(Protocol):
    """Hierarchy snapshots plus the discount catalogue.

    ``update_hierarchy`` must be all-or-nothing: if ``mutate`` raises, no
    change is visible to other readers.
    """

    def location_ids(self) -> list[str]: ...

    def location_of(self, node_id: str) -> str: ...

    def load_hierarchy(self, location_id: str) -> PricingHierarchy: ...

    def update_hierarchy(self, location_id: str, mutate: Callable[[PricingHierarchy], T]) -> T: ...

    def list_discounts(self) -> list[DiscountConfiguration]: ...

    def discount_catalogue(self) -> dict[str, DiscountConfiguration]: ...

    def get_discount(self, discount_id: str) -> DiscountConfiguration: ...

    def add_discount(self, data: DiscountCreate, created_by: str | None = None,
                     discount_id: str | None = None) -> DiscountConfiguration: ...

    def save_discount(self, discount: DiscountConfiguration) -> None: ...
