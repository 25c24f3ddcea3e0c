"""In-memory pricing store.

Readers get a private copy of a location's hierarchy.  Writers mutate a
private copy and swap it in under the lock, so a reader never sees a
half-written config and a failed write leaves nothing behind.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
import uuid
from collections.abc import Callable
from typing import TypeVar

from parking_pricing.config.discount import DiscountConfiguration, DiscountCreate
from parking_pricing.errors import ConflictError, NotFoundError
from parking_pricing.models.hierarchy import HierarchyLevel, PricingHierarchy

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InMemoryPricingStore:
    """Locations, their pricing trees and the discount catalogue."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._locations: dict[str, PricingHierarchy] = {}
        self._node_locations: dict[str, str] = {}
        self._discounts: dict[str, DiscountConfiguration] = {}

    # ── Hierarchy ─────────────────────────────────────────────────────

    def add_location(self, hierarchy: PricingHierarchy) -> None:
        with self._lock:
            if hierarchy.location_id in self._locations:
                raise ConflictError(f"location {hierarchy.location_id} already stored")
            clashes = [n.id for n in hierarchy if n.id in self._node_locations]
            if clashes:
                raise ConflictError(f"node ids already stored under another location: {clashes}")
            self._locations[hierarchy.location_id] = hierarchy.copy()
            for node in hierarchy:
                self._node_locations[node.id] = hierarchy.location_id
        logger.info("Stored location %s (%d nodes)", hierarchy.location_id, len(hierarchy))

    def location_ids(self) -> list[str]:
        with self._lock:
            return list(self._locations)

    def location_of(self, node_id: str) -> str:
        with self._lock:
            location_id = self._node_locations.get(node_id)
        if location_id is None:
            raise NotFoundError(f"unknown hierarchy node {node_id}")
        return location_id

    def load_hierarchy(self, location_id: str) -> PricingHierarchy:
        with self._lock:
            hierarchy = self._locations.get(location_id)
            if hierarchy is None:
                raise NotFoundError(f"unknown location {location_id}")
            return hierarchy.copy()

    def update_hierarchy(self, location_id: str, mutate: Callable[[PricingHierarchy], T]) -> T:
        """Run ``mutate`` on a copy of the tree and commit it only if it returns normally."""
        with self._lock:
            working = self.load_hierarchy(location_id)
            result = mutate(working)
            self._locations[location_id] = working
            return result

    def set_spot_status(self, spot_id: str, status: str) -> None:
        def _set(h: PricingHierarchy) -> None:
            h.get(spot_id, HierarchyLevel.SPOT).status = status

        self.update_hierarchy(self.location_of(spot_id), _set)

    # ── Discounts ─────────────────────────────────────────────────────

    def list_discounts(self) -> list[DiscountConfiguration]:
        with self._lock:
            return [d.model_copy(deep=True) for d in self._discounts.values()]

    def discount_catalogue(self) -> dict[str, DiscountConfiguration]:
        with self._lock:
            return {k: d.model_copy(deep=True) for k, d in self._discounts.items()}

    def get_discount(self, discount_id: str) -> DiscountConfiguration:
        with self._lock:
            discount = self._discounts.get(discount_id)
        if discount is None:
            raise NotFoundError(f"unknown discount {discount_id}")
        return discount.model_copy(deep=True)

    def add_discount(self, data: DiscountCreate, created_by: str | None = None,
                     discount_id: str | None = None) -> DiscountConfiguration:
        discount = DiscountConfiguration(
            id=discount_id or str(uuid.uuid4()),
            created_by=created_by,
            created_at=dt.datetime.now(dt.timezone.utc),
            **data.model_dump(),
        )
        with self._lock:
            if discount.id in self._discounts:
                raise ConflictError(f"discount {discount.id} already exists")
            self._discounts[discount.id] = discount
        return discount.model_copy(deep=True)

    def save_discount(self, discount: DiscountConfiguration) -> None:
        with self._lock:
            if discount.id not in self._discounts:
                raise NotFoundError(f"unknown discount {discount.id}")
            self._discounts[discount.id] = discount.model_copy(deep=True)
