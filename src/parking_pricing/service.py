"""Pricing service — the single engine handle injected into boundary layers.

Reads take a snapshot of one location's tree from the store and resolve
against it.  Writes validate first and then commit through
``store.update_hierarchy`` so each write is applied atomically per location.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from parking_pricing.config.discount import DiscountConfiguration, DiscountCreate, DiscountUpdate
from parking_pricing.config.pricing import PricingConfig, PricingOverrides
from parking_pricing.config.settings import EngineSettings, get_settings
from parking_pricing.engine import analytics, calculator, resolver
from parking_pricing.engine.occupancy import occupancy_ratio
from parking_pricing.engine.quote import quote as quote_stay
from parking_pricing.engine.validation import parse_input, parse_pricing_config
from parking_pricing.models.hierarchy import HierarchyLevel, PricingHierarchy
from parking_pricing.models.results import (
    BookingContext,
    BookingRecord,
    EffectivePricingNode,
    PricedResult,
    PriceQuote,
    PricingInheritanceResult,
    PricingPerformance,
)
from parking_pricing.storage.base import PricingStore

logger = logging.getLogger(__name__)


class PricingService:
    def __init__(self, store: PricingStore, settings: EngineSettings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    # ── Hierarchy reads ───────────────────────────────────────────────

    def load_hierarchy(self, location_id: str) -> PricingHierarchy:
        return self.store.load_hierarchy(location_id)

    def get_pricing_hierarchy(self, location_id: str) -> EffectivePricingNode:
        """The location tree with every node's effective pricing populated."""
        return resolver.annotate_effective_pricing(
            self.store.load_hierarchy(location_id), self.settings.default_pricing(),
        )

    def _snapshot_for(self, node_id: str) -> PricingHierarchy:
        return self.store.load_hierarchy(self.store.location_of(node_id))

    def resolve(self, node_id: str, level: HierarchyLevel | str | None = None) -> PricingInheritanceResult:
        return resolver.resolve(
            self._snapshot_for(node_id), node_id, self.settings.default_pricing(), level,
        )

    def get_pricing(self, level: HierarchyLevel | str, node_id: str) -> PricingConfig | None:
        """The node's own config, or None if it inherits."""
        return self._snapshot_for(node_id).get(node_id, level).pricing

    def location_occupancy(self, location_id: str) -> float:
        return occupancy_ratio(self.store.load_hierarchy(location_id).spot_statuses())

    # ── Pricing ───────────────────────────────────────────────────────

    def _with_occupancy(self, hierarchy: PricingHierarchy, context: BookingContext) -> BookingContext:
        if context.current_occupancy_ratio is not None:
            return context
        ratio = occupancy_ratio(hierarchy.spot_statuses())
        return context.model_copy(update={"current_occupancy_ratio": ratio})

    def price(self, node_id: str, context: BookingContext) -> PricedResult:
        """Hourly price at ``node_id``.

        When the context carries no occupancy ratio, the occupied share of
        the node's whole location is used.
        """
        hierarchy = self._snapshot_for(node_id)
        inheritance = resolver.resolve(hierarchy, node_id, self.settings.default_pricing())
        return calculator.price(
            inheritance.effective_pricing,
            self._with_occupancy(hierarchy, context),
            self.store.discount_catalogue(),
            self.settings.tzinfo,
            self.settings.money_decimals,
        )

    def quote(self, node_id: str, context: BookingContext, end: dt.datetime) -> PriceQuote:
        hierarchy = self._snapshot_for(node_id)
        inheritance = resolver.resolve(hierarchy, node_id, self.settings.default_pricing())
        return quote_stay(
            inheritance.effective_pricing,
            self._with_occupancy(hierarchy, context),
            end,
            self.store.discount_catalogue(),
            self.settings.tzinfo,
            self.settings.money_decimals,
        )

    def explain(self, node_id: str, context: BookingContext) -> tuple[PricingInheritanceResult, PricedResult]:
        return self.resolve(node_id), self.price(node_id, context)

    # ── Pricing writes ────────────────────────────────────────────────

    def create_or_update(
        self,
        level: HierarchyLevel | str,
        node_id: str,
        config: PricingConfig | Mapping[str, Any],
    ) -> None:
        """Replace the node's own config wholesale; validated before anything is written."""
        parsed = parse_pricing_config(config)

        def _write(h: PricingHierarchy) -> None:
            h.get(node_id, level)
            resolver.set_pricing(h, node_id, parsed)

        self.store.update_hierarchy(self.store.location_of(node_id), _write)
        logger.info("Updated pricing for %s %s", HierarchyLevel.parse(level).value, node_id)
        self._log_recalculation(level, node_id)

    def override_inherited(
        self,
        level: HierarchyLevel | str,
        node_id: str,
        overrides: PricingOverrides | Mapping[str, Any],
    ) -> PricingConfig:
        """Give the node its own config: its current effective pricing with ``overrides`` applied."""
        parsed = parse_input(PricingOverrides, overrides)
        default = self.settings.default_pricing()

        def _write(h: PricingHierarchy) -> PricingConfig:
            current = resolver.resolve(h, node_id, default, level).effective_pricing
            config = resolver.inherit_pricing(current, parsed)
            resolver.set_pricing(h, node_id, config)
            return config

        config = self.store.update_hierarchy(self.store.location_of(node_id), _write)
        logger.info("Overrode inherited pricing for %s %s", HierarchyLevel.parse(level).value, node_id)
        self._log_recalculation(level, node_id)
        return config

    def delete(self, level: HierarchyLevel | str, node_id: str) -> None:
        """Remove the node's own config; it falls back to inherited or default pricing."""

        def _write(h: PricingHierarchy) -> bool:
            h.get(node_id, level)
            return resolver.remove_pricing(h, node_id)

        removed = self.store.update_hierarchy(self.store.location_of(node_id), _write)
        if removed:
            logger.info("Removed pricing for %s %s", HierarchyLevel.parse(level).value, node_id)
            self._log_recalculation(level, node_id)

    def copy_to_children(
        self,
        level: HierarchyLevel | str,
        node_id: str,
        recursive: bool = False,
        override_existing: bool = False,
    ) -> list[str]:
        default = self.settings.default_pricing()

        def _write(h: PricingHierarchy) -> list[str]:
            h.get(node_id, level)
            return resolver.copy_to_children(h, node_id, recursive, override_existing, default)

        updated = self.store.update_hierarchy(self.store.location_of(node_id), _write)
        logger.info("Copied pricing from %s %s to %d node(s)",
                    HierarchyLevel.parse(level).value, node_id, len(updated))
        return updated

    def _log_recalculation(self, level: HierarchyLevel | str, node_id: str) -> None:
        hierarchy = self._snapshot_for(node_id)
        affected = sum(1 for _ in hierarchy.walk(node_id)) - 1
        logger.info("Effective pricing changes for %s %s and %d descendant(s)",
                    HierarchyLevel.parse(level).value, node_id, affected)

    # ── Discounts ─────────────────────────────────────────────────────

    def list_discount_configurations(self, operator_id: str | None = None) -> list[DiscountConfiguration]:
        """Active discounts of ``operator_id`` plus platform-wide ones (only the latter if no operator)."""
        return [
            d for d in self.store.list_discounts()
            if d.is_active and (d.operator_id is None or d.operator_id == operator_id)
        ]

    def create_discount_configuration(
        self,
        data: DiscountCreate | Mapping[str, Any],
        created_by: str,
    ) -> DiscountConfiguration:
        discount = self.store.add_discount(parse_input(DiscountCreate, data), created_by)
        logger.info("Created discount %s (%s, %.2f%%) by %s",
                    discount.id, discount.type, discount.percentage, created_by)
        return discount

    def update_discount_configuration(
        self,
        discount_id: str,
        updates: DiscountUpdate | Mapping[str, Any],
    ) -> DiscountConfiguration:
        parsed = parse_input(DiscountUpdate, updates)
        current = self.store.get_discount(discount_id)
        merged = current.model_dump()
        merged.update(parsed.model_dump(exclude_unset=True, exclude_none=True))
        updated = parse_input(DiscountConfiguration, merged)
        self.store.save_discount(updated)
        logger.info("Updated discount %s", discount_id)
        return updated

    def delete_discount_configuration(self, discount_id: str) -> None:
        """Soft delete: the discount is deactivated so past references still resolve."""
        current = self.store.get_discount(discount_id)
        self.store.save_discount(current.model_copy(update={"is_active": False}))
        logger.info("Deactivated discount %s", discount_id)

    # ── Analytics ─────────────────────────────────────────────────────

    def analyze_performance(
        self,
        location_id: str,
        bookings: Sequence[BookingRecord | Mapping[str, Any]],
        occupancy: float | None = None,
    ) -> PricingPerformance:
        records = [parse_input(BookingRecord, b) for b in bookings]
        ratio = occupancy if occupancy is not None else self.location_occupancy(location_id)
        return analytics.analyze_pricing_performance(records, ratio)
