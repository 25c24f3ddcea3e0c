"""Conversion between stored hierarchy payloads and ``PricingHierarchy``.

Payload shape (one location, as returned by the hierarchy query)::

    {"id": ..., "name": ..., "pricing_config": {...} | null,
     "sections": [{"id", "name", "pricing_config",
                   "zones": [{"id", "name", "pricing_config",
                              "spots": [{"id", "number", "status", "pricing_config"}]}]}]}

camelCase ``pricingConfig`` and ``parking_spots`` are accepted as well.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from parking_pricing.config.pricing import PricingConfig
from parking_pricing.engine.validation import parse_pricing_config
from parking_pricing.errors import ValidationError
from parking_pricing.models.hierarchy import HierarchyLevel, HierarchyNode, PricingHierarchy

_CHILD_KEYS: dict[HierarchyLevel, tuple[str, ...]] = {
    HierarchyLevel.LOCATION: ("sections",),
    HierarchyLevel.SECTION: ("zones",),
    HierarchyLevel.ZONE: ("spots", "parking_spots"),
    HierarchyLevel.SPOT: (),
}


def _pricing_of(data: Mapping[str, Any]) -> PricingConfig | None:
    raw = data.get("pricing_config", data.get("pricingConfig"))
    return parse_pricing_config(raw) if raw else None


def _node_of(data: Mapping[str, Any], level: HierarchyLevel) -> HierarchyNode:
    if not data.get("id"):
        raise ValidationError(f"{level.value} entry without an id: {dict(data)!r}")
    name = data.get("name")
    if name is None and level is HierarchyLevel.SPOT:
        name = data.get("number")
    return HierarchyNode(
        id=str(data["id"]),
        level=level,
        name=str(name) if name is not None else "",
        pricing=_pricing_of(data),
        status=data.get("status"),
    )


def _children_of(data: Mapping[str, Any], level: HierarchyLevel) -> list[Mapping[str, Any]]:
    for key in _CHILD_KEYS[level]:
        if data.get(key):
            return list(data[key])
    return []


def build_hierarchy(payload: Mapping[str, Any]) -> PricingHierarchy:
    """Build and validate a location tree from its stored payload."""
    hierarchy = PricingHierarchy(_node_of(payload, HierarchyLevel.LOCATION))

    def _attach(parent_id: str, data: Mapping[str, Any], level: HierarchyLevel) -> None:
        for child_data in _children_of(data, level):
            child = hierarchy.add_child(parent_id, _node_of(child_data, level.child))
            _attach(child.id, child_data, child.level)

    _attach(hierarchy.root.id, payload, HierarchyLevel.LOCATION)
    return hierarchy


def hierarchy_to_payload(hierarchy: PricingHierarchy) -> dict[str, Any]:
    def _dump(node: HierarchyNode) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": node.id,
            "name": node.name,
            "pricing_config": node.pricing.model_dump(mode="json") if node.pricing else None,
        }
        if node.status is not None:
            out["status"] = node.status
        keys = _CHILD_KEYS[node.level]
        if keys:
            out[keys[0]] = [_dump(child) for child in hierarchy.children(node.id)]
        return out

    return _dump(hierarchy.root)
