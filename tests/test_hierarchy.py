"""Hierarchy tests — level order, lookup and payload conversion."""

from __future__ import annotations

import pytest

from parking_pricing.models import HierarchyLevel, HierarchyNode, PricingHierarchy
from parking_pricing.errors import ConflictError, NotFoundError, ValidationError
from parking_pricing.storage import build_hierarchy, hierarchy_to_payload


class TestHierarchyLevel:
    def test_order(self):
        assert [lvl.depth for lvl in HierarchyLevel] == [0, 1, 2, 3]
        assert HierarchyLevel.LOCATION.child is HierarchyLevel.SECTION
        assert HierarchyLevel.SPOT.child is None
        assert HierarchyLevel.LOCATION.parent is None
        assert HierarchyLevel.ZONE.parent is HierarchyLevel.SECTION

    def test_parse(self):
        assert HierarchyLevel.parse("zone") is HierarchyLevel.ZONE
        assert HierarchyLevel.parse(HierarchyLevel.SPOT) is HierarchyLevel.SPOT

    def test_parse_unknown(self):
        with pytest.raises(ValidationError):
            HierarchyLevel.parse("floor")


class TestPricingHierarchy:
    def test_root_must_be_location(self):
        with pytest.raises(ValidationError):
            PricingHierarchy(HierarchyNode(id="s", level=HierarchyLevel.SECTION))

    def test_location_cannot_have_parent(self):
        with pytest.raises(ValidationError):
            PricingHierarchy(HierarchyNode(id="l", level=HierarchyLevel.LOCATION, parent_id="x"))

    def test_child_must_be_one_level_below(self):
        h = PricingHierarchy(HierarchyNode(id="l", level=HierarchyLevel.LOCATION))
        with pytest.raises(ValidationError):
            h.add_child("l", HierarchyNode(id="z", level=HierarchyLevel.ZONE))

    def test_duplicate_id(self):
        h = PricingHierarchy(HierarchyNode(id="l", level=HierarchyLevel.LOCATION))
        h.add_child("l", HierarchyNode(id="s", level=HierarchyLevel.SECTION))
        with pytest.raises(ConflictError):
            h.add_child("l", HierarchyNode(id="s", level=HierarchyLevel.SECTION))

    def test_unknown_parent(self):
        h = PricingHierarchy(HierarchyNode(id="l", level=HierarchyLevel.LOCATION))
        with pytest.raises(NotFoundError):
            h.add_child("nope", HierarchyNode(id="s", level=HierarchyLevel.SECTION))

    def test_ancestors_end_at_location(self, hierarchy):
        assert [n.id for n in hierarchy.ancestors("spot-a1-1")] == ["zone-a1", "sec-a", "loc-1"]
        assert list(hierarchy.ancestors("loc-1")) == []

    def test_get_with_level(self, hierarchy):
        assert hierarchy.get("zone-a1", "zone").name == "Zone A1"
        with pytest.raises(NotFoundError):
            hierarchy.get("zone-a1", HierarchyLevel.SECTION)

    def test_get_unknown(self, hierarchy):
        with pytest.raises(NotFoundError):
            hierarchy.get("spot-zz")

    def test_walk_is_preorder(self, hierarchy):
        ids = [n.id for n in hierarchy.walk()]
        assert ids == [
            "loc-1", "sec-a", "zone-a1", "spot-a1-1", "spot-a1-2",
            "zone-a2", "spot-a2-1", "sec-b", "zone-b1", "spot-b1-1",
        ]

    def test_spots_in_subtree(self, hierarchy):
        assert [s.id for s in hierarchy.spots("sec-a")] == ["spot-a1-1", "spot-a1-2", "spot-a2-1"]
        assert len(hierarchy.spots()) == 4

    def test_spot_statuses(self, hierarchy):
        assert sorted(hierarchy.spot_statuses()) == ["available", "available", "occupied", "reserved"]

    def test_copy_is_independent(self, hierarchy):
        clone = hierarchy.copy()
        clone.get("sec-a").pricing.base_rate = 1
        assert hierarchy.get("sec-a").pricing.base_rate == 80

    def test_container_protocol(self, hierarchy):
        assert "zone-b1" in hierarchy
        assert "zone-zz" not in hierarchy
        assert len(hierarchy) == 10
        assert next(iter(hierarchy)).id == "loc-1"


class TestPayload:
    def test_build(self, hierarchy):
        assert hierarchy.location_id == "loc-1"
        assert hierarchy.get("loc-1").pricing.base_rate == 60
        assert hierarchy.get("sec-b").pricing is None
        assert hierarchy.get("spot-a1-1").status == "occupied"

    def test_spot_name_falls_back_to_number(self, hierarchy):
        assert hierarchy.get("spot-a1-2").name == "A1-02"

    def test_camel_case_payload(self):
        h = build_hierarchy({
            "id": "loc-x",
            "pricingConfig": {"baseRate": 45, "vatRate": 12},
            "sections": [{"id": "s", "zones": [{"id": "z", "parking_spots": [
                {"id": "p", "number": 7, "status": "available",
                 "pricingConfig": {"baseRate": 70}},
            ]}]}],
        })
        assert h.get("loc-x").pricing.base_rate == 45
        assert h.get("p").pricing.base_rate == 70
        assert h.get("p").name == "7"

    def test_missing_id(self):
        with pytest.raises(ValidationError):
            build_hierarchy({"name": "no id"})

    def test_invalid_pricing_rejected(self):
        with pytest.raises(ValidationError):
            build_hierarchy({"id": "l", "pricing_config": {"base_rate": -1}})

    def test_round_trip(self, hierarchy):
        rebuilt = build_hierarchy(hierarchy_to_payload(hierarchy))
        assert [n.id for n in rebuilt.walk()] == [n.id for n in hierarchy.walk()]
        for node in hierarchy.walk():
            other = rebuilt.get(node.id)
            assert other.level is node.level
            assert other.pricing == node.pricing
            assert other.status == node.status
