"""Parking structure hierarchy — Location → Section → Zone → Spot.

Nodes keep their parent as an id, not an object: the ``PricingHierarchy``
index owns every node and parent lookups go through it, so the tree has no
reference cycles.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from parking_pricing.config.pricing import PricingConfig
from parking_pricing.errors import ConflictError, NotFoundError, ValidationError


class HierarchyLevel(str, Enum):
    """Strict order location > section > zone > spot."""

    LOCATION = "location"
    SECTION = "section"
    ZONE = "zone"
    SPOT = "spot"

    @classmethod
    def parse(cls, value: HierarchyLevel | str) -> HierarchyLevel:
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(f"unknown hierarchy level {value!r}") from exc

    @property
    def depth(self) -> int:
        return _LEVELS.index(self)

    @property
    def child(self) -> HierarchyLevel | None:
        i = self.depth + 1
        return _LEVELS[i] if i < len(_LEVELS) else None

    @property
    def parent(self) -> HierarchyLevel | None:
        return _LEVELS[self.depth - 1] if self.depth > 0 else None


_LEVELS = tuple(HierarchyLevel)

SPOT_TAKEN_STATUSES = frozenset({"occupied", "reserved"})


@dataclass
class HierarchyNode:
    """One Location, Section, Zone or Spot and its (optional) own pricing."""

    id: str
    level: HierarchyLevel
    name: str = ""
    parent_id: str | None = None
    children: list[str] = field(default_factory=list)
    pricing: PricingConfig | None = None
    status: str | None = None
    """Spot status (available / occupied / reserved / maintenance / disabled)."""

    @property
    def has_own_pricing(self) -> bool:
        return self.pricing is not None


class PricingHierarchy:
    """Index over one location's tree.

    Nodes can only be attached under a parent exactly one level above them,
    which keeps the structure a finite tree rooted at the location.
    """

    def __init__(self, root: HierarchyNode):
        if root.level is not HierarchyLevel.LOCATION:
            raise ValidationError(f"hierarchy root must be a location, got {root.level.value}")
        if root.parent_id is not None:
            raise ValidationError(f"location {root.id} cannot have a parent")
        root.children = []
        self.root = root
        self._nodes: dict[str, HierarchyNode] = {root.id: root}

    # ── Construction ──────────────────────────────────────────────────

    def add_child(self, parent_id: str, node: HierarchyNode) -> HierarchyNode:
        parent = self.get(parent_id)
        if node.level is not parent.level.child:
            raise ValidationError(
                f"{node.level.value} {node.id} cannot be placed under "
                f"{parent.level.value} {parent.id}"
            )
        if node.id in self._nodes:
            raise ConflictError(f"duplicate node id {node.id}")
        node.parent_id = parent.id
        node.children = []
        parent.children.append(node.id)
        self._nodes[node.id] = node
        return node

    # ── Lookup ────────────────────────────────────────────────────────

    @property
    def location_id(self) -> str:
        return self.root.id

    def get(self, node_id: str, level: HierarchyLevel | str | None = None) -> HierarchyNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"unknown hierarchy node {node_id}")
        if level is not None:
            expected = HierarchyLevel.parse(level)
            if node.level is not expected:
                raise NotFoundError(f"no {expected.value} with id {node_id}")
        return node

    def parent(self, node_id: str) -> HierarchyNode | None:
        node = self.get(node_id)
        return self._nodes[node.parent_id] if node.parent_id is not None else None

    def ancestors(self, node_id: str) -> Iterator[HierarchyNode]:
        """Parent, grandparent, … up to and including the location."""
        node = self.parent(node_id)
        while node is not None:
            yield node
            node = self._nodes[node.parent_id] if node.parent_id is not None else None

    def children(self, node_id: str) -> list[HierarchyNode]:
        return [self._nodes[cid] for cid in self.get(node_id).children]

    def walk(self, node_id: str | None = None) -> Iterator[HierarchyNode]:
        """Pre-order traversal of a subtree (whole tree by default)."""
        stack = [self.get(node_id) if node_id is not None else self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(self._nodes[cid] for cid in reversed(node.children))

    def spots(self, node_id: str | None = None) -> list[HierarchyNode]:
        return [n for n in self.walk(node_id) if n.level is HierarchyLevel.SPOT]

    def spot_statuses(self) -> list[str | None]:
        return [s.status for s in self.spots()]

    def copy(self) -> PricingHierarchy:
        return copy.deepcopy(self)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[HierarchyNode]:
        return self.walk()

    def __len__(self) -> int:
        return len(self._nodes)
