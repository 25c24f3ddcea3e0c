"""Inheritance resolver — effective pricing across Location → Section → Zone → Spot.

A node's own config wins.  Otherwise the nearest ancestor that owns one
supplies it (a Zone under a priced Section uses the Section's config even
when the Location is priced too).  With no config anywhere up the chain the
system default applies.

``resolve`` and ``annotate_effective_pricing`` never mutate the hierarchy.
``set_pricing``, ``remove_pricing`` and ``copy_to_children`` are the write
operations; they act on whatever hierarchy object they are given, so the
store passes them a private copy and commits it atomically.
"""

from __future__ import annotations

import logging

from parking_pricing.config.pricing import PricingConfig, PricingOverrides
from parking_pricing.config.settings import get_settings
from parking_pricing.engine.validation import validate_pricing_config
from parking_pricing.models.hierarchy import HierarchyLevel, HierarchyNode, PricingHierarchy
from parking_pricing.models.results import EffectivePricingNode, PricingInheritanceResult

logger = logging.getLogger(__name__)


def resolve(
    hierarchy: PricingHierarchy,
    node_id: str,
    default: PricingConfig | None = None,
    level: HierarchyLevel | str | None = None,
) -> PricingInheritanceResult:
    """Find the config governing ``node_id`` and tag it with its source.

    Raises NotFoundError for an unknown node (or one of a different level
    when ``level`` is given).
    """
    node = hierarchy.get(node_id, level)

    if node.pricing is not None:
        own = node.pricing.model_copy(deep=True)
        return PricingInheritanceResult(
            level=node.level, id=node.id, name=node.name,
            effective_pricing=own, own_pricing=own, source="own",
        )

    for ancestor in hierarchy.ancestors(node_id):
        if ancestor.pricing is not None:
            inherited = ancestor.pricing.model_copy(deep=True)
            logger.debug("%s %s inherits pricing from %s %s",
                         node.level.value, node.id, ancestor.level.value, ancestor.id)
            return PricingInheritanceResult(
                level=node.level, id=node.id, name=node.name,
                effective_pricing=inherited, inherited_pricing=inherited,
                inherited_from=ancestor.id, source="inherited",
            )

    logger.debug("%s %s falls back to default pricing", node.level.value, node.id)
    fallback = (default or get_settings().default_pricing()).model_copy(deep=True)
    return PricingInheritanceResult(
        level=node.level, id=node.id, name=node.name,
        effective_pricing=fallback, source="default",
    )


def annotate_effective_pricing(
    hierarchy: PricingHierarchy,
    default: PricingConfig | None = None,
) -> EffectivePricingNode:
    """The whole tree with each node's effective config, propagated top-down."""
    fallback = default or get_settings().default_pricing()

    def _annotate(node: HierarchyNode, inherited: PricingConfig | None) -> EffectivePricingNode:
        if node.pricing is not None:
            effective, source = node.pricing, "own"
        elif inherited is not None:
            effective, source = inherited, "inherited"
        else:
            effective, source = fallback, "default"
        return EffectivePricingNode(
            id=node.id,
            level=node.level,
            name=node.name,
            source=source,
            own_pricing=node.pricing,
            effective_pricing=effective,
            status=node.status,
            children=[
                _annotate(child, node.pricing or inherited)
                for child in hierarchy.children(node.id)
            ],
        )

    return _annotate(hierarchy.root, None)


# ═══════════════════════════════════════════════════════════════════════════
# Writes
# ═══════════════════════════════════════════════════════════════════════════

def set_pricing(hierarchy: PricingHierarchy, node_id: str, config: PricingConfig) -> HierarchyNode:
    """Replace the node's own config wholesale (no merge)."""
    node = hierarchy.get(node_id)
    node.pricing = validate_pricing_config(config).model_copy(deep=True)
    return node


def remove_pricing(hierarchy: PricingHierarchy, node_id: str) -> bool:
    """Drop the node's own config.  Returns False if it had none."""
    node = hierarchy.get(node_id)
    if node.pricing is None:
        return False
    node.pricing = None
    return True


def copy_to_children(
    hierarchy: PricingHierarchy,
    node_id: str,
    recursive: bool = False,
    override_existing: bool = False,
    default: PricingConfig | None = None,
) -> list[str]:
    """Give each direct child without its own config a copy of this node's effective config.

    Children that already own a config are left alone unless
    ``override_existing``.  With ``recursive`` the same is then done for every
    child, so grandchildren receive their own parent's (possibly just copied)
    config.  Returns the ids of every node that received a config.
    """
    effective = resolve(hierarchy, node_id, default).effective_pricing
    updated: list[str] = []

    for child in hierarchy.children(node_id):
        if child.pricing is not None and not override_existing:
            continue
        child.pricing = effective.model_copy(deep=True)
        updated.append(child.id)

    if recursive:
        for child in hierarchy.children(node_id):
            updated.extend(copy_to_children(hierarchy, child.id, True, override_existing, default))

    return updated


def inherit_pricing(parent: PricingConfig, overrides: PricingOverrides | None = None) -> PricingConfig:
    """Child config = parent config with each given override replacing its field."""
    if overrides is None:
        return parent
    fields = parent.model_dump()
    fields.update(overrides.model_dump(exclude_none=True))
    return validate_pricing_config(PricingConfig.model_validate(fields))
