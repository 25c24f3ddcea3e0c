"""Calculation breakdown — plain-text "calculation example" for one node.

Turns an inheritance result plus a priced result into the step-by-step text
shown next to the hierarchy viewer: where the pricing comes from, the
starting rate, each multiplier in order, discounts, VAT and total.
"""

from __future__ import annotations

from parking_pricing.models.results import PricedResult, PricingInheritanceResult

_SOURCE_TEXT = {
    "own": "own pricing",
    "inherited": "inherited pricing",
    "default": "system default pricing",
}


def describe_calculation(
    inheritance: PricingInheritanceResult,
    priced: PricedResult,
    currency: str = "PHP",
) -> str:
    cfg = inheritance.effective_pricing
    lines: list[str] = []

    source = _SOURCE_TEXT[inheritance.source]
    if inheritance.inherited_from:
        source += f" (from {inheritance.inherited_from})"
    title = inheritance.name or inheritance.id
    lines.append(f"{inheritance.level.value.title()} {title}: {source}")

    start = "vehicle-type rate" if priced.base_rate_source == "vehicle_type" else "base rate"
    lines.append(f"  Starting {start}: {currency} {priced.base_rate:,.2f}/hour")

    running = priced.base_rate
    for m in priced.applied_multipliers:
        running *= m.multiplier
        lines.append(f"  × {m.multiplier:g}  {m.name:<28} = {currency} {running:,.2f}")

    lines.append(f"  Subtotal: {currency} {priced.subtotal:,.2f}")
    if priced.discount_amount:
        ids = ", ".join(priced.applied_discount_ids)
        lines.append(f"  − Discounts ({ids}): {currency} {priced.discount_amount:,.2f}")
    if priced.vat_exempt:
        lines.append("  VAT: exempt")
    else:
        lines.append(f"  VAT ({cfg.vat_rate:g}%): {currency} {priced.vat_amount:,.2f}")
    lines.append(f"  Total: {currency} {priced.total_amount:,.2f}")

    return "\n".join(lines)
