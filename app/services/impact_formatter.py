"""
Impact Formatter

Turns an ImpactResult into display strings for the dashboard and shares.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

from ..schemas.impact_schemas import ImpactDescription, ImpactResult

# Below this many trees, show grams of tree-equivalent instead
WHOLE_TREE_THRESHOLD = 1.0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Render a rounded metric without trailing zeros (2.1, 5, 0.05)."""
    text = f"{value:f}".rstrip("0").rstrip(".")
    return text or "0"


def _trees_display(trees: float) -> Tuple[str, str]:
    """Tree amount as display text plus the phrase that follows it."""
    if trees >= WHOLE_TREE_THRESHOLD:
        return str(round_half_up(trees)), "trees preserved"
    # Scale in decimal so 0.0025 becomes exactly 2.5 before rounding
    grams = (Decimal(str(trees)) * 1000).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{int(grams)}g", "tree-equivalent preserved"


def format_impact_description(result: ImpactResult) -> ImpactDescription:
    """
    Build the display strings for an impact result.

    Trees under 1.0 are shown in grams of tree-equivalent, whole trees as a
    rounded count.
    """
    co2 = format_number(result.co2_saved_kg)
    water = format_number(result.water_saved_liters)
    trees, trees_phrase = _trees_display(result.trees_preserved)

    return ImpactDescription(
        co2_description=f"{co2} kg CO₂ saved",
        water_description=f"{water} liters water saved",
        trees_description=f"{trees} {trees_phrase}",
        summary=f"🌱 {co2}kg CO₂ • 💧 {water}L water • 🌳 {trees} trees",
    )
