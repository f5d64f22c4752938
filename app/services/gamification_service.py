"""
Gamification Service

Derives points, categories and levels from estimated impact.
Provides motivation through game-like mechanics; all methods are pure.
"""

from typing import Any, List

from ..data.impact_rates import (
    ACTION_CATEGORIES,
    DEFAULT_CATEGORY,
    POINT_MULTIPLIERS,
)
from ..schemas.impact_schemas import ActionType, ActionTypeInfo, ImpactUnit
from .impact_formatter import round_half_up

DEFAULT_MULTIPLIER = 1.0
MINIMUM_POINTS = 1
POINTS_PER_LEVEL = 1000

# Units with specialized arithmetic, per action type
SPECIAL_UNITS = {
    ActionType.BIKING: [ImpactUnit.KM.value],
    ActionType.WALKING: [ImpactUnit.KM.value],
    ActionType.PUBLIC_TRANSPORT: [ImpactUnit.KM.value],
    ActionType.RECYCLING: [ImpactUnit.KG.value],
    ActionType.WATER_CONSERVATION: [ImpactUnit.MINUTES.value],
}


def _key(action_type: Any) -> Any:
    if isinstance(action_type, ActionType):
        return action_type.value
    return action_type


class GamificationService:
    """
    Service for gamification values derived from impact.

    Handles:
    - Points per logged action (CO2/water based, with type multipliers)
    - Action categories for grouping
    - Levels from accumulated experience points
    """

    def get_point_multiplier(self, action_type: Any) -> float:
        """Multiplier for an action type, 1.0 when unknown."""
        return POINT_MULTIPLIERS.get(_key(action_type), DEFAULT_MULTIPLIER)

    def calculate_points(self, action_type: Any, co2_saved: float, water_saved: float) -> int:
        """
        Points earned for one action.

        10 points per kg CO2 plus 1 point per 10 liters of water, scaled by
        the action type multiplier. Never less than 1.

        Args:
            action_type: Action type string
            co2_saved: CO2 saved in kg
            water_saved: Water saved in liters

        Returns:
            Integer points
        """
        base_points = round_half_up(co2_saved * 10 + water_saved / 10)
        multiplier = self.get_point_multiplier(action_type)
        return max(MINIMUM_POINTS, round_half_up(base_points * multiplier))

    def get_action_category(self, action_type: Any) -> str:
        """Category used for grouping (Transportation, Waste, ...)."""
        return ACTION_CATEGORIES.get(_key(action_type), DEFAULT_CATEGORY)

    def calculate_level(self, experience_points: int) -> int:
        """Level 1 starts at 0 points, one level per 1000 points."""
        return int(max(experience_points, 0)) // POINTS_PER_LEVEL + 1

    def get_units(self, action_type: ActionType) -> List[str]:
        return SPECIAL_UNITS.get(action_type, []) + [ImpactUnit.TIMES.value]

    def list_action_types(self) -> List[ActionTypeInfo]:
        """Describe every canonical action type."""
        return [
            ActionTypeInfo(
                action_type=action_type,
                category=self.get_action_category(action_type),
                units=self.get_units(action_type),
                point_multiplier=self.get_point_multiplier(action_type),
            )
            for action_type in ActionType
        ]


# Singleton instance for easy import
gamification_service = GamificationService()
