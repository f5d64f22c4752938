"""
Impact Estimator Service

Estimates CO2 saved, water saved and trees preserved for a logged action.
Takes an (action type, quantity, unit) triple and returns rounded metrics.

Estimation never fails: unknown action types yield zero impact and bad
quantities or units fall back to the defaults.
"""

from typing import Any, Optional, Tuple

from ..core.config import settings
from ..schemas.impact_schemas import (
    ActionClassification,
    ActionRates,
    ActionType,
    ImpactResult,
    ImpactUnit,
    MetricRates,
    RateTable,
    normalize_quantity,
    normalize_unit,
)
from .rate_table import load_rate_table

CO2_DECIMALS = 3
WATER_DECIMALS = 2
TREES_DECIMALS = 4

DISTANCE_TYPES = frozenset({
    ActionType.BIKING,
    ActionType.WALKING,
    ActionType.PUBLIC_TRANSPORT,
})


def resolve_action_type(action_type: Any) -> Optional[ActionType]:
    """Match a raw type string against the canonical set (case-sensitive)."""
    if isinstance(action_type, ActionType):
        return action_type
    if not isinstance(action_type, str):
        return None
    try:
        return ActionType(action_type)
    except ValueError:
        return None


class ImpactEstimator:
    """
    Pure estimator of environmental impact.

    Holds only a read-only RateTable, so one instance can be shared by any
    number of concurrent callers.
    """

    def __init__(self, rate_table: Optional[RateTable] = None):
        """
        Initialize the estimator.

        Args:
            rate_table: RateTable to use (optional, for DI); loaded from settings otherwise
        """
        if rate_table is None:
            rate_table = load_rate_table(settings.rate_table_path or None)
        self._rates = rate_table

    @property
    def rate_table(self) -> RateTable:
        return self._rates

    def is_supported(self, action_type: Any) -> bool:
        """Whether the action type has configured impact rates."""
        return self._lookup(action_type)[1] is not None

    def _lookup(self, action_type: Any) -> Tuple[Optional[ActionType], Optional[ActionRates]]:
        kind = resolve_action_type(action_type)
        if kind is None:
            return None, None
        return kind, self._rates.for_action(kind)

    # -------------------------------------------------------------------------
    # Dispatch by (type, unit)
    # -------------------------------------------------------------------------

    def _blended(self, rates: MetricRates, quantity: float) -> float:
        """Mixed recycling by mass, using the configured material composition."""
        blend = self._rates.recycling_blend
        return (
            (rates.paper or 0.0) * quantity * blend.paper
            + (rates.plastic or 0.0) * quantity * blend.plastic
            + (rates.glass or 0.0) * quantity * blend.glass
            + (rates.metal or 0.0) * quantity * blend.metal
        )

    def _metric(
        self,
        kind: ActionType,
        rates: MetricRates,
        quantity: float,
        unit: str
    ) -> float:
        """
        Raw CO2 or water value for one action.

        - biking/walking/public_transport by km: per-kilometre rate
        - recycling by kg: material blend
        - water_conservation by minutes: short-shower rate per 5 minutes
        - anything else: flat per-occurrence rate
        """
        if kind in DISTANCE_TYPES:
            if unit == ImpactUnit.KM.value and rates.per_km is not None:
                return rates.per_km * quantity
            return rates.per_unit * quantity

        if kind is ActionType.RECYCLING:
            if unit == ImpactUnit.KG.value:
                return self._blended(rates, quantity)
            return rates.per_unit * quantity

        if kind is ActionType.WATER_CONSERVATION:
            if unit == ImpactUnit.MINUTES.value and rates.short_shower is not None:
                return rates.short_shower * (quantity / self._rates.shower_baseline_minutes)
            return rates.per_unit * quantity

        # reusable_bag, energy_saving and the extended types are flat-rate only
        return rates.per_unit * quantity

    def _trees(self, kind: ActionType, rates: MetricRates, quantity: float, unit: str) -> float:
        """Raw trees value; recycled mass counts only its paper."""
        if kind is ActionType.RECYCLING and unit == ImpactUnit.KG.value:
            return (rates.paper or 0.0) * quantity
        return rates.per_unit * quantity

    def _raw(
        self,
        action_type: Any,
        quantity: Any,
        unit: Any
    ) -> Tuple[float, float, float]:
        kind, rates = self._lookup(action_type)
        if kind is None or rates is None:
            return 0.0, 0.0, 0.0

        quantity = normalize_quantity(quantity)
        unit = normalize_unit(unit)

        return (
            self._metric(kind, rates.co2, quantity, unit),
            self._metric(kind, rates.water, quantity, unit),
            self._trees(kind, rates.trees, quantity, unit),
        )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def estimate_co2(self, action_type: Any, quantity: Any = None, unit: Any = None) -> float:
        """CO2 saved in kg, rounded to 3 decimals."""
        return round(self._raw(action_type, quantity, unit)[0], CO2_DECIMALS)

    def estimate_water(self, action_type: Any, quantity: Any = None, unit: Any = None) -> float:
        """Water saved in liters, rounded to 2 decimals."""
        return round(self._raw(action_type, quantity, unit)[1], WATER_DECIMALS)

    def estimate_trees_preserved(self, action_type: Any, quantity: Any = None, unit: Any = None) -> float:
        """Trees preserved (fractional), rounded to 4 decimals."""
        return round(self._raw(action_type, quantity, unit)[2], TREES_DECIMALS)

    def estimate_all(self, action_type: Any, quantity: Any = None, unit: Any = None) -> ImpactResult:
        """
        Estimate all three metrics for one action.

        Args:
            action_type: Action type string (e.g., 'biking')
            quantity: Amount of the action; missing or <= 0 means 1
            unit: Unit of quantity; missing means 'times'

        Returns:
            ImpactResult, rounded once here
        """
        co2, water, trees = self._raw(action_type, quantity, unit)
        return ImpactResult(
            co2_saved_kg=round(co2, CO2_DECIMALS),
            water_saved_liters=round(water, WATER_DECIMALS),
            trees_preserved=round(trees, TREES_DECIMALS),
        )

    def estimate(self, classification: ActionClassification) -> ImpactResult:
        """Estimate impact for an ActionClassification."""
        return self.estimate_all(
            classification.type,
            classification.quantity,
            classification.unit
        )


# Singleton instance for easy import
impact_estimator = ImpactEstimator()
