"""
Pydantic schemas for the Impact Tracking system.
Defines rate configuration, estimation value types, aggregation and progress models.
"""

import math
from datetime import datetime, date
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Dict, Any, Mapping
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# =============================================================================
# Enums
# =============================================================================

class ActionType(str, Enum):
    """Canonical action categories accepted by the estimator."""
    BIKING = "biking"
    WALKING = "walking"
    PUBLIC_TRANSPORT = "public_transport"
    RECYCLING = "recycling"
    REUSABLE_BAG = "reusable_bag"
    ENERGY_SAVING = "energy_saving"
    WATER_CONSERVATION = "water_conservation"
    CARPOOLING = "carpooling"
    PLANT_BASED_MEAL = "plant_based_meal"
    COMPOST = "compost"
    LED_BULB = "led_bulb"
    SHORTER_SHOWER = "shorter_shower"


class ImpactUnit(str, Enum):
    """Units that trigger specialized per-unit arithmetic."""
    KM = "km"
    KG = "kg"
    MINUTES = "minutes"
    TIMES = "times"


class GoalCategory(str, Enum):
    """What a goal measures."""
    ACTIONS = "actions"
    CO2_REDUCTION = "co2_reduction"
    WATER_SAVING = "water_saving"
    STREAK = "streak"
    SPECIFIC_ACTION = "specific_action"


class GoalStatus(str, Enum):
    """Lifecycle status of a goal."""
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"


DEFAULT_UNIT = ImpactUnit.TIMES.value

# Largest quantity accepted over HTTP; keeps every metric product finite
MAX_REQUEST_QUANTITY = 1_000_000


# =============================================================================
# Configuration Models - Rate Table
# =============================================================================

class MetricRates(BaseModel):
    """Conversion factors for one metric (CO2, water or trees) of one action type."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    per_unit: float = Field(default=0.0, ge=0, description="Flat per-occurrence rate")
    per_km: Optional[float] = Field(default=None, ge=0, description="Rate per kilometre")
    short_shower: Optional[float] = Field(default=None, ge=0, description="Rate per 5-minute shower reduction")
    paper: Optional[float] = Field(default=None, ge=0, description="Rate per kg of paper")
    plastic: Optional[float] = Field(default=None, ge=0, description="Rate per kg of plastic")
    glass: Optional[float] = Field(default=None, ge=0, description="Rate per kg of glass")
    metal: Optional[float] = Field(default=None, ge=0, description="Rate per kg of metal")


class ActionRates(BaseModel):
    """All metric rates for a single action type."""
    model_config = ConfigDict(frozen=True)

    co2: MetricRates = MetricRates()
    water: MetricRates = MetricRates()
    trees: MetricRates = MetricRates()


class RecyclingBlend(BaseModel):
    """Assumed material composition of one kg of mixed recycling."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    paper: float = Field(..., ge=0, le=1)
    plastic: float = Field(..., ge=0, le=1)
    glass: float = Field(..., ge=0, le=1)
    metal: float = Field(..., ge=0, le=1)

    @model_validator(mode="after")
    def check_shares(self) -> "RecyclingBlend":
        total = self.paper + self.plastic + self.glass + self.metal
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"recycling blend shares must sum to 1, got {total}")
        return self


class RateTable(BaseModel):
    """
    Immutable rate configuration shared by every estimator call.

    Built once at startup by ``load_rate_table``; the ``actions`` mapping is
    exposed read-only.
    """
    model_config = ConfigDict(frozen=True)

    version: str
    recycling_blend: RecyclingBlend
    shower_baseline_minutes: float = Field(..., gt=0)
    actions: Mapping[ActionType, ActionRates]

    @field_validator("actions", mode="after")
    @classmethod
    def freeze_actions(cls, v: Mapping[ActionType, ActionRates]) -> Mapping[ActionType, ActionRates]:
        return MappingProxyType(dict(v))

    def for_action(self, action_type: ActionType) -> Optional[ActionRates]:
        """Rates for a canonical action type, or None if it is not configured."""
        return self.actions.get(action_type)


# =============================================================================
# Value Types - Estimation
# =============================================================================

class ActionClassification(BaseModel):
    """
    Input to the estimator: what was done, how much, and in which unit.

    Missing or non-positive quantities become 1 and a blank unit becomes "times".
    """
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Action type (e.g., 'biking', 'recycling')")
    quantity: float = Field(default=1.0, description="Measured amount of the action")
    unit: str = Field(default=DEFAULT_UNIT, description="What quantity measures (e.g., 'km', 'kg')")

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, v: Any) -> float:
        return normalize_quantity(v)

    @field_validator("unit", mode="before")
    @classmethod
    def default_unit(cls, v: Any) -> str:
        return normalize_unit(v)


class ImpactResult(BaseModel):
    """Estimated environmental benefit of one action, already rounded."""
    model_config = ConfigDict(frozen=True)

    co2_saved_kg: float = Field(default=0.0, ge=0, description="CO2 saved in kg (3 decimals)")
    water_saved_liters: float = Field(default=0.0, ge=0, description="Water saved in liters (2 decimals)")
    trees_preserved: float = Field(default=0.0, ge=0, description="Trees preserved (4 decimals)")

    @classmethod
    def zero(cls) -> "ImpactResult":
        return cls()


class ImpactDescription(BaseModel):
    """Display strings for an impact result."""
    co2_description: str
    water_description: str
    trees_description: str
    summary: str


def normalize_quantity(value: Any) -> float:
    """Coerce a quantity to a positive float, defaulting to 1."""
    if value is None or isinstance(value, bool):
        return 1.0
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        return 1.0
    if not math.isfinite(quantity) or quantity <= 0:
        return 1.0
    return quantity


def normalize_unit(value: Any) -> str:
    """Return the unit unchanged, or "times" when missing or blank."""
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_UNIT
    return value


# =============================================================================
# API Models
# =============================================================================

class ImpactEstimateRequest(BaseModel):
    """Request body for estimating the impact of a single action."""
    action_type: str = Field(..., min_length=1, description="Action type (e.g., 'biking')")
    description: Optional[str] = Field(default=None, description="Free-text description of the action")
    quantity: Optional[float] = Field(default=None, gt=0, le=MAX_REQUEST_QUANTITY, description="Amount of the action, defaults to 1")
    unit: Optional[str] = Field(default=DEFAULT_UNIT, description="Unit of measurement (e.g., 'km', 'kg', 'minutes')")

    class Config:
        json_schema_extra = {
            "example": {
                "action_type": "biking",
                "description": "Rode to work",
                "quantity": 12,
                "unit": "km"
            }
        }


class ImpactEstimateResponse(BaseModel):
    """Estimated impact plus derived gamification values."""
    action_type: str
    quantity: float
    unit: str
    recognized: bool = Field(..., description="Whether the action type has impact rates")
    impact: ImpactResult
    points: int
    category: str
    description: ImpactDescription

    class Config:
        json_schema_extra = {
            "example": {
                "action_type": "biking",
                "quantity": 12,
                "unit": "km",
                "recognized": True,
                "impact": {"co2_saved_kg": 2.52, "water_saved_liters": 24.0, "trees_preserved": 0.024},
                "points": 34,
                "category": "Transportation",
                "description": {
                    "co2_description": "2.52 kg CO₂ saved",
                    "water_description": "24 liters water saved",
                    "trees_description": "24g tree-equivalent preserved",
                    "summary": "🌱 2.52kg CO₂ • 💧 24L water • 🌳 24g trees"
                }
            }
        }


class ActionTypeInfo(BaseModel):
    """Describes one canonical action type."""
    action_type: ActionType
    category: str
    units: List[str] = Field(..., description="Units with specialized arithmetic, plus 'times'")
    point_multiplier: float


class RateTableInfo(BaseModel):
    """Summary of the loaded rate table."""
    version: str
    action_types: int
    recycling_blend: RecyclingBlend
    shower_baseline_minutes: float


# =============================================================================
# Aggregation Models
# =============================================================================

class LoggedAction(BaseModel):
    """An action record as stored by the caller, with its computed impact."""
    user_id: str
    action_type: str
    quantity: float = 1.0
    unit: str = DEFAULT_UNIT
    logged_at: datetime
    impact: ImpactResult = ImpactResult()
    points: int = 0


class UserImpactStats(BaseModel):
    """Running totals for a user."""
    total_actions: int = 0
    total_co2_saved_kg: float = 0.0
    total_water_saved_liters: float = 0.0
    total_trees_preserved: float = 0.0
    total_points: int = 0
    level: int = 1


class PeriodSummary(BaseModel):
    """Summary for a specific time period."""
    period: str = Field(..., description="Period label (e.g., 'this_week', 'last_week', 'all_time')")
    co2_kg: float
    water_liters: float
    trees: float
    points: int
    event_count: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class WeeklySummaryResponse(BaseModel):
    """Weekly and all-time summaries for a user."""
    user_id: str
    this_week: PeriodSummary
    last_week: PeriodSummary
    all_time: PeriodSummary
    comparison: Dict[str, float] = Field(
        default={},
        description="Percentage change from last week (positive = improvement)"
    )


class CategoryBreakdown(BaseModel):
    """Totals for one action category."""
    category: str
    action_count: int
    co2_kg: float
    water_liters: float
    trees: float


# =============================================================================
# Goal & Challenge Models
# =============================================================================

class Goal(BaseModel):
    """A user goal measured against logged actions."""
    title: str
    category: GoalCategory
    target_value: float = Field(..., ge=0)
    target_action_type: Optional[str] = Field(default=None, description="For specific_action goals")
    start_date: date
    end_date: date
    status: GoalStatus = GoalStatus.ACTIVE
    milestones: List[float] = []


class GoalProgress(BaseModel):
    """Re-derived progress for a goal."""
    current: float
    percentage: float
    status: GoalStatus
    milestones_reached: List[float] = []


class Challenge(BaseModel):
    """A challenge users can join."""
    challenge_id: str
    title: str
    category: str = Field(default="general", description="'general' or an action type")
    target_value: float = Field(..., gt=0)
    target_unit: str = Field(default="actions")
    reward_points: int = Field(default=0, ge=0)


class ChallengeParticipant(BaseModel):
    """A user's standing in a challenge."""
    user_id: str
    progress: float = 0.0
    completed: bool = False
    completed_date: Optional[date] = None


class ChallengeProgressUpdate(BaseModel):
    """Result of applying one logged action to a challenge."""
    participant: ChallengeParticipant
    increment: float
    newly_completed: bool = False
    reward_points: int = 0
