"""
Tests for the impact estimator.

Run with:
    pytest tests/test_impact_estimator.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from app.data.impact_rates import get_default_rate_config
from app.schemas.impact_schemas import ActionClassification, ActionType, ImpactResult
from app.services.impact_estimator import ImpactEstimator, impact_estimator
from app.services.rate_table import build_rate_table

ALL_TYPES = [t.value for t in ActionType]
UNITS = ["km", "kg", "minutes", "times", "parsecs"]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------

def test_biking_by_km():
    assert impact_estimator.estimate_co2("biking", 10, "km") == 2.1


def test_biking_by_occurrence():
    assert impact_estimator.estimate_co2("biking", 1, "times") == 2.1


def test_public_transport_by_km():
    assert impact_estimator.estimate_co2("public_transport", 20, "km") == 1.78


def test_recycling_by_kg_blends_materials():
    # 3.3*0.4 + 2.0*0.3 + 0.31*0.2 + 1.5*0.1
    assert impact_estimator.estimate_co2("recycling", 1, "kg") == 2.132
    # 60*0.4 + 88*0.3 + 12*0.2 + 95*0.1
    assert impact_estimator.estimate_water("recycling", 1, "kg") == 62.3


def test_recycling_by_kg_trees_use_paper_rate_only():
    assert impact_estimator.estimate_trees_preserved("recycling", 2, "kg") == 0.034


def test_recycling_by_occurrence():
    result = impact_estimator.estimate_all("recycling", 2, "times")
    assert result == ImpactResult(co2_saved_kg=3.0, water_saved_liters=100.0, trees_preserved=0.1)


def test_water_conservation_by_minutes():
    assert impact_estimator.estimate_co2("water_conservation", 10, "minutes") == 5.0
    assert impact_estimator.estimate_water("water_conservation", 10, "minutes") == 150.0


def test_water_conservation_trees_ignore_minutes():
    assert impact_estimator.estimate_trees_preserved("water_conservation", 10, "minutes") == 0.02


def test_distance_types_have_no_per_km_water():
    assert impact_estimator.estimate_water("walking", 5, "km") == 5.0


def test_extended_type_uses_flat_rate():
    result = impact_estimator.estimate_all("plant_based_meal", 2)
    assert result == ImpactResult(co2_saved_kg=5.0, water_saved_liters=300.0, trees_preserved=0.0)


def test_carpooling_ignores_km():
    assert impact_estimator.estimate_co2("carpooling", 10, "km") == 4.0


def test_rounding_applied_per_metric():
    result = impact_estimator.estimate_all("energy_saving", 1 / 3)
    assert result.co2_saved_kg == 0.833
    assert result.water_saved_liters == 5.0
    assert result.trees_preserved == 0.0013


# ---------------------------------------------------------------------------
# Unknown types and defaults
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("action_type", ["skydiving", "Biking", "BIKING", "", None, 42])
def test_unknown_type_is_zero(action_type):
    assert impact_estimator.estimate_all(action_type, 5, "times") == ImpactResult(
        co2_saved_kg=0, water_saved_liters=0, trees_preserved=0
    )


def test_unknown_type_is_not_supported():
    assert impact_estimator.is_supported("skydiving") is False
    assert impact_estimator.is_supported("biking") is True


@pytest.mark.parametrize("action_type", ALL_TYPES)
@pytest.mark.parametrize("quantity", [None, 0, -3, float("nan"), "abc"])
def test_invalid_quantity_defaults_to_one(action_type, quantity):
    assert impact_estimator.estimate_all(action_type, quantity, "km") == impact_estimator.estimate_all(
        action_type, 1, "km"
    )


@pytest.mark.parametrize("action_type", ALL_TYPES)
def test_unrecognized_unit_falls_back_to_flat_rate(action_type):
    assert impact_estimator.estimate_all(action_type, 3, "parsecs") == impact_estimator.estimate_all(
        action_type, 3, "times"
    )


@pytest.mark.parametrize("unit", [None, "", "   "])
def test_missing_unit_means_times(unit):
    assert impact_estimator.estimate_all("biking", 3, unit) == impact_estimator.estimate_all("biking", 3, "times")


def test_unit_is_case_sensitive():
    assert impact_estimator.estimate_co2("biking", 10, "KM") == impact_estimator.estimate_co2("biking", 10, "times")


def test_recycling_with_distance_unit_uses_flat_rate():
    assert impact_estimator.estimate_co2("recycling", 2, "km") == 3.0


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("action_type", ALL_TYPES)
@pytest.mark.parametrize("unit", UNITS)
def test_outputs_are_non_negative(action_type, unit):
    result = impact_estimator.estimate_all(action_type, 2.5, unit)
    assert result.co2_saved_kg >= 0
    assert result.water_saved_liters >= 0
    assert result.trees_preserved >= 0


@pytest.mark.parametrize("action_type", ALL_TYPES)
def test_estimate_all_matches_single_metrics(action_type):
    result = impact_estimator.estimate_all(action_type, 7, "km")
    assert result.co2_saved_kg == impact_estimator.estimate_co2(action_type, 7, "km")
    assert result.water_saved_liters == impact_estimator.estimate_water(action_type, 7, "km")
    assert result.trees_preserved == impact_estimator.estimate_trees_preserved(action_type, 7, "km")


def test_deterministic():
    first = impact_estimator.estimate_all("recycling", 3.7, "kg")
    second = impact_estimator.estimate_all("recycling", 3.7, "kg")
    assert first == second


def test_concurrent_calls_agree():
    expected = impact_estimator.estimate_all("water_conservation", 12, "minutes")
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(
            lambda _: impact_estimator.estimate_all("water_conservation", 12, "minutes"),
            range(64)
        ))
    assert all(r == expected for r in results)


# ---------------------------------------------------------------------------
# ActionClassification
# ---------------------------------------------------------------------------

def test_classification_defaults():
    classification = ActionClassification(type="biking")
    assert classification.quantity == 1.0
    assert classification.unit == "times"


def test_classification_clamps_quantity_and_unit():
    classification = ActionClassification(type="biking", quantity=-4, unit="")
    assert classification.quantity == 1.0
    assert classification.unit == "times"


def test_classification_is_frozen():
    classification = ActionClassification(type="biking", quantity=2, unit="km")
    with pytest.raises(ValidationError):
        classification.quantity = 5


def test_estimate_from_classification():
    classification = ActionClassification(type="biking", quantity=10, unit="km")
    assert impact_estimator.estimate(classification) == impact_estimator.estimate_all("biking", 10, "km")


def test_result_is_frozen():
    result = impact_estimator.estimate_all("biking", 1)
    with pytest.raises(ValidationError):
        result.co2_saved_kg = 100


# ---------------------------------------------------------------------------
# Injected rate table
# ---------------------------------------------------------------------------

def test_estimator_uses_injected_rate_table():
    config = get_default_rate_config()
    config["co2"]["biking"]["per_km"] = 0.5
    estimator = ImpactEstimator(rate_table=build_rate_table(config))

    assert estimator.estimate_co2("biking", 2, "km") == 1.0
    # Module singleton is untouched
    assert impact_estimator.estimate_co2("biking", 2, "km") == 0.42


def test_type_missing_from_rate_table_is_zero():
    config = get_default_rate_config()
    for metric in ("co2", "water", "trees"):
        config[metric].pop("compost", None)
    estimator = ImpactEstimator(rate_table=build_rate_table(config))

    assert estimator.estimate_all("compost", 3) == ImpactResult.zero()
    assert estimator.is_supported("compost") is False
