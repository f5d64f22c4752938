"""
Default rate tables for environmental impact estimation.

Data Sources:
- Transport: average car emissions avoided per km (EPA passenger vehicle factors)
- Recycling: material-specific savings (EPA WARM model estimates)
- Water/energy: household averages from utility sustainability reports

Note: these are approximations for gamification, not carbon accounting.
Every rate below is "saved compared to the conventional alternative".

Units:
- CO2: kg CO2 saved
- Water: liters saved
- Trees: trees preserved (fractional values are meaningful)

Rate keys:
- per_unit: flat rate for one typical occurrence of the action
- per_km: rate per kilometre for distance-based actions
- paper/plastic/glass/metal: rate per kg of that material recycled
- short_shower: rate per 5-minute shower reduction
"""

from typing import Dict, Any

# Type alias for a raw metric rate record
RateData = Dict[str, float]

RATE_TABLE_VERSION = "2024.1"

# Assumed composition of one kg of mixed recycling.
# Calibration constants, not measured data.
RECYCLING_BLEND: RateData = {
    "paper": 0.4,
    "plastic": 0.3,
    "glass": 0.2,
    "metal": 0.1,
}

# A "short shower" rate covers a 5-minute reduction
SHOWER_BASELINE_MINUTES = 5.0

CO2_SAVINGS: Dict[str, RateData] = {
    "biking": {
        "per_km": 0.21,     # vs. driving the same distance
        "per_unit": 2.1,    # average 10 km ride
    },
    "walking": {
        "per_km": 0.21,
        "per_unit": 1.05,   # average 5 km walk
    },
    "public_transport": {
        "per_km": 0.089,
        "per_unit": 1.78,   # average 20 km trip
    },
    "recycling": {
        "paper": 3.3,
        "plastic": 2.0,
        "glass": 0.31,
        "metal": 1.5,
        "per_unit": 1.5,    # average mixed recycling session
    },
    "reusable_bag": {
        "per_unit": 0.04,   # per use vs. a plastic bag
    },
    "energy_saving": {
        "per_unit": 2.5,
    },
    "water_conservation": {
        "short_shower": 2.5,
        "per_unit": 1.8,
    },
    "carpooling": {
        "per_unit": 0.4,
    },
    "plant_based_meal": {
        "per_unit": 2.5,
    },
    "compost": {
        "per_unit": 0.3,
    },
    "led_bulb": {
        "per_unit": 0.04,
    },
    "shorter_shower": {
        "per_unit": 0.2,
    },
}

WATER_SAVINGS: Dict[str, RateData] = {
    "biking": {
        "per_unit": 2,      # indirect, reduced car manufacturing demand
    },
    "walking": {
        "per_unit": 1,
    },
    "public_transport": {
        "per_unit": 5,
    },
    "recycling": {
        "paper": 60,
        "plastic": 88,
        "glass": 12,
        "metal": 95,
        "per_unit": 50,
    },
    "reusable_bag": {
        "per_unit": 0.5,
    },
    "energy_saving": {
        "per_unit": 15,     # power plant cooling water
    },
    "water_conservation": {
        "short_shower": 75,
        "per_unit": 45,
    },
    "carpooling": {
        "per_unit": 0,
    },
    "plant_based_meal": {
        "per_unit": 150,
    },
    "compost": {
        "per_unit": 5,
    },
    "led_bulb": {
        "per_unit": 0.5,
    },
    "shorter_shower": {
        "per_unit": 10,
    },
}

# Types missing here preserve no trees
TREES_PRESERVED: Dict[str, RateData] = {
    "recycling": {
        "paper": 0.017,     # trees per kg of paper
        "per_unit": 0.05,
    },
    "biking": {
        "per_unit": 0.002,
    },
    "walking": {
        "per_unit": 0.001,
    },
    "public_transport": {
        "per_unit": 0.003,
    },
    "reusable_bag": {
        "per_unit": 0.0001,
    },
    "energy_saving": {
        "per_unit": 0.004,
    },
    "water_conservation": {
        "per_unit": 0.002,
    },
}

# Points multipliers for gamification
POINT_MULTIPLIERS: Dict[str, float] = {
    "biking": 1.2,
    "walking": 1.1,
    "public_transport": 1.1,
    "recycling": 1.0,
    "reusable_bag": 1.0,
    "energy_saving": 1.3,
    "water_conservation": 1.2,
    "carpooling": 1.2,
    "plant_based_meal": 1.4,
    "compost": 1.1,
    "led_bulb": 1.0,
    "shorter_shower": 1.1,
}

ACTION_CATEGORIES: Dict[str, str] = {
    "biking": "Transportation",
    "walking": "Transportation",
    "public_transport": "Transportation",
    "carpooling": "Transportation",
    "recycling": "Waste",
    "reusable_bag": "Waste",
    "compost": "Waste",
    "energy_saving": "Energy",
    "led_bulb": "Energy",
    "water_conservation": "Water",
    "shorter_shower": "Water",
    "plant_based_meal": "Food",
}

DEFAULT_CATEGORY = "Other"


def get_default_rate_config() -> Dict[str, Any]:
    """
    Return the bundled rates in the same shape as a JSON override file.

    Returns:
        Dict with version, blend, shower baseline and the three metric tables
    """
    return {
        "version": RATE_TABLE_VERSION,
        "recycling_blend": dict(RECYCLING_BLEND),
        "shower_baseline_minutes": SHOWER_BASELINE_MINUTES,
        "co2": {k: dict(v) for k, v in CO2_SAVINGS.items()},
        "water": {k: dict(v) for k, v in WATER_SAVINGS.items()},
        "trees": {k: dict(v) for k, v in TREES_PRESERVED.items()},
    }
