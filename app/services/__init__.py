"""
Services module for impact tracking system.
Contains business logic for impact estimation, aggregation, progress and gamification.
"""

from .impact_estimator import ImpactEstimator
from .impact_aggregator import ImpactAggregator
from .gamification_service import GamificationService
from .rate_table import RateTableError, load_rate_table

__all__ = [
    "ImpactEstimator",
    "ImpactAggregator",
    "GamificationService",
    "RateTableError",
    "load_rate_table"
]
