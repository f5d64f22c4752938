"""
Impact Aggregator Service

Aggregates logged action impact for users across different time periods.
Provides running totals, weekly summaries, comparisons and category breakdowns.

Works on action records supplied by the caller; storage is not handled here.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from ..schemas.impact_schemas import (
    CategoryBreakdown,
    ImpactResult,
    LoggedAction,
    PeriodSummary,
    UserImpactStats,
    WeeklySummaryResponse,
)
from .gamification_service import GamificationService, gamification_service


class ImpactAggregator:
    """
    Service for aggregating impact data.

    Handles running totals, weekly summaries, period comparisons and
    per-category statistics.
    """

    def __init__(self, gamification: Optional[GamificationService] = None):
        """
        Initialize the aggregator.

        Args:
            gamification: GamificationService instance (optional, for DI)
        """
        self._gamification = gamification or gamification_service

    def get_week_start(self, target_date: Optional[date] = None) -> date:
        """Get the Monday of the week containing target_date."""
        if target_date is None:
            target_date = date.today()
        # weekday() returns 0 for Monday, 6 for Sunday
        days_since_monday = target_date.weekday()
        return target_date - timedelta(days=days_since_monday)

    def accumulate(
        self,
        stats: UserImpactStats,
        impact: ImpactResult,
        points: int = 0
    ) -> UserImpactStats:
        """
        Add one action's impact to a user's running totals.

        Args:
            stats: Current totals (not modified)
            impact: Estimated impact of the new action
            points: Points earned by the new action

        Returns:
            New UserImpactStats
        """
        total_points = stats.total_points + points
        return UserImpactStats(
            total_actions=stats.total_actions + 1,
            total_co2_saved_kg=round(stats.total_co2_saved_kg + impact.co2_saved_kg, 3),
            total_water_saved_liters=round(stats.total_water_saved_liters + impact.water_saved_liters, 2),
            total_trees_preserved=round(stats.total_trees_preserved + impact.trees_preserved, 4),
            total_points=total_points,
            level=self._gamification.calculate_level(total_points),
        )

    def summarize(self, actions: Iterable[LoggedAction]) -> UserImpactStats:
        """Running totals rebuilt from a user's action records."""
        stats = UserImpactStats()
        for action in actions:
            stats = self.accumulate(stats, action.impact, action.points)
        return stats

    def get_period_summary(
        self,
        actions: Iterable[LoggedAction],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        period_name: str = "custom"
    ) -> PeriodSummary:
        """
        Get aggregated impact for a date range.

        Args:
            actions: Action records to consider
            start_date: Start of period (None for unbounded)
            end_date: End of period, inclusive (None for unbounded)
            period_name: Label for this period

        Returns:
            PeriodSummary with aggregated values
        """
        events = [
            a for a in actions
            if (start_date is None or a.logged_at.date() >= start_date)
            and (end_date is None or a.logged_at.date() <= end_date)
        ]

        return PeriodSummary(
            period=period_name,
            co2_kg=round(sum(e.impact.co2_saved_kg for e in events), 3),
            water_liters=round(sum(e.impact.water_saved_liters for e in events), 2),
            trees=round(sum(e.impact.trees_preserved for e in events), 4),
            points=sum(e.points for e in events),
            event_count=len(events),
            start_date=start_date,
            end_date=end_date
        )

    def get_weekly_summary(
        self,
        user_id: str,
        actions: Iterable[LoggedAction],
        today: Optional[date] = None
    ) -> WeeklySummaryResponse:
        """
        Get a weekly summary including comparisons.

        Args:
            user_id: User the actions belong to
            actions: The user's action records
            today: Reference day (defaults to today)

        Returns:
            WeeklySummaryResponse with this week, last week, all-time, and comparisons
        """
        actions = [a for a in actions if a.user_id == user_id]
        this_week_start = self.get_week_start(today)
        last_week_start = this_week_start - timedelta(days=7)
        this_week_end = this_week_start + timedelta(days=6)
        last_week_end = last_week_start + timedelta(days=6)

        this_week = self.get_period_summary(
            actions, this_week_start, this_week_end, "this_week"
        )
        last_week = self.get_period_summary(
            actions, last_week_start, last_week_end, "last_week"
        )
        all_time = self.get_period_summary(actions, period_name="all_time")

        # Percentage change only where last week has a baseline
        comparison = {}
        if last_week.co2_kg > 0:
            comparison["co2_kg_change"] = round(
                ((this_week.co2_kg - last_week.co2_kg) / last_week.co2_kg) * 100, 1
            )
        if last_week.water_liters > 0:
            comparison["water_liters_change"] = round(
                ((this_week.water_liters - last_week.water_liters) / last_week.water_liters) * 100, 1
            )
        if last_week.trees > 0:
            comparison["trees_change"] = round(
                ((this_week.trees - last_week.trees) / last_week.trees) * 100, 1
            )

        return WeeklySummaryResponse(
            user_id=user_id,
            this_week=this_week,
            last_week=last_week,
            all_time=all_time,
            comparison=comparison
        )

    def get_category_breakdown(self, actions: Iterable[LoggedAction]) -> List[CategoryBreakdown]:
        """Totals per action category, largest CO2 first."""
        totals: Dict[str, Dict[str, float]] = {}
        for action in actions:
            category = self._gamification.get_action_category(action.action_type)
            bucket = totals.setdefault(
                category, {"count": 0, "co2": 0.0, "water": 0.0, "trees": 0.0}
            )
            bucket["count"] += 1
            bucket["co2"] += action.impact.co2_saved_kg
            bucket["water"] += action.impact.water_saved_liters
            bucket["trees"] += action.impact.trees_preserved

        breakdown = [
            CategoryBreakdown(
                category=category,
                action_count=int(bucket["count"]),
                co2_kg=round(bucket["co2"], 3),
                water_liters=round(bucket["water"], 2),
                trees=round(bucket["trees"], 4),
            )
            for category, bucket in totals.items()
        ]
        breakdown.sort(key=lambda b: (-b.co2_kg, b.category))
        return breakdown


# Singleton instance for easy import
impact_aggregator = ImpactAggregator()
