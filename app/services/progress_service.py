"""
Progress Service

Re-derives goal progress from stored action impact and applies logged
actions to challenge progress.
"""

from datetime import date, timedelta
from typing import Iterable, List, Optional

from ..schemas.impact_schemas import (
    Challenge,
    ChallengeParticipant,
    ChallengeProgressUpdate,
    Goal,
    GoalCategory,
    GoalProgress,
    GoalStatus,
    LoggedAction,
)

GENERAL_CHALLENGE = "general"

# Challenge units where progress grows by the logged quantity
QUANTITY_UNITS = frozenset({
    "times", "km", "miles", "kg", "lbs", "hours", "minutes", "liters",
})


def _in_timeframe(action: LoggedAction, goal: Goal) -> bool:
    day = action.logged_at.date()
    return goal.start_date <= day <= goal.end_date


def calculate_streak(action_days: Iterable[date], start_date: date, today: date) -> int:
    """
    Consecutive days with at least one action, counting back from today.

    Days on or before start_date are not counted.
    """
    days = set(action_days)
    streak = 0
    check = today
    while check > start_date and check in days:
        streak += 1
        check -= timedelta(days=1)
    return streak


def compute_goal_progress(
    goal: Goal,
    actions: Iterable[LoggedAction],
    today: Optional[date] = None
) -> GoalProgress:
    """
    Re-derive a goal's progress from the user's action records.

    Args:
        goal: Goal to evaluate
        actions: The goal owner's action records
        today: Reference day (defaults to today)

    Returns:
        GoalProgress with current value, capped percentage, status and milestones
    """
    if today is None:
        today = date.today()

    relevant = [a for a in actions if _in_timeframe(a, goal)]
    if goal.category == GoalCategory.SPECIFIC_ACTION and goal.target_action_type:
        relevant = [a for a in relevant if a.action_type == goal.target_action_type]

    if goal.category == GoalCategory.CO2_REDUCTION:
        current = round(sum(a.impact.co2_saved_kg for a in relevant), 3)
    elif goal.category == GoalCategory.WATER_SAVING:
        current = round(sum(a.impact.water_saved_liters for a in relevant), 2)
    elif goal.category == GoalCategory.SPECIFIC_ACTION:
        current = sum(a.quantity for a in relevant)
    elif goal.category == GoalCategory.STREAK:
        current = calculate_streak(
            (a.logged_at.date() for a in relevant), goal.start_date, today
        )
    else:
        current = len(relevant)

    percentage = 0.0
    status = goal.status
    if goal.target_value > 0:
        percentage = min(current / goal.target_value * 100, 100.0)
        if percentage >= 100:
            status = GoalStatus.COMPLETED
        elif goal.end_date < today and status == GoalStatus.ACTIVE:
            status = GoalStatus.FAILED

    return GoalProgress(
        current=current,
        percentage=round(percentage, 1),
        status=status,
        milestones_reached=[m for m in goal.milestones if current >= m],
    )


def challenge_progress_increment(challenge: Challenge, action_type: str, quantity: float = 1.0) -> float:
    """How much one logged action advances a challenge."""
    if challenge.category != GENERAL_CHALLENGE and challenge.category != action_type:
        return 0.0
    if challenge.target_unit == "actions":
        return 1.0
    if challenge.target_unit in QUANTITY_UNITS:
        return quantity
    return 1.0


def apply_challenge_progress(
    participant: ChallengeParticipant,
    challenge: Challenge,
    action_type: str,
    quantity: float = 1.0,
    today: Optional[date] = None
) -> ChallengeProgressUpdate:
    """
    Apply one logged action to a participant's challenge progress.

    Args:
        participant: Current standing (not modified)
        challenge: Challenge being progressed
        action_type: Type of the logged action
        quantity: Quantity of the logged action
        today: Completion date to record (defaults to today)

    Returns:
        ChallengeProgressUpdate with the new standing and any reward earned
    """
    increment = challenge_progress_increment(challenge, action_type, quantity)
    progress = participant.progress + increment

    newly_completed = not participant.completed and progress >= challenge.target_value
    updated = participant.model_copy(update={"progress": progress})
    if newly_completed:
        updated = updated.model_copy(update={
            "completed": True,
            "completed_date": today or date.today(),
        })

    return ChallengeProgressUpdate(
        participant=updated,
        increment=increment,
        newly_completed=newly_completed,
        reward_points=challenge.reward_points if newly_completed else 0,
    )


def challenge_percentage(participant: ChallengeParticipant, challenge: Challenge) -> float:
    """Share of the target reached, capped at 100."""
    return round(min(100.0, participant.progress / challenge.target_value * 100), 1)


def rank_participants(participants: Iterable[ChallengeParticipant]) -> List[ChallengeParticipant]:
    """Completed participants first, then by progress."""
    return sorted(participants, key=lambda p: (not p.completed, -p.progress, p.user_id))
