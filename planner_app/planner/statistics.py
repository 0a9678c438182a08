"""Read-only aggregations over a plan."""
from __future__ import annotations

from .models import ActivityLike, Plan, PlanStatistics


def count_activities(plan: Plan[ActivityLike]) -> int:
    return len(plan.activities)


def average_duration_minutes(plan: Plan[ActivityLike]) -> float:
    """Mean activity length in minutes, 0 for an empty plan."""
    if not plan.activities:
        return 0
    total = sum((act.end_time - act.start_time).total_seconds() / 60.0 for act in plan.activities)
    return total / len(plan.activities)


def plan_statistics(plan: Plan[ActivityLike]) -> PlanStatistics:
    return PlanStatistics(
        plan_title=plan.title,
        activity_count=count_activities(plan),
        avg_duration_minutes=average_duration_minutes(plan),
    )
