"""Data models for the daily planner application."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Generic, List, Optional, Protocol, TypeVar, runtime_checkable

DEFAULT_ACTIVITY_NAME = "Default Activity"
DEFAULT_ACTIVITY_DESCRIPTION = "Default Description"


@runtime_checkable
class ActivityLike(Protocol):
    """Anything a plan can hold: an indexed, named time range."""

    index: int
    name: str
    description: str
    start_time: datetime
    end_time: datetime


A = TypeVar("A", bound=ActivityLike)


def activity_to_dict(activity: ActivityLike) -> dict:
    return {
        "index": activity.index,
        "name": activity.name,
        "description": activity.description,
        "start_time": activity.start_time.isoformat(),
        "end_time": activity.end_time.isoformat(),
    }


@dataclass
class Activity:
    """Represents a single scheduled activity inside a plan."""

    name: str
    start_time: datetime
    end_time: datetime
    description: str = ""
    index: int = 0

    @classmethod
    def default(cls, now: Optional[datetime] = None) -> "Activity":
        start = now or datetime.now()
        return cls(
            name=DEFAULT_ACTIVITY_NAME,
            description=DEFAULT_ACTIVITY_DESCRIPTION,
            start_time=start,
            end_time=start + timedelta(hours=1),
            index=1,
        )

    def to_dict(self) -> dict:
        return activity_to_dict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        return cls(
            index=int(data["index"]),
            name=data["name"],
            description=data.get("description") or "",
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=datetime.fromisoformat(data["end_time"]),
        )


@dataclass
class Plan(Generic[A]):
    """A titled, ordered list of activities."""

    title: str
    activities: List[A] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "activities": [activity_to_dict(act) for act in self.activities],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Plan[Activity]":
        activities = data.get("activities", [])
        if not isinstance(activities, list):
            raise TypeError("activities must be a list")
        return cls(title=data["title"], activities=[Activity.from_dict(row) for row in activities])


@dataclass
class PlanStatistics:
    """Aggregated statistics for a single plan."""

    plan_title: str
    activity_count: int
    avg_duration_minutes: float
