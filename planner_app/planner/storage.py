"""In-memory plan collection with whole-file persistence."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from . import events
from .events import EventBus
from .models import Activity, ActivityLike, Plan

LOGGER = logging.getLogger(__name__)

DEFAULT_DATA_FILE = "plans.dat"

PathLike = Union[str, Path]


class PlanFileError(ValueError):
    """Raised when a saved plans file cannot be turned back into plans."""


def dump_plans(plans: List[Plan[ActivityLike]]) -> bytes:
    payload = {"plans": [plan.to_dict() for plan in plans]}
    return json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")


def parse_plans(raw: bytes) -> List[Plan[Activity]]:
    try:
        data = json.loads(raw)
        rows = data["plans"]
        if not isinstance(rows, list):
            raise TypeError("plans must be a list")
        return [Plan.from_dict(row) for row in rows]
    except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as exc:
        raise PlanFileError(f"Unreadable plans data: {exc}") from exc


class PlanStore:
    """Owns every plan and keeps activity indexes contiguous."""

    def __init__(self, bus: Optional[EventBus] = None) -> None:
        self.plans: List[Plan[ActivityLike]] = []
        self.bus = bus or EventBus()

    def create_plan(self, title: str) -> Plan[ActivityLike]:
        plan: Plan[ActivityLike] = Plan(title=title)
        self.plans.append(plan)
        LOGGER.info("Created plan %r", title)
        self.add_activity(plan, Activity.default())
        self.bus.publish(events.PLAN_CREATED, plan)
        return plan

    def add_activity(self, plan: Plan[ActivityLike], activity: ActivityLike) -> None:
        activity.index = len(plan.activities) + 1
        plan.activities.append(activity)
        LOGGER.debug("Added activity %r to %r at %s", activity.name, plan.title, activity.index)
        self.bus.publish(events.ACTIVITY_ADDED, (plan, activity))

    def remove_activity(self, plan: Plan[ActivityLike], activity: ActivityLike) -> None:
        try:
            plan.activities.remove(activity)
        except ValueError:
            LOGGER.debug("Activity %r not in plan %r, nothing removed", activity.name, plan.title)
            return
        self._renumber(plan)
        LOGGER.debug("Removed activity %r from %r", activity.name, plan.title)
        self.bus.publish(events.ACTIVITY_REMOVED, (plan, activity))

    @staticmethod
    def _renumber(plan: Plan[ActivityLike]) -> None:
        for position, act in enumerate(plan.activities, start=1):
            act.index = position

    def get_all_plans(self) -> List[Plan[ActivityLike]]:
        return self.plans

    def save_plans_to_file(self, path: PathLike) -> Path:
        target = Path(path)
        payload = dump_plans(self.plans)
        with target.open("wb") as fh:
            fh.write(payload)
        LOGGER.info("Saved %s plans to %s", len(self.plans), target)
        self.bus.publish(events.PLANS_SAVED, target)
        return target

    def load_plans_from_file(self, path: PathLike) -> None:
        source = Path(path)
        if not source.exists():
            LOGGER.debug("No plans file at %s, keeping current plans", source)
            return
        with source.open("rb") as fh:
            raw = fh.read()
        self.plans = parse_plans(raw)
        LOGGER.info("Loaded %s plans from %s", len(self.plans), source)
        self.bus.publish(events.PLANS_LOADED, self.plans)
