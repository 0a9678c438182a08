"""Minimal observer bus used to tell views that plan state changed.

Event names:
  plan.created      -> payload Plan
  activity.added    -> payload (Plan, Activity)
  activity.removed  -> payload (Plan, Activity)
  plans.loaded      -> payload list of Plan
  plans.saved       -> payload Path

Subscribers are callables taking ``(event_name, payload)``.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

LOGGER = logging.getLogger(__name__)

PLAN_CREATED = "plan.created"
ACTIVITY_ADDED = "activity.added"
ACTIVITY_REMOVED = "activity.removed"
PLANS_LOADED = "plans.loaded"
PLANS_SAVED = "plans.saved"

Callback = Callable[[str, Any], None]


class EventBus:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callback]] = defaultdict(list)

    def subscribe(self, event_name: str, callback: Callback) -> None:
        if callback not in self._subscribers[event_name]:
            self._subscribers[event_name].append(callback)

    def unsubscribe(self, event_name: str, callback: Callback) -> None:
        try:
            self._subscribers[event_name].remove(callback)
        except ValueError:
            pass

    def publish(self, event_name: str, payload: Any = None) -> None:
        for callback in list(self._subscribers.get(event_name, [])):
            try:
                callback(event_name, payload)
            except Exception:
                LOGGER.exception("Subscriber %r failed handling %s", callback, event_name)
