from datetime import datetime, timedelta

import pytest

from planner_app.planner.models import Activity, ActivityLike, Plan


def test_default_activity_spans_one_hour():
    now = datetime(2024, 5, 6, 9, 30)
    activity = Activity.default(now)
    assert activity.name == "Default Activity"
    assert activity.description == "Default Description"
    assert activity.start_time == now
    assert activity.end_time - activity.start_time == timedelta(hours=1)
    assert activity.index == 1


def test_activity_satisfies_protocol():
    act = Activity(name="Read", start_time=datetime(2024, 1, 1, 8), end_time=datetime(2024, 1, 1, 9))
    assert isinstance(act, ActivityLike)
    assert act.end_time - act.start_time == timedelta(hours=1)


def test_activity_from_dict_handles_missing_description():
    act = Activity.from_dict(
        {"index": 2, "name": "Gym", "start_time": "2024-01-01T08:00:00", "end_time": "2024-01-01T09:00:00"}
    )
    assert act.index == 2
    assert act.description == ""
    assert act.start_time == datetime(2024, 1, 1, 8)


def test_plan_to_dict_keeps_order():
    plan = Plan(title="Monday")
    plan.activities.append(Activity("A", datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9), index=1))
    plan.activities.append(Activity("B", datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 11), index=2))
    data = plan.to_dict()
    assert data["title"] == "Monday"
    assert [row["name"] for row in data["activities"]] == ["A", "B"]
    assert Plan.from_dict(data) == plan


def test_plan_from_dict_rejects_non_list_activities():
    with pytest.raises(TypeError):
        Plan.from_dict({"title": "Bad", "activities": "nope"})
