from datetime import datetime

import pytest

from planner_app.planner.controllers import AppConfig, AppController, InvalidTimeRangeError
from planner_app.planner.storage import PlanFileError, PlanStore


class DummyExporter:
    def __init__(self) -> None:
        self.exported = None

    def export(self, plans, *_args, **_kwargs):
        self.exported = list(plans)
        return "test.xlsx"


class DummyConfigManager:
    def __init__(self, data_file, autosave=False) -> None:
        self.config = AppConfig(data_file=str(data_file), export_path="plans.xlsx", autosave=autosave)

    def save(self, config=None):
        self.config = config or self.config


@pytest.fixture
def controller(tmp_path):
    return AppController(PlanStore(), DummyExporter(), DummyConfigManager(tmp_path / "plans.dat"))


def test_create_plan_rejects_blank_title(controller):
    with pytest.raises(ValueError):
        controller.create_plan("   ")
    assert controller.list_plans() == []


def test_add_activity_validates_time_range(controller):
    plan = controller.create_plan("Monday")
    start = datetime(2024, 1, 1, 9)
    with pytest.raises(InvalidTimeRangeError, match="Start time must be before end time."):
        controller.add_activity(plan, "Backwards", start, start)
    assert len(plan.activities) == 1

    act = controller.add_activity(plan, "Gym", datetime(2024, 1, 1, 8), start, description="cardio")
    assert act.index == 2
    assert act.description == "cardio"


def test_add_activity_requires_name(controller):
    plan = controller.create_plan("Monday")
    with pytest.raises(ValueError):
        controller.add_activity(plan, "", datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9))


def test_get_plan_out_of_range(controller):
    controller.create_plan("Only")
    assert controller.get_plan(0).title == "Only"
    with pytest.raises(IndexError):
        controller.get_plan(1)
    with pytest.raises(IndexError):
        controller.get_plan(-1)


def test_format_statistics(controller):
    plan = controller.create_plan("Monday")
    controller.remove_activity(plan, plan.activities[0])
    controller.add_activity(plan, "Read", datetime(2024, 1, 1, 8), datetime(2024, 1, 1, 9, 30))
    controller.add_activity(plan, "Walk", datetime(2024, 1, 1, 10), datetime(2024, 1, 1, 10, 20))
    assert controller.format_statistics(plan) == "Number of Activities: 2\nAverage Duration: 55.00 minutes"


def test_save_and_load_through_config(tmp_path):
    data_file = tmp_path / "plans.dat"
    first = AppController(PlanStore(), DummyExporter(), DummyConfigManager(data_file))
    first.create_plan("Saved")
    assert first.save() == data_file

    second = AppController(PlanStore(), DummyExporter(), DummyConfigManager(data_file))
    second.load()
    assert [p.title for p in second.list_plans()] == ["Saved"]


def test_autosave_writes_after_changes(tmp_path):
    data_file = tmp_path / "plans.dat"
    controller = AppController(PlanStore(), DummyExporter(), DummyConfigManager(data_file, autosave=True))
    controller.create_plan("Auto")
    assert data_file.exists()


def test_load_reraises_malformed_file(tmp_path, controller):
    (tmp_path / "plans.dat").write_text("not json", encoding="utf-8")
    controller.create_plan("Kept")
    with pytest.raises(PlanFileError):
        controller.load()
    assert [p.title for p in controller.list_plans()] == ["Kept"]


def test_export_statistics_passes_plans(controller):
    controller.create_plan("A")
    assert controller.export_statistics() == "test.xlsx"
    assert [p.title for p in controller.exporter.exported] == ["A"]


def test_selection_is_remembered_in_config(controller):
    with pytest.raises(IndexError):
        controller.selected_plan()

    controller.create_plan("Monday")
    tuesday = controller.create_plan("Tuesday")
    assert controller.config_manager.config.last_selected_plan == 1
    assert controller.selected_plan() is tuesday

    monday = controller.select_plan(0)
    assert monday.title == "Monday"
    assert controller.config_manager.config.last_selected_plan == 0
    assert controller.selected_plan() is monday

    with pytest.raises(IndexError):
        controller.select_plan(5)
    assert controller.config_manager.config.last_selected_plan == 0
