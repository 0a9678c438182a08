"""Controllers orchestrating the plan store, statistics, and exports."""
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from .models import Activity, ActivityLike, Plan, PlanStatistics
from .statistics import plan_statistics
from .storage import DEFAULT_DATA_FILE, PlanFileError, PlanStore

if TYPE_CHECKING:
    from reports.excel_export import ExcelExporter

LOGGER = logging.getLogger(__name__)


CONFIG_DIR = Path.home() / ".daily_planner"
CONFIG_FILE_NAME = "config.toml"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default_config.toml"


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("\"", "\\\"")
    return f"\"{escaped}\""


class InvalidTimeRangeError(ValueError):
    """Raised when an activity would end before (or when) it starts."""


@dataclass
class AppConfig:
    data_file: str = DEFAULT_DATA_FILE
    export_path: str = "plans.xlsx"
    autoload: bool = True
    autosave: bool = False
    last_selected_plan: Optional[int] = None

    @classmethod
    def from_toml(cls, data: dict) -> "AppConfig":
        raw_last_plan = data.get("last_selected_plan")
        last_plan: Optional[int]
        if raw_last_plan in (None, "", "null"):
            last_plan = None
        else:
            try:
                last_plan = int(raw_last_plan)
            except (TypeError, ValueError):
                last_plan = None
        return cls(
            data_file=data.get("data_file", DEFAULT_DATA_FILE) or DEFAULT_DATA_FILE,
            export_path=data.get("export_path", "plans.xlsx") or "plans.xlsx",
            autoload=bool(data.get("autoload", True)),
            autosave=bool(data.get("autosave", False)),
            last_selected_plan=last_plan,
        )

    def to_toml(self) -> str:
        last_plan_value = self.last_selected_plan if self.last_selected_plan is not None else '""'
        lines = [
            f"data_file = {_toml_string(self.data_file)}",
            f"export_path = {_toml_string(self.export_path)}",
            f"autoload = {str(bool(self.autoload)).lower()}",
            f"autosave = {str(bool(self.autosave)).lower()}",
            f"last_selected_plan = {last_plan_value}",
        ]
        return "\n".join(lines) + "\n"


class ConfigManager:
    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir is not None else CONFIG_DIR
        self.config_file = self.config_dir / CONFIG_FILE_NAME
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config = self._load()

    def _load(self) -> AppConfig:
        if self.config_file.exists():
            with open(self.config_file, "rb") as fh:
                data = tomllib.load(fh)
                return AppConfig.from_toml(data)
        with open(DEFAULT_CONFIG_PATH, "rb") as fh:
            data = tomllib.load(fh)
            config = AppConfig.from_toml(data)
            self.save(config)
            return config

    def save(self, config: Optional[AppConfig] = None) -> None:
        cfg = config or self.config
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(cfg.to_toml(), encoding="utf-8")
        LOGGER.info("Saved configuration to %s", self.config_file)


class AppController:
    def __init__(self, store: PlanStore, exporter: ExcelExporter, config_manager: ConfigManager) -> None:
        self.store = store
        self.exporter = exporter
        self.config_manager = config_manager

    @property
    def data_path(self) -> Path:
        return Path(self.config_manager.config.data_file)

    def _after_change(self) -> None:
        if self.config_manager.config.autosave:
            self.save()

    # Plan management
    def list_plans(self) -> List[Plan[ActivityLike]]:
        return self.store.get_all_plans()

    def get_plan(self, position: int) -> Plan[ActivityLike]:
        plans = self.store.get_all_plans()
        if position < 0 or position >= len(plans):
            raise IndexError(f"No plan at position {position}")
        return plans[position]

    def create_plan(self, title: str) -> Plan[ActivityLike]:
        if not title or not title.strip():
            raise ValueError("Plan title must not be empty.")
        plan = self.store.create_plan(title)
        self._remember_selection(len(self.store.get_all_plans()) - 1)
        self._after_change()
        return plan

    def select_plan(self, position: int) -> Plan[ActivityLike]:
        plan = self.get_plan(position)
        self._remember_selection(position)
        return plan

    def selected_plan(self) -> Plan[ActivityLike]:
        position = self.config_manager.config.last_selected_plan
        if position is None:
            raise IndexError("No plan selected")
        return self.get_plan(position)

    def _remember_selection(self, position: int) -> None:
        config = self.config_manager.config
        if config.last_selected_plan != position:
            config.last_selected_plan = position
            self.config_manager.save()

    # Activity management
    def add_activity(
        self,
        plan: Plan[ActivityLike],
        name: str,
        start_time: datetime,
        end_time: datetime,
        description: str = "",
    ) -> Activity:
        if not name or not name.strip():
            raise ValueError("Activity name must not be empty.")
        if start_time >= end_time:
            raise InvalidTimeRangeError("Start time must be before end time.")
        activity = Activity(name=name, description=description, start_time=start_time, end_time=end_time)
        self.store.add_activity(plan, activity)
        self._after_change()
        return activity

    def remove_activity(self, plan: Plan[ActivityLike], activity: ActivityLike) -> None:
        self.store.remove_activity(plan, activity)
        self._after_change()

    # Statistics
    def plan_statistics(self, plan: Plan[ActivityLike]) -> PlanStatistics:
        return plan_statistics(plan)

    def format_statistics(self, plan: Plan[ActivityLike]) -> str:
        stats = self.plan_statistics(plan)
        return (
            f"Number of Activities: {stats.activity_count}\n"
            f"Average Duration: {stats.avg_duration_minutes:.2f} minutes"
        )

    # Persistence
    def save(self) -> Path:
        return self.store.save_plans_to_file(self.data_path)

    def load(self) -> None:
        try:
            self.store.load_plans_from_file(self.data_path)
        except PlanFileError:
            LOGGER.exception("Could not load plans from %s", self.data_path)
            raise

    def export_statistics(self) -> Path:
        return self.exporter.export(self.store.get_all_plans())
