"""Excel export utilities for plans and their statistics."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

import pandas as pd

from planner_app.planner.statistics import plan_statistics

LOGGER = logging.getLogger(__name__)


def _naive(value: datetime) -> datetime:
    """Excel cannot hold offsets; store aware times as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ExcelExporter:
    def __init__(self, export_path: Path):
        self.export_path = Path(export_path)

    def export(self, plans: Iterable) -> Path:
        """Write every activity plus per-plan stats to a fresh workbook."""
        plans = list(plans)
        rows = []
        for plan in plans:
            for act in plan.activities:
                rows.append(
                    (
                        plan.title,
                        act.index,
                        act.name,
                        act.description,
                        _naive(act.start_time),
                        _naive(act.end_time),
                        (act.end_time - act.start_time).total_seconds() / 60.0,
                    )
                )
        activities_df = pd.DataFrame(
            rows,
            columns=["Plan", "Index", "Name", "Description", "Start", "End", "DurationMinutes"],
        )

        stats = [plan_statistics(plan) for plan in plans]
        stats_df = pd.DataFrame(
            [(s.plan_title, s.activity_count, s.avg_duration_minutes) for s in stats],
            columns=["Plan", "ActivityCount", "AverageDurationMinutes"],
        )

        self.export_path.parent.mkdir(parents=True, exist_ok=True)
        with pd.ExcelWriter(self.export_path, engine="openpyxl", mode="w") as writer:
            activities_df.to_excel(writer, sheet_name="Activities", index=False)
            stats_df.to_excel(writer, sheet_name="Stats", index=False)
            meta_df = pd.DataFrame([[datetime.now(), len(plans)]], columns=["ExportedAt", "PlanCount"])
            meta_df.to_excel(writer, sheet_name="Meta", index=False)
        LOGGER.info("Exported %s plans to %s", len(plans), self.export_path)
        return self.export_path
