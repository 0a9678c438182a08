"""Application entry point for the Daily Planner."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from planner_app.planner import __version__
from planner_app.planner.controllers import CONFIG_DIR, AppController, ConfigManager
from planner_app.planner.storage import PlanFileError, PlanStore
from reports.excel_export import ExcelExporter

LOG_DIR = CONFIG_DIR / "logs"
LOG_FILE = LOG_DIR / "app.log"

TIME_FORMAT = "%d/%m/%Y %H:%M"


def configure_logging(verbose: bool = False) -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(LOG_FILE, maxBytes=1024 * 1024, backupCount=3)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler, logging.StreamHandler()],
    )
    logging.info("Daily Planner v%s starting", __version__)


def build_controller(config_manager: ConfigManager) -> AppController:
    store = PlanStore()
    exporter = ExcelExporter(Path(config_manager.config.export_path))
    controller = AppController(store, exporter, config_manager)
    if config_manager.config.autoload:
        controller.load()
    return controller


def parse_time(value: str) -> datetime:
    try:
        return datetime.strptime(value, TIME_FORMAT)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected dd/mm/yyyy HH:MM, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="daily-planner", description="Manage daily activity plans.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="show plans and their activities")

    create = sub.add_parser("create", help="create a plan")
    create.add_argument("title")

    add = sub.add_parser("add", help="add an activity to a plan")
    add.add_argument("plan", type=int, help="plan number as shown by `list`")
    add.add_argument("name")
    add.add_argument("start", type=parse_time, help="dd/mm/yyyy HH:MM")
    add.add_argument("end", type=parse_time, help="dd/mm/yyyy HH:MM")
    add.add_argument("--description", default="")

    remove = sub.add_parser("remove", help="remove an activity from a plan")
    remove.add_argument("plan", type=int)
    remove.add_argument("index", type=int, help="activity index within the plan")

    stats = sub.add_parser("stats", help="show statistics for a plan")
    stats.add_argument("plan", type=int, nargs="?", help="defaults to the last plan used")

    sub.add_parser("export", help="export plans and statistics to Excel")
    return parser


def render_plans(controller: AppController) -> str:
    lines: List[str] = []
    for number, plan in enumerate(controller.list_plans(), start=1):
        lines.append(f"{number}. {plan.title}")
        for act in plan.activities:
            lines.append(
                f"   [{act.index}] {act.name}  "
                f"{act.start_time.strftime(TIME_FORMAT)} - {act.end_time.strftime(TIME_FORMAT)}"
                + (f"  ({act.description})" if act.description else "")
            )
    return "\n".join(lines) if lines else "No plans yet."


def run_command(controller: AppController, args: argparse.Namespace) -> str:
    if args.command == "list":
        return render_plans(controller)
    if args.command == "create":
        plan = controller.create_plan(args.title)
        controller.save()
        return f"Created plan {plan.title!r}"
    if args.command == "add":
        plan = controller.select_plan(args.plan - 1)
        act = controller.add_activity(plan, args.name, args.start, args.end, description=args.description)
        controller.save()
        return f"Added {act.name!r} to {plan.title!r} at index {act.index}"
    if args.command == "remove":
        plan = controller.select_plan(args.plan - 1)
        matches = [act for act in plan.activities if act.index == args.index]
        if not matches:
            raise IndexError(f"No activity with index {args.index} in {plan.title!r}")
        controller.remove_activity(plan, matches[0])
        controller.save()
        return f"Removed activity {args.index} from {plan.title!r}"
    if args.command == "stats":
        plan = controller.selected_plan() if args.plan is None else controller.select_plan(args.plan - 1)
        return controller.format_statistics(plan)
    if args.command == "export":
        return f"Exported to {controller.export_statistics()}"
    raise ValueError(f"Unknown command {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    try:
        controller = build_controller(ConfigManager())
        print(run_command(controller, args))
    except (OSError, PlanFileError, ValueError, IndexError) as exc:
        logging.getLogger(__name__).error("%s failed: %s", args.command, exc)
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
