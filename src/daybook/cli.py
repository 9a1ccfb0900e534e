"""daybook CLI - day planner and habit tracker."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.aggregate import Scorecard
from .core.buckets import Granularity, navigate, window_label
from .core.completion import round_percent
from .core.errors import DaybookError
from .core.models import ALL_CATEGORIES, DailyLog, TrackerType
from .planner import Planner, get_planner

VIEWS = [g.value for g in Granularity]


def _parse_date(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date {value!r}, expected YYYY-MM-DD")


def _planner() -> Planner:
    return get_planner(load_config())


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _format_value(value, tracker_type: TrackerType | None = None) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, (int, float)):
        if tracker_type in (None, TrackerType.PERCENT):
            return f"{round_percent(value)}%"
        return f"{value:g}"
    return str(value)


date_option = click.option(
    "--date", "-d", "target_date", default=None, help="Date (YYYY-MM-DD), defaults to today"
)


@click.group()
@click.version_option(package_name="daybook")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """daybook - plan your day, track your goals."""
    level = logging.DEBUG if debug else getattr(logging, load_config().log_level, logging.WARNING)
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=level,
    )


# ============== Planner ==============


def _show_log(planner: Planner, log: DailyLog, as_json: bool) -> None:
    completion = planner.completion(log.date)
    if as_json:
        data = log.to_dict()
        data["completion"] = completion
        click.echo(json.dumps(data, indent=2))
        return

    day_type = next((dt.name for dt in planner.state.day_types if dt.id == log.day_type_id), None)
    click.echo(f"### {log.date.strftime('%A, %B %d')} - {round_percent(completion)}%")
    click.echo(f"Day type: {day_type or '(none)'}")
    if not log.tasks:
        click.echo("No tasks.")
        return

    categories = {c.id: c.name for c in planner.state.categories}
    for task in log.tasks:
        mark = "x" if task.completed else " "
        recurring = " (recurring)" if task.is_recurring else ""
        category = categories.get(task.category_id, task.category_id)
        click.echo(f"[{mark}] {task.text} [{category}]{recurring}  {task.id}")
        for subtask in task.subtasks:
            sub_mark = "x" if subtask.completed else " "
            click.echo(f"    [{sub_mark}] {subtask.text}  {subtask.id}")


@main.command()
@date_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def day(target_date: str | None, as_json: bool):
    """Show the task list for a day."""
    planner = _planner()
    try:
        log = planner.get_log(_parse_date(target_date))
    except DaybookError as e:
        _fail(e)
    _show_log(planner, log, as_json)


@main.command("select-type")
@click.argument("day_type")
@date_option
def select_type(day_type: str, target_date: str | None):
    """Choose the day type for a date (regenerates recurring tasks)."""
    planner = _planner()
    try:
        log = planner.select_day_type(_parse_date(target_date), day_type)
    except DaybookError as e:
        _fail(e)
    _show_log(planner, log, as_json=False)


@main.command()
@click.argument("text")
@click.option("--category", "-c", default="uncategorized", help="Category name or id")
@date_option
def add(text: str, category: str, target_date: str | None):
    """Add a one-off task."""
    planner = _planner()
    try:
        task = planner.add_task(_parse_date(target_date), text, category)
    except DaybookError as e:
        _fail(e)
    click.echo(f"Added {task.text!r} ({task.id})")


@main.command()
@click.argument("task_id")
@click.option("--subtask", "-s", "subtask_id", default=None, help="Toggle a subtask instead")
@date_option
def toggle(task_id: str, subtask_id: str | None, target_date: str | None):
    """Mark a task or subtask done/undone."""
    planner = _planner()
    try:
        log = planner.toggle_task(_parse_date(target_date), task_id, subtask_id)
    except DaybookError as e:
        _fail(e)
    _show_log(planner, log, as_json=False)


@main.command()
@click.argument("task_id")
@date_option
def delete(task_id: str, target_date: str | None):
    """Delete a task."""
    planner = _planner()
    try:
        planner.delete_task(_parse_date(target_date), task_id)
    except DaybookError as e:
        _fail(e)
    click.echo("Deleted.")


@main.command("add-subtask")
@click.argument("task_id")
@click.argument("text")
@date_option
def add_subtask(task_id: str, text: str, target_date: str | None):
    """Add a subtask to a task."""
    planner = _planner()
    try:
        log = planner.add_subtask(_parse_date(target_date), task_id, text)
    except DaybookError as e:
        _fail(e)
    _show_log(planner, log, as_json=False)


# ============== Master data ==============


@main.command()
def categories():
    """List categories."""
    for category in _planner().state.categories:
        click.echo(f"{category.name:20} {category.color}  {category.id}")


@main.command("day-types")
def day_types():
    """List day types."""
    planner = _planner()
    names = {c.id: c.name for c in planner.state.categories}
    for dt in planner.state.day_types:
        included = ", ".join(sorted(names.get(c, c) for c in dt.category_ids)) or "(no categories)"
        click.echo(f"{dt.name:20} {included}  {dt.id}")


@main.command()
def trackers():
    """List goal trackers."""
    planner = _planner()
    names = {c.id: c.name for c in planner.state.categories}
    for t in planner.state.trackers:
        if t.linked_category_id == ALL_CATEGORIES:
            source = "all tasks"
        elif t.linked_category_id:
            source = names.get(t.linked_category_id, t.linked_category_id)
        else:
            source = "manual"
        target = f" /{t.target:g}" if t.target is not None else ""
        click.echo(f"{t.name:20} {t.type.value:8}{target} ({source})  {t.id}")


# ============== Statistics ==============


@main.command("set")
@click.argument("tracker")
@click.argument("value")
@date_option
def set_value(tracker: str, value: str, target_date: str | None):
    """Enter a value for a tracker ("global" for overall completion); "" clears it."""
    planner = _planner()
    on = _parse_date(target_date)
    try:
        stored = planner.enter_value(on, tracker, value)
    except DaybookError as e:
        _fail(e)
    if stored is None:
        click.echo(f"Cleared {tracker} on {on.isoformat()}.")
    else:
        click.echo(f"Set {tracker} on {on.isoformat()} to {_format_value(stored, TrackerType.COUNT)}.")


def _show_scorecard(card: Scorecard, ref: date, as_json: bool) -> None:
    if as_json:
        click.echo(
            json.dumps(
                {
                    "view": card.granularity.value,
                    "columns": [b.key for b in card.columns],
                    "rows": [{"metric": r.key, "name": r.name, "cells": r.cells} for r in card.rows],
                },
                indent=2,
            )
        )
        return

    click.echo(window_label(card.granularity, ref))
    if not card.columns:
        click.echo("No data before 2025.")
        return
    header = f"{'':20}" + "".join(f"{b.label:>16}" for b in card.columns)
    click.echo(header)
    for row in card.rows:
        tracker_type = row.tracker.type if row.tracker else None
        cells = "".join(f"{_format_value(c, tracker_type):>16}" for c in row.cells)
        click.echo(f"{row.name[:20]:20}{cells}")


@main.command()
@click.option("--view", "-v", type=click.Choice(VIEWS), default=None, help="Time resolution")
@click.option("--ref", "ref_date", default=None, help="Reference date (YYYY-MM-DD)")
@click.option("--prev", "back", count=True, help="Page back from the reference date (repeatable)")
@click.option("--next", "forward", count=True, help="Page forward from the reference date (repeatable)")
@click.option("--start", default=None, help="Custom range start (YYYY-MM-DD)")
@click.option("--end", default=None, help="Custom range end (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def table(
    view: str | None,
    ref_date: str | None,
    back: int,
    forward: int,
    start: str | None,
    end: str | None,
    as_json: bool,
):
    """Show the performance scorecard."""
    config = load_config()
    planner = get_planner(config)
    granularity = Granularity(view) if view else config.table_view
    ref = _parse_date(ref_date)
    steps = forward - back
    for _ in range(abs(steps)):
        ref = navigate(granularity, ref, 1 if steps > 0 else -1)
    card = planner.scorecard(
        granularity,
        ref,
        start=_parse_date(start) if start else None,
        end=_parse_date(end) if end else None,
    )
    _show_scorecard(card, ref, as_json)


@main.command()
@click.option("--view", "-v", type=click.Choice(VIEWS), default=None, help="Time resolution")
@click.option("--metric", "-m", default=None, help="Tracker name or id (default: global completion)")
@click.option("--start", default=None, help="Custom range start (YYYY-MM-DD)")
@click.option("--end", default=None, help="Custom range end (YYYY-MM-DD)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def graph(view: str | None, metric: str | None, start: str | None, end: str | None, as_json: bool):
    """Show a trend series for a metric."""
    config = load_config()
    planner = get_planner(config)
    granularity = Granularity(view) if view else config.graph_view
    try:
        points = planner.trend(
            granularity,
            metric,
            start=_parse_date(start) if start else None,
            end=_parse_date(end) if end else None,
        )
    except (DaybookError, ValueError) as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps([{"label": p.label, "value": p.value} for p in points], indent=2))
        return

    if not points:
        click.echo("No dates in range.")
        return
    peak = max((p.value for p in points), default=0) or 1
    for point in points:
        bar = "#" * int(round(30 * point.value / peak)) if point.value > 0 else ""
        click.echo(f"{point.label:>16} {point.value:>6} {bar}")


if __name__ == "__main__":
    main()
