"""
taskflow time - Track time spent on a task.

    taskflow time                    show entries for the active task
    taskflow time 1.1.0 --start      start a timer
    taskflow time --stop             stop it, adding to actual hours
    taskflow time --log 1.5          record hours without a timer
    taskflow time --estimate 4       set the estimate
"""

import logging

from taskflow.lib.config import ProjectConfig
from taskflow.lib.graph import require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.lib.tracking import log_time, running_entry, set_estimate, start_timer, stop_timer
from taskflow.lib.types import TaskFile

logger = logging.getLogger(__name__)


def _summary(task: TaskFile) -> list[str]:
    lines = [f"Time for T{task.id} - {task.title}"]
    if task.estimated_hours is not None:
        lines.append(f"  Estimated: {task.estimated_hours:g} hours")
    lines.append(f"  Spent:     {task.actual_hours or 0:.2f} hours")

    entries = task.time_entries or []
    if not entries:
        lines.append("  No time entries yet.")
        return lines

    lines.append("")
    for entry in entries:
        end = entry.get("end") or "running"
        hours = f"{entry['hours']:.2f}h" if entry.get("hours") is not None else "---"
        lines.append(f"  {entry['start']} - {end} ({hours})")
        if entry.get("note"):
            lines.append(f"    {entry['note']}")
    return lines


def cmd_time(args, config: ProjectConfig) -> CommandResult:
    mutating = args.start or args.stop or args.log is not None or args.estimate is not None

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        if args.task_id:
            loc = project.locate(args.task_id)
        else:
            loc = require_active_location(project.graph, action="track time")
        task = project.load_task(loc.task.id)

        if not mutating:
            next_steps = [] if running_entry(task) else [f"taskflow time {task.id} --start"]
            return success("\n".join(_summary(task)), next_steps=next_steps)

        if args.estimate is not None:
            try:
                set_estimate(task, args.estimate)
            except ValueError as e:
                return failure(str(e))
            message = f"Estimate for T{task.id}: {args.estimate:g} hours"

        elif args.start:
            entry = start_timer(task, args.note)
            if entry is None:
                return failure(
                    f"Timer already running for task {task.id} (started {running_entry(task)['start']})",
                    next_steps=[f"taskflow time {task.id} --stop"],
                )
            message = f"Timer started for T{task.id} at {entry['start']}"

        elif args.stop:
            entry = stop_timer(task, args.note)
            if entry is None:
                return failure(f"No timer running for task {task.id}", next_steps=[f"taskflow time {task.id} --start"])
            message = f"Timer stopped for T{task.id}: {entry['hours']:.2f} hours"

        else:
            try:
                log_time(task, args.log, args.note)
            except ValueError as e:
                return failure(str(e))
            message = f"Logged {args.log:g} hours for T{task.id}"

        project.save_task(task)
        logger.info(f"[STORE] Task {task.id}: time updated")

    lines = [message, f"  Total spent: {task.actual_hours or 0:.2f} hours"]
    return success("\n".join(lines))
