"""
taskflow skip - Block the active task and move on.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.deps import find_next_available_task
from taskflow.lib.graph import find_paused_task, require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine


def cmd_skip(args, config: ProjectConfig) -> CommandResult:
    """Mark the active task blocked with a reason."""
    reason = " ".join(args.reason) if isinstance(args.reason, list) else args.reason
    if not reason or not reason.strip():
        return failure("A reason is required to skip a task", next_steps=['taskflow skip "waiting on API"'])

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "block")
        paused = find_paused_task(project.graph, loc.task)

        result = state_machine.block(project, loc.task.id, reason)

    lines = [
        f"Blocked: T{result.task_id} - {loc.task.title}",
        f"  Was:    {result.from_status}",
        f"  Reason: {result.task.blocked_reason}",
    ]

    if paused is not None:
        lines.append(f"\nMain task {paused.id} is active again: {paused.title}")
        return success("\n".join(lines), next_steps=[f"taskflow start {paused.id}", "taskflow resume"])

    next_steps = ["taskflow resume"]
    next_loc = find_next_available_task(project.graph, exclude_id=result.task_id)
    if next_loc is not None:
        next_steps.insert(0, f"taskflow start {next_loc.task.id}")
        lines.append(f"\nNext available: T{next_loc.task.id} - {next_loc.task.title}")
    return success("\n".join(lines), next_steps=next_steps)
