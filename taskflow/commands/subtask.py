"""
taskflow subtask - Mark a subtask of the active task completed.
"""

import logging

from taskflow.lib.config import ProjectConfig
from taskflow.lib.graph import require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project

logger = logging.getLogger(__name__)


def cmd_subtask(args, config: ProjectConfig) -> CommandResult:
    subtask_id = str(args.subtask_id)

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "complete a subtask")

        task = project.load_task(loc.task.id)
        target = next((s for s in task.subtasks if s.id == subtask_id), None)
        if target is None:
            known = ", ".join(s.id for s in task.subtasks) or "none"
            return failure(
                f"Subtask '{subtask_id}' not found in task {task.id}",
                errors=[f"Known subtasks: {known}"],
            )

        if target.status == "completed":
            return success(f"Subtask {subtask_id} of task {task.id} is already completed")

        target.status = "completed"
        project.save_task(task)
        logger.info(f"[STORE] Task {task.id}: subtask {subtask_id} completed")

    done = sum(1 for s in task.subtasks if s.status == "completed")
    lines = [
        f"Completed subtask {subtask_id}: {target.description}",
        f"  Task {task.id}: {done}/{len(task.subtasks)} subtasks done",
    ]
    if done == len(task.subtasks):
        return success("\n".join(lines), next_steps=["taskflow check"])
    return success("\n".join(lines))
