"""
taskflow back - Return the active task to its previous workflow status.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import ACTIVE_STATUSES
from taskflow.lib.graph import require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine


def cmd_back(args, config: ProjectConfig) -> CommandResult:
    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "back")

        if loc.task.status == ACTIVE_STATUSES[0]:
            return failure(
                f"Task {loc.task.id} is already at its earliest status: {loc.task.status}",
                next_steps=["taskflow check", "taskflow abort"],
            )

        result = state_machine.back(project, loc.task.id)

    return success(
        f"Task {result.task_id}: {result.from_status.upper()} -> {result.to_status.upper()}",
        next_steps=["taskflow check"],
    )
