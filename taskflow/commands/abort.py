"""
taskflow abort - Abandon the active task.

The task goes back to not-started. Work on its branch is left as is.
"""

from taskflow.git.status import has_uncommitted_changes
from taskflow.lib.config import ProjectConfig
from taskflow.lib.graph import find_paused_task, require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, success
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine


def cmd_abort(args, config: ProjectConfig) -> CommandResult:
    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "abort")
        paused = find_paused_task(project.graph, loc.task)

        result = state_machine.abort(project, loc.task.id)

    warnings = []
    if config.branching.enabled and has_uncommitted_changes(config.root, config.git_timeout):
        warnings.append("Uncommitted changes are still in the working tree.")

    lines = [
        f"Aborted: T{result.task_id} - {loc.task.title}",
        f"  Was:    {result.from_status}",
        f"  Now:    {result.to_status}",
    ]
    if paused is not None:
        lines.append(f"\nMain task {paused.id} is active again: {paused.title}")
        return success("\n".join(lines), next_steps=[f"taskflow start {paused.id}"], warnings=warnings)
    return success("\n".join(lines), next_steps=["taskflow next"], warnings=warnings)
