"""
taskflow check - Advance the active task one workflow step.
"""

from taskflow.git.sync import check_story_branch
from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import COMPLETED
from taskflow.lib.deps import find_next_available_task
from taskflow.lib.graph import find_paused_task, require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, success
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine


def cmd_check(args, config: ProjectConfig) -> CommandResult:
    """Move the active task to its next status.

    While an intermittent task is active it is the one advanced; the main
    task waits. --task picks an active task explicitly.
    """
    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "check")
        paused = find_paused_task(project.graph, loc.task)

        check_story_branch(config, loc.story)
        result = state_machine.advance(project, loc.task.id)

    lines = [f"Task {result.task_id}: {result.from_status.upper()} -> {result.to_status.upper()}"]

    if result.to_status != COMPLETED:
        return success("\n".join(lines), next_steps=["taskflow check"])

    lines.append(f"  Story S{loc.story.id} is now {loc.story.status}")
    if paused is not None:
        lines.append(f"  Main task {paused.id} is active again: {paused.title}")
        return success("\n".join(lines), next_steps=[f"taskflow start {paused.id}"])

    next_loc = find_next_available_task(project.graph)
    if next_loc is None:
        lines.append("  No more tasks available.")
        return success("\n".join(lines), next_steps=["taskflow status"])
    return success("\n".join(lines), next_steps=[f"taskflow start {next_loc.task.id}"])
