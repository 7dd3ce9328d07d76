"""
taskflow next - Show the next task that can be started.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.deps import find_next_available_task
from taskflow.lib.graph import find_active_task
from taskflow.lib.result import CommandResult, success
from taskflow.lib.storage import Project


def cmd_next(args, config: ProjectConfig) -> CommandResult:
    """Report the first not-started task whose dependencies are all completed."""
    project = Project.load(config)

    loc = find_next_available_task(project.graph)
    if loc is None:
        return success(
            "No available tasks. Remaining tasks are in progress, blocked, or waiting on dependencies.",
            next_steps=["taskflow status"],
        )

    task, story, feature = loc.task, loc.story, loc.feature
    lines = [
        f"Next task: T{task.id} - {task.title}",
        f"  Story:   S{story.id} - {story.title}",
        f"  Feature: F{feature.id} - {feature.title}",
    ]
    if task.dependencies:
        lines.append(f"  Depends on: {', '.join(task.dependencies)} (all completed)")
    if task.is_intermittent:
        lines.append("  (intermittent task)")

    warnings = []
    active = find_active_task(project.graph)
    if active is not None:
        warnings.append(f"Task {active.id} is already active ({active.status}). Finish it before starting another.")
        return success("\n".join(lines), next_steps=["taskflow check"], warnings=warnings)

    return success("\n".join(lines), next_steps=[f"taskflow start {task.id}"])
