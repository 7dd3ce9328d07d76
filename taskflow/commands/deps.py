"""
taskflow deps - Show what a task waits on and what waits on it.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import NOT_STARTED
from taskflow.lib.deps import dependency_tree, find_dependents, get_unmet_dependencies
from taskflow.lib.result import CommandResult, success
from taskflow.lib.storage import Project


def cmd_deps(args, config: ProjectConfig) -> CommandResult:
    """Read-only, so no lock."""
    project = Project.load(config)
    loc = project.locate(args.task_id)
    task = loc.task

    lines = [
        f"Dependencies for T{task.id} - {task.title} [{task.status}]",
        f"  Story:   S{loc.story.id} - {loc.story.title}",
        "",
        "Dependency tree:",
    ]
    for node in dependency_tree(project.graph, task.id):
        indent = "  " * (node.depth + 1)
        if node.cycle:
            lines.append(f"{indent}T{node.task_id} (circular dependency)")
        elif node.task is None:
            lines.append(f"{indent}T{node.task_id} (not found)")
        else:
            lines.append(f"{indent}T{node.task_id} - {node.task.title} [{node.task.status}]")

    dependents = find_dependents(project.graph, task.id)
    lines.append("")
    if dependents:
        lines.append("Waiting on this task:")
        lines.extend(f"  T{d.task.id} - {d.task.title} [{d.task.status}]" for d in dependents)
    else:
        lines.append("No tasks depend on this one.")

    unmet = get_unmet_dependencies(project.graph, task)
    if unmet:
        lines.append(f"\nUnmet: {', '.join(unmet)}")
        return success("\n".join(lines), next_steps=[f"taskflow status {loc.story.id}"])
    if task.status == NOT_STARTED:
        lines.append("\nAll dependencies are complete.")
        return success("\n".join(lines), next_steps=[f"taskflow start {task.id}"])
    return success("\n".join(lines))
