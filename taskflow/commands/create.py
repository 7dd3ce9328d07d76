"""
taskflow create - Add a task to a story, or an intermittent task.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import DEFAULT_SKILL
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project, create_task


def cmd_create(args, config: ProjectConfig) -> CommandResult:
    """Create a not-started task."""
    title = args.title.strip()
    if not title:
        return failure("Task title cannot be empty")
    if not args.intermittent and not args.story:
        return failure(
            "Choose where the task goes",
            errors=["Pass --story <id> or --intermittent"],
        )

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc, path = create_task(
            project.root,
            project.graph,
            title,
            description=args.description or "",
            story_id=args.story,
            intermittent=args.intermittent,
            dependencies=args.depends_on,
            skill=getattr(args, "skill", None) or DEFAULT_SKILL,
        )

    lines = [
        f"Created: T{loc.task.id} - {loc.task.title}",
        f"  Story: S{loc.story.id} - {loc.story.title}",
        f"  File:  {path.relative_to(project.root)}",
    ]
    if loc.task.dependencies:
        lines.append(f"  Depends on: {', '.join(loc.task.dependencies)}")
    return success("\n".join(lines), next_steps=[f"taskflow start {loc.task.id}"])
