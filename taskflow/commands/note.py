"""
taskflow note - Attach a note to a task.
"""

import logging

from taskflow.lib.config import ProjectConfig
from taskflow.lib.graph import require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.lib.tracking import add_note

logger = logging.getLogger(__name__)


def cmd_note(args, config: ProjectConfig) -> CommandResult:
    """Add a note to --task, or to the active task."""
    content = " ".join(args.text) if isinstance(args.text, list) else args.text
    if not content or not content.strip():
        return failure("Note text cannot be empty")

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        if args.task:
            loc = project.locate(args.task)
        else:
            loc = require_active_location(project.graph, action="note")

        task = project.load_task(loc.task.id)
        note = add_note(task, content.strip(), args.type)
        project.save_task(task)
        logger.info(f"[STORE] Task {task.id}: {note['type']} added")

    lines = [
        f"Note added to T{task.id} - {task.title}",
        f"  [{note['type']}] {note['content']}",
        f"  {len(task.notes)} note(s) on this task",
    ]
    return success("\n".join(lines))
