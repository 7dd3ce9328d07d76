"""
taskflow resume - Unblock a task and return it to where it was.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import ACTIVE_STATUSES, BLOCKED
from taskflow.lib.errors import InvalidWorkflowStateError
from taskflow.lib.graph import find_blocked_tasks
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.session import assert_can_start
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine
from taskflow.workflow.state_machine import parse_status


def cmd_resume(args, config: ProjectConfig) -> CommandResult:
    """Resume the blocked task (or --task), optionally at a different status."""
    target = args.target_status
    if target is not None:
        status = parse_status(target)
        if status is None or status.value not in ACTIVE_STATUSES:
            raise InvalidWorkflowStateError(target, " | ".join(ACTIVE_STATUSES), "resume")

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)

        if args.task:
            loc = project.locate(args.task)
            if loc.task.status != BLOCKED:
                raise InvalidWorkflowStateError(loc.task.status, BLOCKED, "resume")
        else:
            blocked = find_blocked_tasks(project.graph)
            if not blocked:
                return failure("No blocked tasks to resume.", next_steps=["taskflow status"])
            loc = blocked[0]

        # Resuming re-enters an active status, so the session rule applies
        assert_can_start(project.graph, loc.task)
        result = state_machine.resume(project, loc.task.id, target)

    lines = [
        f"Resumed: T{result.task_id} - {loc.task.title}",
        f"  Status: {result.to_status.upper()}",
    ]
    return success("\n".join(lines), next_steps=["taskflow check"])
