"""
taskflow start - Begin work on a task.

Checks, in order: the task exists and is startable, no conflicting active
session, dependencies are completed. Then switches to the story branch and
moves the task to setup.
"""

import logging

from taskflow.git.sync import sync_story_branch
from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import BLOCKED, COMPLETED, TASK_ID_PATTERN, is_active_status
from taskflow.lib.deps import assert_dependencies_met
from taskflow.lib.errors import TaskAlreadyCompletedError, TaskBlockedError
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.session import assert_can_start
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine

logger = logging.getLogger(__name__)


def _branch_line(sync) -> str | None:
    if sync is None:
        return None
    if sync.action == "created":
        return f"  Branch:  {sync.expected} (created)"
    return f"  Branch:  {sync.expected}"


def cmd_start(args, config: ProjectConfig) -> CommandResult:
    """Start a task session."""
    task_id = args.task_id
    if not TASK_ID_PATTERN.match(task_id):
        return failure(f"'{task_id}' is not a task id", errors=["Expected a task id like 1.1.0"])

    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = project.locate(task_id)
        task, story, feature = loc.task, loc.story, loc.feature

        if task.status == COMPLETED:
            raise TaskAlreadyCompletedError(task_id)
        if task.status == BLOCKED:
            detail = project.load_task(task_id)
            raise TaskBlockedError(task_id, detail.blocked_reason or "No reason provided")

        # Re-running start on the active task only re-verifies the branch
        if is_active_status(task.status):
            sync = sync_story_branch(config, story)
            lines = [f"Task {task_id} is already active - Status: {task.status.upper()}"]
            branch = _branch_line(sync)
            if branch:
                lines.append(branch)
            return success("\n".join(lines), next_steps=["taskflow check"])

        paused = assert_can_start(project.graph, task)
        assert_dependencies_met(project.graph, task)

        sync = sync_story_branch(config, story)
        state_machine.start(project, task_id)

    lines = [
        f"Task {task_id} started - Status: SETUP",
        f"  Title:   {task.title}",
        f"  Story:   S{story.id} - {story.title}",
        f"  Feature: F{feature.id} - {feature.title}",
    ]
    branch = _branch_line(sync)
    if branch:
        lines.append(branch)

    warnings = []
    if paused is not None:
        warnings.append(f"Main task {paused.id} is paused while you work on {task_id}.")
    if sync is not None and sync.stashed:
        if sync.carried:
            warnings.append(f"Uncommitted changes in {len(sync.carried)} path(s) were carried over to the story branch.")
        else:
            warnings.append("Uncommitted changes were carried over to the story branch.")

    return success("\n".join(lines), next_steps=["taskflow check"], warnings=warnings)
