"""
taskflow commit - Commit the task's work locally and complete it.

The task must be in committing. Its status is saved as completed first so
the task files are part of the commit; if git fails the task goes back to
committing. Nothing is pushed.
"""

import logging

from taskflow.git.commit import commit, head_sha, stage_all
from taskflow.git.commit_message import (
    build_commit_message,
    parse_commit_message,
    validate_commit_message_format,
)
from taskflow.git.status import get_changed_entries
from taskflow.git.sync import check_story_branch
from taskflow.lib.config import ProjectConfig
from taskflow.lib.deps import find_next_available_task
from taskflow.lib.errors import GitOperationError, InvalidWorkflowStateError
from taskflow.lib.graph import find_paused_task, require_active_location
from taskflow.lib.locking import project_lock
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.workflow import state_machine

logger = logging.getLogger(__name__)

COMMITTING = "committing"

_USAGE = 'taskflow commit "- change one" "- change two"'


def _message_for(args, loc) -> str | None:
    """Full message from args: a complete message as given, else bullets wrapped in the header."""
    text = "\n".join(args.message) if isinstance(args.message, list) else (args.message or "")
    if validate_commit_message_format(text):
        return text.strip()
    body_lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not body_lines:
        return None
    return build_commit_message(
        args.type,
        loc.feature.id,
        loc.task.id,
        loc.task.title,
        body_lines,
        loc.story.id,
    )


def cmd_commit(args, config: ProjectConfig) -> CommandResult:
    with project_lock(config.root, config.lock_timeout):
        project = Project.load(config)
        loc = require_active_location(project.graph, getattr(args, "task", None), "commit")
        if loc.task.status != COMMITTING:
            raise InvalidWorkflowStateError(loc.task.status, COMMITTING, "commit")

        message = _message_for(args, loc)
        if message is None:
            return failure(
                "A commit message is required",
                errors=["Describe the changes as bullet points, or pass a full task commit message"],
                next_steps=[_USAGE],
            )
        parts = parse_commit_message(message)
        if parts.task_id != loc.task.id:
            return failure(
                f"Commit message is for task {parts.task_id}, active task is {loc.task.id}",
                next_steps=[_USAGE],
            )

        check_story_branch(config, loc.story)
        paused = find_paused_task(project.graph, loc.task)

        result = state_machine.advance(project, loc.task.id)
        try:
            changed = get_changed_entries(config.root, config.git_timeout)
            if changed:
                stage_all(config.root, config.git_timeout)
                commit(config.root, message, config.git_timeout)
        except GitOperationError:
            logger.warning(f"[GIT] Commit for task {loc.task.id} failed, returning it to {COMMITTING}")
            state_machine.reopen(project, loc.task.id)
            raise

    lines = [
        f"Committed: T{result.task_id} - {loc.task.title}",
        f"  Commit:  {head_sha(config.root, config.git_timeout) or '(unknown)'}",
        f"  Files:   {len(changed)} changed",
        f"  Status:  {result.to_status.upper()}",
        "",
        message,
    ]

    warnings = [] if changed else ["Nothing to commit; the task was marked completed without a new commit."]

    if paused is not None:
        lines.append(f"\nMain task {paused.id} is active again: {paused.title}")
        return success("\n".join(lines), next_steps=[f"taskflow start {paused.id}"], warnings=warnings)

    next_loc = find_next_available_task(project.graph)
    next_steps = [f"taskflow start {next_loc.task.id}"] if next_loc else ["taskflow status"]
    return success("\n".join(lines), next_steps=next_steps, warnings=warnings)
