"""Task workflow transitions with validation and persistence.

Thin layer over the FSM in fsm.py. Each function performs one logical
transition on one task, raises a taxonomy error if it is not allowed, then
recomputes roll-ups and saves the graph. Nothing is retried.

Usage:
    from taskflow.workflow.state_machine import advance, back, block, resume

    advance(project, "1.1.0")
    back(project, "1.1.0")
    block(project, "1.1.0", reason="waiting on API")
    resume(project, "1.1.0")
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from transitions import MachineError

from taskflow.lib.constants import ACTIVE_STATUSES, BLOCKED, COMPLETED, is_active_status
from taskflow.lib.errors import (
    InvalidWorkflowStateError,
    TaskAlreadyCompletedError,
    TaskBlockedError,
)
from taskflow.lib.storage import Project
from taskflow.lib.types import TaskFile
from taskflow.workflow.fsm import TaskFSM

logger = logging.getLogger(__name__)


class TaskStatus(Enum):
    """All valid task statuses.

    Values match FSM state strings.
    """

    NOT_STARTED = "not-started"

    # Active states
    SETUP = "setup"
    PLANNING = "planning"
    IMPLEMENTING = "implementing"
    VERIFYING = "verifying"
    VALIDATING = "validating"
    COMMITTING = "committing"

    # Terminal
    COMPLETED = "completed"

    # Side branches
    BLOCKED = "blocked"
    ON_HOLD = "on-hold"


def parse_status(status_str: str | None) -> TaskStatus | None:
    """Parse a status string into TaskStatus enum.

    Returns None if status is unknown.
    """
    if status_str is None:
        return None
    for status in TaskStatus:
        if status.value == status_str:
            return status
    return None


@dataclass
class TransitionResult:
    task_id: str
    from_status: str
    to_status: str
    task: TaskFile


_ACTIVE_REQUIREMENT = " | ".join(ACTIVE_STATUSES)


def _fire(project: Project, task_id: str, trigger: str, **kwargs) -> TransitionResult:
    loc = project.locate(task_id)
    task = project.load_task(task_id)
    from_status = task.status

    fsm = TaskFSM(task)
    try:
        fired = getattr(fsm, trigger)(**kwargs)
    except MachineError:
        fired = False
    if not fired:
        raise InvalidWorkflowStateError(from_status, _ACTIVE_REQUIREMENT, trigger)

    project.commit_task(loc, task)
    return TransitionResult(task_id=task_id, from_status=from_status, to_status=task.status, task=task)


def start(project: Project, task_id: str) -> TransitionResult:
    """not-started / on-hold -> setup.

    Session and dependency checks belong to the caller.
    """
    task = project.load_task(task_id)
    if task.status == COMPLETED:
        raise TaskAlreadyCompletedError(task_id)
    if task.status == BLOCKED:
        raise TaskBlockedError(task_id, task.blocked_reason or "No reason provided")
    if is_active_status(task.status):
        raise InvalidWorkflowStateError(task.status, "not-started", "start")
    return _fire(project, task_id, "start")


def advance(project: Project, task_id: str) -> TransitionResult:
    """Move one step forward along the main chain."""
    task = project.load_task(task_id)
    if not is_active_status(task.status):
        raise InvalidWorkflowStateError(task.status, _ACTIVE_REQUIREMENT, "advance")
    return _fire(project, task_id, "advance")


def block(project: Project, task_id: str, reason: str) -> TransitionResult:
    """Block an active task, remembering where it was."""
    if not reason or not reason.strip():
        raise ValueError("A block reason is required")

    task = project.load_task(task_id)
    if task.status == BLOCKED:
        raise TaskBlockedError(task_id, task.blocked_reason or "No reason provided")
    if task.status == COMPLETED:
        raise TaskAlreadyCompletedError(task_id)
    if not is_active_status(task.status):
        raise InvalidWorkflowStateError(task.status, _ACTIVE_REQUIREMENT, "block")
    return _fire(project, task_id, "block", reason=reason.strip())


def resume(project: Project, task_id: str, target_status: Optional[str] = None) -> TransitionResult:
    """Unblock a task, restoring its pre-block status unless overridden."""
    task = project.load_task(task_id)
    if task.status != BLOCKED:
        raise InvalidWorkflowStateError(task.status, BLOCKED, "resume")
    if target_status is not None and not is_active_status(target_status):
        raise InvalidWorkflowStateError(target_status, _ACTIVE_REQUIREMENT, "resume")
    return _fire(project, task_id, "resume", target=target_status)


def back(project: Project, task_id: str) -> TransitionResult:
    """Step an active task one status backward. setup has nowhere to go."""
    task = project.load_task(task_id)
    if not is_active_status(task.status) or task.status == ACTIVE_STATUSES[0]:
        raise InvalidWorkflowStateError(task.status, " | ".join(ACTIVE_STATUSES[1:]), "back")
    return _fire(project, task_id, "back")


def abort(project: Project, task_id: str) -> TransitionResult:
    """Abandon an active task: back to not-started."""
    task = project.load_task(task_id)
    if not is_active_status(task.status):
        raise InvalidWorkflowStateError(task.status, _ACTIVE_REQUIREMENT, "abort")
    return _fire(project, task_id, "abort")


def reopen(project: Project, task_id: str) -> TransitionResult:
    """completed -> committing, for a commit that failed after completion was saved."""
    task = project.load_task(task_id)
    if task.status != COMPLETED:
        raise InvalidWorkflowStateError(task.status, COMPLETED, "reopen")
    return _fire(project, task_id, "reopen")
