"""Task workflow state machine using transitions library.

States follow the main chain
    not-started -> setup -> planning -> implementing -> verifying
                -> validating -> committing -> completed
with side branches `blocked` (from any active state) and `on-hold`.
`back` steps one state backward and `abort` returns an active task to
not-started.

Usage:
    from taskflow.workflow.fsm import TaskFSM

    fsm = TaskFSM(task_file)
    fsm.start()                      # not-started -> setup
    fsm.advance()                    # setup -> planning
    fsm.block(reason="waiting")      # planning -> blocked
    fsm.resume()                     # blocked -> planning
    fsm.back()                       # planning -> setup
"""

import logging
from typing import Callable

from transitions import Machine

from taskflow.lib.constants import (
    ACTIVE_STATUSES,
    BLOCKED,
    COMPLETED,
    NOT_STARTED,
    ON_HOLD,
    TASK_STATUSES,
    WORKFLOW_CHAIN,
)
from taskflow.lib.types import TaskFile

logger = logging.getLogger(__name__)


STATES = list(TASK_STATUSES)


def _resume_target_is(state: str) -> Callable:
    """Condition: resume goes to `state` (explicit target, else the pre-block status)."""
    def check(event) -> bool:
        target = event.kwargs.get("target") or event.model.task.previous_status or "setup"
        return target == state
    return check


# Transitions defined as (trigger, source, dest)
# Each trigger becomes a method on the FSM
TRANSITIONS = [
    {"trigger": "start", "source": ["not-started", ON_HOLD], "dest": "setup"},
]

# One step forward along the main chain
TRANSITIONS += [
    {"trigger": "advance", "source": src, "dest": dest}
    for src, dest in zip(WORKFLOW_CHAIN[1:-1], WORKFLOW_CHAIN[2:])
]

# One step backward along the active part of the chain; setup has no edge
TRANSITIONS += [
    {"trigger": "back", "source": src, "dest": dest}
    for src, dest in zip(ACTIVE_STATUSES[1:], ACTIVE_STATUSES[:-1])
]

# Abandon an active task
TRANSITIONS += [
    {"trigger": "abort", "source": list(ACTIVE_STATUSES), "dest": NOT_STARTED},
]

# A commit that failed after the task was marked completed goes back to committing
TRANSITIONS += [
    {"trigger": "reopen", "source": COMPLETED, "dest": "committing"},
]

TRANSITIONS += [
    {"trigger": "block", "source": list(ACTIVE_STATUSES), "dest": BLOCKED, "before": "_record_block"},
]

# blocked has one resume edge per active state; the condition picks the edge
TRANSITIONS += [
    {
        "trigger": "resume",
        "source": BLOCKED,
        "dest": state,
        "conditions": [_resume_target_is(state)],
        "after": "_clear_block",
    }
    for state in ACTIVE_STATUSES
]


class TaskFSM:
    """State machine for one task's workflow status.

    Wraps the transitions library with task-specific logic:
    - Starts from the TaskFile's current status
    - Mirrors every state change onto the TaskFile
    - Logs all transitions

    Persistence is the caller's job (see state_machine.py).
    """

    def __init__(self, task: TaskFile, on_transition: Callable[[str, str, str], None] | None = None):
        """Initialize FSM for a task.

        Args:
            task: TaskFile whose status seeds the machine
            on_transition: Optional callback(from_state, to_state, trigger) called after transitions
        """
        self.task = task
        self.on_transition = on_transition

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=task.status,
            auto_transitions=False,  # Only explicit transitions
            send_event=True,  # Pass EventData to callbacks
            after_state_change="on_state_change",
        )

    def _record_block(self, event) -> None:
        self.task.previous_status = event.transition.source
        self.task.blocked_reason = event.kwargs.get("reason", "")

    def _clear_block(self, event) -> None:
        self.task.previous_status = None
        self.task.blocked_reason = None

    def on_state_change(self, event) -> None:
        """Callback after any state transition."""
        from_state = event.transition.source
        to_state = event.transition.dest
        trigger = event.event.name

        self.task.status = self.state
        logger.info(f"[FSM] {self.task.id}: {from_state} -> {to_state} ({trigger})")

        if self.on_transition:
            self.on_transition(from_state, to_state, trigger)

    def can(self, trigger: str) -> bool:
        """Check if a trigger can be executed in current state."""
        return trigger in self.machine.get_triggers(self.state)

    def get_available_triggers(self) -> list[str]:
        """Get list of triggers available in current state."""
        return self.machine.get_triggers(self.state)
