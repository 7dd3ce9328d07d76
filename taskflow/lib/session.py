"""
Single-active-task guard.

At most one main (non-intermittent) task and at most one intermittent task
may be active at the same time. Starting side-work while a main task is
active is allowed; the main task simply stays in its status.
"""

import logging
from typing import Optional

from taskflow.lib.errors import ActiveSessionExistsError
from taskflow.lib.graph import find_active_tasks
from taskflow.lib.types import Graph, TaskRef

logger = logging.getLogger(__name__)


def assert_can_start(graph: Graph, requested: TaskRef) -> Optional[TaskRef]:
    """Raise ActiveSessionExistsError if starting `requested` would break the invariant.

    Returns:
        The active main task that keeps running alongside an intermittent
        start (the caller warns that it is paused), otherwise None.
    """
    paused = None
    for loc in find_active_tasks(graph):
        active = loc.task
        if active.id == requested.id:
            continue
        # A main task may only start when nothing else is active
        if not requested.is_intermittent or active.is_intermittent:
            raise ActiveSessionExistsError(active.id)
        paused = active

    if paused is not None:
        logger.info(f"[SESSION] Starting intermittent task {requested.id}; main task {paused.id} is paused")
    return paused
