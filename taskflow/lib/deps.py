"""
Dependency resolution over the task graph.

A dependency is met iff the referenced task exists and is completed. Unknown
ids are never met: malformed data cannot unblock a task.
"""

from dataclasses import dataclass
from typing import Optional

from taskflow.lib.constants import COMPLETED, NOT_STARTED
from taskflow.lib.errors import DependencyNotMetError
from taskflow.lib.graph import find_task_location, iter_tasks
from taskflow.lib.types import Graph, TaskLocation, TaskRef


def get_unmet_dependencies(graph: Graph, task: TaskRef) -> list[str]:
    """Dependency ids that are missing or not yet completed, in declared order."""
    unmet = []
    for dep_id in task.dependencies:
        loc = find_task_location(graph, dep_id)
        if loc is None or loc.task.status != COMPLETED:
            unmet.append(dep_id)
    return unmet


def check_dependencies_met(graph: Graph, task: TaskRef) -> bool:
    return not get_unmet_dependencies(graph, task)


def assert_dependencies_met(graph: Graph, task: TaskRef) -> None:
    unmet = get_unmet_dependencies(graph, task)
    if unmet:
        raise DependencyNotMetError(task.id, unmet)


def find_next_available_task(graph: Graph, exclude_id: Optional[str] = None) -> Optional[TaskLocation]:
    """First not-started task with all dependencies met.

    Main tasks are scanned first; intermittent tasks are only suggested when
    no planned work is available. Declaration order breaks ties.
    """
    for want_intermittent in (False, True):
        for loc in iter_tasks(graph):
            task = loc.task
            if task.is_intermittent != want_intermittent:
                continue
            if task.id == exclude_id or task.status != NOT_STARTED:
                continue
            if check_dependencies_met(graph, task):
                return loc
    return None


def find_dangling_dependencies(graph: Graph) -> list[tuple[str, str]]:
    """(task_id, missing_dependency_id) for every reference to an unknown task."""
    known = {loc.task.id for loc in iter_tasks(graph)}
    dangling = []
    for loc in iter_tasks(graph):
        for dep_id in loc.task.dependencies:
            if dep_id not in known:
                dangling.append((loc.task.id, dep_id))
    return dangling


def find_dependents(graph: Graph, task_id: str) -> list[TaskLocation]:
    """Tasks that list `task_id` as a dependency, in declaration order."""
    return [loc for loc in iter_tasks(graph) if task_id in loc.task.dependencies]


@dataclass
class DependencyNode:
    """One line of a dependency tree."""
    task_id: str
    depth: int
    task: Optional[TaskRef] = None             # None when the id is unknown
    cycle: bool = False


def dependency_tree(graph: Graph, task_id: str) -> list[DependencyNode]:
    """Depth-first walk of task_id and its dependencies.

    A dependency that leads back to a task already on the current path is
    reported once with cycle=True and not expanded.
    """
    nodes: list[DependencyNode] = []

    def walk(current: str, depth: int, path: frozenset) -> None:
        if current in path:
            nodes.append(DependencyNode(current, depth, cycle=True))
            return
        loc = find_task_location(graph, current)
        if loc is None:
            nodes.append(DependencyNode(current, depth))
            return
        nodes.append(DependencyNode(current, depth, task=loc.task))
        for dep_id in loc.task.dependencies:
            walk(dep_id, depth + 1, path | {current})

    walk(task_id, 0, frozenset())
    return nodes
