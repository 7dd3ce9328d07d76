"""
In-memory lookup, traversal and roll-up over the task graph.

All lookups are linear scans. The graph is one project's backlog and is
rebuilt from disk on every invocation.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from taskflow.lib.constants import (
    ACTIVE_STATUSES,
    COMPLETED,
    IN_PROGRESS,
    INTERMITTENT_FEATURE_ID,
    INTERMITTENT_FEATURE_TITLE,
    INTERMITTENT_STORY_ID,
    INTERMITTENT_STORY_TITLE,
    NOT_STARTED,
    is_active_status,
)
from taskflow.lib.errors import (
    FeatureNotFoundError,
    InvalidWorkflowStateError,
    NoActiveSessionError,
    StoryNotFoundError,
    TaskNotFoundError,
)
from taskflow.lib.types import Feature, Graph, Story, StoryLocation, TaskLocation, TaskRef


def iter_tasks(graph: Graph) -> Iterator[TaskLocation]:
    """Yield every task in declaration order (feature, story, task)."""
    for feature in graph.features:
        for story in feature.stories:
            for task in story.tasks:
                yield TaskLocation(feature, story, task)


def find_feature(graph: Graph, feature_id: str) -> Optional[Feature]:
    for feature in graph.features:
        if feature.id == feature_id:
            return feature
    return None


def find_story_location(graph: Graph, story_id: str) -> Optional[StoryLocation]:
    for feature in graph.features:
        for story in feature.stories:
            if story.id == story_id:
                return StoryLocation(feature, story)
    return None


def find_task_location(graph: Graph, task_id: str) -> Optional[TaskLocation]:
    for loc in iter_tasks(graph):
        if loc.task.id == task_id:
            return loc
    return None


def require_feature(graph: Graph, feature_id: str) -> Feature:
    feature = find_feature(graph, feature_id)
    if feature is None:
        raise FeatureNotFoundError(feature_id)
    return feature


def require_story_location(graph: Graph, story_id: str) -> StoryLocation:
    loc = find_story_location(graph, story_id)
    if loc is None:
        raise StoryNotFoundError(story_id)
    return loc


def require_task_location(graph: Graph, task_id: str) -> TaskLocation:
    loc = find_task_location(graph, task_id)
    if loc is None:
        raise TaskNotFoundError(task_id)
    return loc


def find_active_tasks(graph: Graph) -> list[TaskLocation]:
    """All tasks currently in an in-progress status, in declaration order."""
    return [loc for loc in iter_tasks(graph) if is_active_status(loc.task.status)]


def find_active_task(graph: Graph) -> Optional[TaskRef]:
    """Return the task being worked on.

    An active intermittent task wins over the main task: starting side-work
    pauses the main task until the side-work is completed, blocked or
    aborted.
    """
    active = find_active_tasks(graph)
    for loc in active:
        if loc.task.is_intermittent:
            return loc.task
    return active[0].task if active else None


def find_active_location(graph: Graph) -> Optional[TaskLocation]:
    task = find_active_task(graph)
    return find_task_location(graph, task.id) if task else None


def require_active_location(graph: Graph, task_id: Optional[str] = None, action: str = "continue") -> TaskLocation:
    """Location of the task a session command acts on.

    With `task_id`, that task, which must be in an active status. Otherwise
    the task find_active_task() picks.

    Raises:
        NoActiveSessionError: no task_id and nothing is active
        TaskNotFoundError: task_id is unknown
        InvalidWorkflowStateError: task_id names a task that is not active
    """
    if task_id is None:
        loc = find_active_location(graph)
        if loc is None:
            raise NoActiveSessionError()
        return loc

    loc = require_task_location(graph, task_id)
    if not is_active_status(loc.task.status):
        raise InvalidWorkflowStateError(loc.task.status, " | ".join(ACTIVE_STATUSES), action)
    return loc


def find_paused_task(graph: Graph, working: TaskRef) -> Optional[TaskRef]:
    """The active main task left waiting while intermittent `working` runs."""
    if not working.is_intermittent:
        return None
    for loc in find_active_tasks(graph):
        if not loc.task.is_intermittent:
            return loc.task
    return None


def find_blocked_tasks(graph: Graph) -> list[TaskLocation]:
    """Blocked tasks, main tasks first, then intermittent ones."""
    blocked = [loc for loc in iter_tasks(graph) if loc.task.status == "blocked"]
    return sorted(blocked, key=lambda loc: loc.task.is_intermittent)


def calculate_story_status(story: Story) -> str:
    tasks = story.tasks
    if not tasks:
        return NOT_STARTED
    if all(t.status == COMPLETED for t in tasks):
        return COMPLETED
    if any(t.status != NOT_STARTED for t in tasks):
        return IN_PROGRESS
    return NOT_STARTED


def calculate_feature_status(feature: Feature) -> str:
    stories = feature.stories
    if not stories:
        return NOT_STARTED
    if all(s.status == COMPLETED for s in stories):
        return COMPLETED
    if any(s.status != NOT_STARTED for s in stories):
        return IN_PROGRESS
    return NOT_STARTED


def recalculate_rollups(graph: Graph) -> None:
    """Recompute every Story and Feature status bottom-up."""
    for feature in graph.features:
        for story in feature.stories:
            story.status = calculate_story_status(story)
        feature.status = calculate_feature_status(feature)


def ensure_intermittent_story(graph: Graph) -> StoryLocation:
    """Get or create the reserved Feature 0 / Story 0.1 for intermittent tasks."""
    feature = find_feature(graph, INTERMITTENT_FEATURE_ID)
    if feature is None:
        feature = Feature(
            id=INTERMITTENT_FEATURE_ID,
            title=INTERMITTENT_FEATURE_TITLE,
            path=f"F{INTERMITTENT_FEATURE_ID}",
        )
        graph.features.insert(0, feature)

    for story in feature.stories:
        if story.id == INTERMITTENT_STORY_ID:
            return StoryLocation(feature, story)

    story = Story(id=INTERMITTENT_STORY_ID, title=INTERMITTENT_STORY_TITLE)
    feature.stories.append(story)
    return StoryLocation(feature, story)


def next_task_id(story: Story) -> str:
    """Next free task id in a story: one past the highest task number."""
    numbers = [int(t.id.rsplit(".", 1)[1]) for t in story.tasks]
    next_num = max(numbers) + 1 if numbers else 0
    return f"{story.id}.{next_num}"


@dataclass
class ProgressStats:
    total_features: int = 0
    completed_features: int = 0
    total_stories: int = 0
    completed_stories: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0


def calculate_progress_stats(graph: Graph) -> ProgressStats:
    stats = ProgressStats(total_features=len(graph.features))
    for feature in graph.features:
        if feature.status == COMPLETED:
            stats.completed_features += 1
        for story in feature.stories:
            stats.total_stories += 1
            if story.status == COMPLETED:
                stats.completed_stories += 1
            for task in story.tasks:
                stats.total_tasks += 1
                if task.status == COMPLETED:
                    stats.completed_tasks += 1
    return stats
