"""
taskflow status - Show project, feature, or story progress.
"""

from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import FEATURE_ID_PATTERN, STORY_ID_PATTERN
from taskflow.lib.graph import (
    calculate_progress_stats,
    find_active_tasks,
    find_blocked_tasks,
    require_feature,
    require_story_location,
)
from taskflow.lib.result import CommandResult, failure, success
from taskflow.lib.storage import Project
from taskflow.lib.types import Graph


def _pct(done: int, total: int) -> str:
    return f"{round(100 * done / total)}%" if total else "0%"


def _project_status(project: Project) -> list[str]:
    graph = project.graph
    stats = calculate_progress_stats(graph)
    lines = [
        f"Project: {graph.project}",
        f"  Features: {stats.completed_features}/{stats.total_features}",
        f"  Stories:  {stats.completed_stories}/{stats.total_stories}",
        f"  Tasks:    {stats.completed_tasks}/{stats.total_tasks} ({_pct(stats.completed_tasks, stats.total_tasks)})",
        "",
    ]
    for feature in graph.features:
        done = sum(1 for s in feature.stories if s.status == "completed")
        lines.append(f"  F{feature.id:<4} {feature.status:<12} {feature.title} ({done}/{len(feature.stories)} stories)")
    lines.extend(_session_lines(graph))
    return lines


def _session_lines(graph: Graph) -> list[str]:
    lines = []
    active = find_active_tasks(graph)
    if active:
        lines.append("")
        lines.append("Active:")
        for loc in active:
            kind = " (intermittent)" if loc.task.is_intermittent else ""
            lines.append(f"  T{loc.task.id} [{loc.task.status}] {loc.task.title}{kind}")
    blocked = find_blocked_tasks(graph)
    if blocked:
        lines.append("")
        lines.append("Blocked:")
        for loc in blocked:
            lines.append(f"  T{loc.task.id} {loc.task.title}")
    return lines


def _feature_status(project: Project, feature_id: str) -> list[str]:
    feature = require_feature(project.graph, feature_id)
    lines = [f"Feature F{feature.id}: {feature.title} [{feature.status}]"]
    for story in feature.stories:
        done = sum(1 for t in story.tasks if t.status == "completed")
        lines.append(f"  S{story.id:<6} {story.status:<12} {story.title} ({done}/{len(story.tasks)} tasks)")
    if not feature.stories:
        lines.append("  (no stories)")
    return lines


def _story_status(project: Project, story_id: str) -> list[str]:
    loc = require_story_location(project.graph, story_id)
    story = loc.story
    lines = [
        f"Story S{story.id}: {story.title} [{story.status}]",
        f"  Feature: F{loc.feature.id} - {loc.feature.title}",
    ]
    for task in story.tasks:
        deps = f" (depends on {', '.join(task.dependencies)})" if task.dependencies else ""
        lines.append(f"  T{task.id:<8} {task.status:<12} {task.title}{deps}")
    if not story.tasks:
        lines.append("  (no tasks)")
    return lines


def cmd_status(args, config: ProjectConfig) -> CommandResult:
    """Show status for the whole project, one feature, or one story."""
    project = Project.load(config)
    target = args.id

    if not target:
        lines = _project_status(project)
    elif FEATURE_ID_PATTERN.match(target):
        lines = _feature_status(project, target)
    elif STORY_ID_PATTERN.match(target):
        lines = _story_status(project, target)
    else:
        return failure(
            f"'{target}' is not a feature or story id",
            errors=["Expected a feature id like 1 or a story id like 1.2"],
        )
    return success("\n".join(lines))
