"""Tests for taskflow.lib.graph."""

import pytest

from taskflow.lib import errors
from taskflow.lib.graph import (
    calculate_feature_status,
    calculate_progress_stats,
    calculate_story_status,
    ensure_intermittent_story,
    find_active_task,
    find_active_tasks,
    find_blocked_tasks,
    find_paused_task,
    next_task_id,
    recalculate_rollups,
    require_active_location,
    require_feature,
    require_story_location,
    require_task_location,
)
from taskflow.lib.types import Feature, Graph, Story, TaskRef


def story_with(*statuses, story_id="1.1"):
    tasks = [TaskRef(id=f"{story_id}.{i}", title=f"t{i}", status=s) for i, s in enumerate(statuses)]
    return Story(id=story_id, title="Story", tasks=tasks)


def graph_with(*stories):
    return Graph(project="demo", features=[Feature(id="1", title="F", path="F1", stories=list(stories))])


class TestStoryRollup:
    """Roll-up of task statuses into a story status."""

    def test_empty_story_not_started(self):
        assert calculate_story_status(Story(id="1.1", title="S")) == "not-started"

    def test_all_not_started(self):
        assert calculate_story_status(story_with("not-started", "not-started")) == "not-started"

    def test_all_completed(self):
        assert calculate_story_status(story_with("completed", "completed")) == "completed"

    def test_any_progress_is_in_progress(self):
        assert calculate_story_status(story_with("completed", "not-started")) == "in-progress"
        assert calculate_story_status(story_with("not-started", "implementing")) == "in-progress"

    def test_blocked_and_on_hold_count_as_in_progress(self):
        assert calculate_story_status(story_with("blocked")) == "in-progress"
        assert calculate_story_status(story_with("on-hold", "not-started")) == "in-progress"


class TestFeatureRollup:
    """Roll-up of story statuses into a feature status."""

    def test_empty_feature_not_started(self):
        assert calculate_feature_status(Feature(id="1", title="F")) == "not-started"

    def test_recalculate_rollups_bottom_up(self):
        done = story_with("completed", story_id="1.1")
        todo = story_with("not-started", story_id="1.2")
        graph = graph_with(done, todo)
        recalculate_rollups(graph)
        assert done.status == "completed"
        assert todo.status == "not-started"
        assert graph.features[0].status == "in-progress"

        todo.tasks[0].status = "completed"
        recalculate_rollups(graph)
        assert graph.features[0].status == "completed"

    def test_three_of_four_completed_story_in_progress(self):
        story = story_with("completed", "completed", "completed", "not-started")
        graph = graph_with(story)
        recalculate_rollups(graph)
        assert story.status == "in-progress"
        assert graph.features[0].status == "in-progress"


class TestLookups:
    """Tests for require_* lookups."""

    def test_require_task_location(self):
        graph = graph_with(story_with("not-started", "setup"))
        loc = require_task_location(graph, "1.1.1")
        assert loc.task.status == "setup"
        assert loc.story.id == "1.1"
        assert loc.feature.id == "1"

    def test_missing_ids_raise_taxonomy_errors(self):
        graph = graph_with(story_with("not-started"))
        with pytest.raises(errors.TaskNotFoundError):
            require_task_location(graph, "1.1.9")
        with pytest.raises(errors.StoryNotFoundError):
            require_story_location(graph, "1.9")
        with pytest.raises(errors.FeatureNotFoundError):
            require_feature(graph, "9")


class TestActiveTasks:
    """Tests for active and blocked task discovery."""

    def test_no_active_task(self):
        graph = graph_with(story_with("not-started", "completed", "blocked"))
        assert find_active_task(graph) is None
        assert find_active_tasks(graph) == []

    def graph_with_side_work(self):
        graph = graph_with(story_with("implementing", "not-started", story_id="1.1"))
        side = Story(id="0.1", title="Intermittent Tasks", tasks=[
            TaskRef(id="0.1.0", title="fix", status="setup", is_intermittent=True),
        ])
        graph.features.insert(0, Feature(id="0", title="Infra", path="F0", stories=[side]))
        return graph

    def test_intermittent_task_is_worked_while_main_paused(self):
        graph = self.graph_with_side_work()
        assert find_active_task(graph).id == "0.1.0"
        assert [loc.task.id for loc in find_active_tasks(graph)] == ["0.1.0", "1.1.0"]
        assert find_paused_task(graph, find_active_task(graph)).id == "1.1.0"

    def test_main_task_when_no_side_work(self):
        graph = graph_with(story_with("verifying"))
        task = find_active_task(graph)
        assert task.id == "1.1.0"
        assert find_paused_task(graph, task) is None

    def test_require_active_location_default(self):
        assert require_active_location(self.graph_with_side_work()).task.id == "0.1.0"

    def test_require_active_location_explicit_task(self):
        assert require_active_location(self.graph_with_side_work(), "1.1.0").task.id == "1.1.0"

    def test_require_active_location_rejects_inactive_task(self):
        with pytest.raises(errors.InvalidWorkflowStateError) as exc_info:
            require_active_location(self.graph_with_side_work(), "1.1.1", action="check")
        assert exc_info.value.current_status == "not-started"

    def test_require_active_location_nothing_active(self):
        with pytest.raises(errors.NoActiveSessionError):
            require_active_location(graph_with(story_with("not-started")))

    def test_blocked_main_tasks_first(self):
        main = story_with("blocked", story_id="1.1")
        graph = graph_with(main)
        side = Story(id="0.1", title="Intermittent Tasks", tasks=[
            TaskRef(id="0.1.0", title="fix", status="blocked", is_intermittent=True),
        ])
        graph.features.insert(0, Feature(id="0", title="Infra", path="F0", stories=[side]))
        assert [loc.task.id for loc in find_blocked_tasks(graph)] == ["1.1.0", "0.1.0"]


class TestIntermittentStory:
    """Tests for ensure_intermittent_story()."""

    def test_creates_feature_zero_first(self):
        graph = graph_with(story_with("not-started"))
        loc = ensure_intermittent_story(graph)
        assert graph.features[0] is loc.feature
        assert loc.feature.id == "0"
        assert loc.feature.path == "F0"
        assert loc.story.id == "0.1"
        assert loc.story.title == "Intermittent Tasks"

    def test_idempotent(self):
        graph = graph_with()
        first = ensure_intermittent_story(graph)
        second = ensure_intermittent_story(graph)
        assert first.story is second.story
        assert len(graph.features) == 2


class TestNextTaskId:
    def test_empty_story(self):
        assert next_task_id(Story(id="2.3", title="S")) == "2.3.0"

    def test_one_past_highest(self):
        story = Story(id="1.1", title="S", tasks=[
            TaskRef(id="1.1.0", title="a"),
            TaskRef(id="1.1.7", title="b"),
            TaskRef(id="1.1.2", title="c"),
        ])
        assert next_task_id(story) == "1.1.8"


def test_progress_stats():
    story = story_with("completed", "not-started")
    graph = graph_with(story, story_with("completed", story_id="1.2"))
    recalculate_rollups(graph)
    stats = calculate_progress_stats(graph)
    assert stats.total_features == 1
    assert stats.completed_features == 0
    assert stats.total_stories == 2
    assert stats.completed_stories == 1
    assert stats.total_tasks == 3
    assert stats.completed_tasks == 2
