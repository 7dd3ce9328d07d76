"""Tests for taskflow.lib.storage and the on-disk types."""

import json

import pytest

from conftest import make_feature, make_story, make_task, read_json, write_project
from taskflow.lib import errors
from taskflow.lib.storage import (
    Project,
    create_task,
    load_graph,
    load_task_file,
    save_feature,
    task_file_path,
    write_task_file,
)
from taskflow.lib.types import Feature, TaskFile


class TestLoadGraph:
    """Tests for load_graph()."""

    def test_loads_features_stories_and_tasks(self, sample_root):
        graph = load_graph(sample_root)
        assert graph.project == "demo"
        assert [f.id for f in graph.features] == ["1", "2"]
        story = graph.features[0].stories[0]
        assert [t.id for t in story.tasks] == ["1.1.0", "1.1.1"]
        assert story.tasks[1].dependencies == ["1.1.0"]

    def test_features_sorted_numerically(self, tmp_path):
        features = [
            make_feature("10", "Later", []),
            make_feature("2", "Earlier", []),
        ]
        write_project(tmp_path, features)
        graph = load_graph(tmp_path)
        assert [f.id for f in graph.features] == ["2", "10"]

    def test_missing_index_raises_file_not_found(self, tmp_path):
        with pytest.raises(errors.FileNotFoundError) as exc_info:
            load_graph(tmp_path)
        assert "project-index.json" in str(exc_info.value)

    def test_file_not_found_is_also_builtin(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_graph(tmp_path)

    def test_missing_feature_file_raises(self, sample_root):
        (sample_root / "tasks" / "F2" / "F2.json").unlink()
        with pytest.raises(errors.FileNotFoundError):
            load_graph(sample_root)

    def test_invalid_json_raises_invalid_format(self, sample_root):
        (sample_root / "tasks" / "F1" / "F1.json").write_text("{not json")
        with pytest.raises(errors.InvalidFileFormatError):
            load_graph(sample_root)

    def test_schema_violation_raises_invalid_format(self, sample_root):
        path = sample_root / "tasks" / "F1" / "F1.json"
        data = read_json(path)
        data["stories"][0]["tasks"][0]["status"] = "bogus"
        path.write_text(json.dumps(data))
        with pytest.raises(errors.InvalidFileFormatError) as exc_info:
            load_graph(sample_root)
        assert "bogus" in exc_info.value.parse_error

    def test_task_outside_its_story_rejected(self, tmp_path):
        features = [make_feature("1", "A", [make_story("1.1", "S", [make_task("1.2.0", "wrong parent")])])]
        write_project(tmp_path, features)
        with pytest.raises(errors.InvalidFileFormatError) as exc_info:
            load_graph(tmp_path)
        assert "does not belong" in exc_info.value.parse_error

    def test_dangling_dependency_warns(self, tmp_path, caplog):
        features = [make_feature("1", "A", [make_story("1.1", "S", [make_task("1.1.0", "t", deps=["9.9.9"])])])]
        write_project(tmp_path, features)
        graph = load_graph(tmp_path)
        assert graph.features[0].stories[0].tasks[0].dependencies == ["9.9.9"]
        assert "9.9.9" in caplog.text

    def test_dangling_dependency_strict_raises(self, tmp_path):
        features = [make_feature("1", "A", [make_story("1.1", "S", [make_task("1.1.0", "t", deps=["9.9.9"])])])]
        write_project(tmp_path, features)
        with pytest.raises(errors.InvalidFileFormatError):
            load_graph(tmp_path, strict_dependencies=True)


class TestSaveFeature:
    """Tests for save_feature() output format."""

    def test_round_trips_and_keeps_format(self, sample_root):
        graph = load_graph(sample_root)
        save_feature(sample_root, graph.features[0])
        text = (sample_root / "tasks" / "F1" / "F1.json").read_text()
        assert text.endswith("}\n")
        assert '"dependencies": ["1.1.0"]' in text
        assert '\n  "id": "1",' in text

    def test_requires_path(self, tmp_path):
        with pytest.raises(errors.InvalidFileFormatError):
            save_feature(tmp_path, Feature(id="3", title="No path"))


class TestTaskFiles:
    """Tests for task file lookup and TaskFile serialization."""

    def test_task_file_path_matches_story_prefix(self, sample_root):
        graph = load_graph(sample_root)
        path = task_file_path(sample_root, graph, "1.2.0")
        assert path == sample_root / "tasks" / "F1" / "S1.2-oauth" / "T1.2.0.json"

    def test_task_file_path_accepts_titled_file(self, sample_root):
        story_dir = sample_root / "tasks" / "F1" / "S1.2-oauth"
        (story_dir / "T1.2.0.json").rename(story_dir / "T1.2.0-google-provider.json")
        graph = load_graph(sample_root)
        assert task_file_path(sample_root, graph, "1.2.0").name == "T1.2.0-google-provider.json"

    def test_task_file_path_none_for_unknown(self, sample_root):
        graph = load_graph(sample_root)
        assert task_file_path(sample_root, graph, "7.7.7") is None

    def test_unknown_keys_preserved(self, tmp_path):
        path = tmp_path / "T1.1.0.json"
        path.write_text(json.dumps({
            "id": "1.1.0",
            "title": "t",
            "description": "",
            "status": "setup",
            "isIntermittent": False,
            "customField": {"a": 1},
        }))
        task = load_task_file(path)
        assert task.extra == {"isIntermittent": False, "customField": {"a": 1}}
        write_task_file(path, task)
        assert read_json(path)["customField"] == {"a": 1}

    def test_optional_fields_omitted_when_unset(self, tmp_path):
        path = tmp_path / "T1.1.0.json"
        write_task_file(path, TaskFile(id="1.1.0", title="t", description=""))
        data = read_json(path)
        assert "blockedReason" not in data
        assert "previousStatus" not in data
        assert data["skill"] == "backend"


class TestCreateTask:
    """Tests for create_task()."""

    def test_appends_next_id_in_story(self, sample_root):
        graph = load_graph(sample_root)
        loc, path = create_task(sample_root, graph, "Remember me", story_id="1.1", dependencies=["1.1.0"])
        assert loc.task.id == "1.1.2"
        assert path.exists()
        assert read_json(path)["status"] == "not-started"

        reloaded = load_graph(sample_root)
        ids = [t.id for t in reloaded.features[0].stories[0].tasks]
        assert ids == ["1.1.0", "1.1.1", "1.1.2"]

    def test_first_task_in_empty_story(self, tmp_path):
        write_project(tmp_path, [make_feature("1", "A", [make_story("1.1", "Empty", [])])])
        graph = load_graph(tmp_path)
        loc, _ = create_task(tmp_path, graph, "First", story_id="1.1")
        assert loc.task.id == "1.1.0"

    def test_intermittent_creates_reserved_story(self, sample_root):
        graph = load_graph(sample_root)
        loc, path = create_task(sample_root, graph, "Fix typo in footer", intermittent=True)
        assert loc.feature.id == "0"
        assert loc.feature.title == "Infrastructure & Quick Fixes"
        assert loc.story.id == "0.1"
        assert loc.task.id == "0.1.0"
        assert loc.task.is_intermittent
        assert path == sample_root / "tasks" / "F0" / "S0.1-intermittent-tasks" / "T0.1.0.json"

        index = read_json(sample_root / "tasks" / "project-index.json")
        assert index["features"][0]["id"] == "0"
        reloaded = load_graph(sample_root)
        assert reloaded.features[0].stories[0].tasks[0].is_intermittent

    def test_intermittent_reuses_reserved_story(self, sample_root):
        graph = load_graph(sample_root)
        create_task(sample_root, graph, "One", intermittent=True)
        loc, _ = create_task(sample_root, graph, "Two", intermittent=True)
        assert loc.task.id == "0.1.1"
        assert len([f for f in graph.features if f.id == "0"]) == 1

    def test_unknown_story_raises(self, sample_root):
        graph = load_graph(sample_root)
        with pytest.raises(errors.StoryNotFoundError):
            create_task(sample_root, graph, "x", story_id="9.9")

    def test_unknown_dependency_raises(self, sample_root):
        graph = load_graph(sample_root)
        with pytest.raises(errors.TaskNotFoundError):
            create_task(sample_root, graph, "x", story_id="1.1", dependencies=["5.5.5"])

    def test_requires_story_or_intermittent(self, sample_root):
        graph = load_graph(sample_root)
        with pytest.raises(ValueError):
            create_task(sample_root, graph, "x")


class TestProject:
    """Tests for the Project handle."""

    def test_commit_task_updates_rollups_on_disk(self, project, sample_root):
        loc = project.locate("1.1.0")
        task = project.load_task("1.1.0")
        task.status = "setup"
        project.commit_task(loc, task)

        feature = read_json(sample_root / "tasks" / "F1" / "F1.json")
        assert feature["status"] == "in-progress"
        assert feature["stories"][0]["status"] == "in-progress"
        assert feature["stories"][0]["tasks"][0]["status"] == "setup"
        assert feature["stories"][1]["status"] == "not-started"

        index = read_json(sample_root / "tasks" / "project-index.json")
        assert index["features"][0]["status"] == "in-progress"
        assert index["features"][1]["status"] == "not-started"
        assert read_json(project.task_path("1.1.0"))["status"] == "setup"

    def test_locate_unknown_raises(self, project):
        with pytest.raises(errors.TaskNotFoundError):
            project.locate("4.4.4")

    def test_missing_task_file_raises(self, project, sample_root):
        project.task_path("2.1.0").unlink()
        with pytest.raises(errors.FileNotFoundError):
            project.load_task("2.1.0")

    def test_load_uses_config_root(self, config):
        project = Project.load(config)
        assert project.root == config.root
        assert len(project.graph.features) == 2
