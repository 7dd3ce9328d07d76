"""
Persistence for the task graph.

Layout under the project root:
  tasks/project-index.json                        project + feature refs
  tasks/F<id>/F<id>.json                          feature with stories/task refs
  tasks/F<id>/S<story-id>-<slug>/T<task-id>.json  full task detail

Writes are whole-file overwrites. Nothing here retries; a failed command is
simply re-run.
"""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from taskflow.lib import validate
from taskflow.lib.config import ProjectConfig
from taskflow.lib.constants import DEFAULT_SKILL, NOT_STARTED
from taskflow.lib.deps import find_dangling_dependencies
from taskflow.lib.errors import (
    FileNotFoundError,
    InvalidFileFormatError,
    TaskNotFoundError,
)
from taskflow.lib.graph import (
    ensure_intermittent_story,
    find_task_location,
    next_task_id,
    recalculate_rollups,
    require_story_location,
    require_task_location,
)
from taskflow.lib.paths import (
    feature_dir,
    feature_file_path,
    project_index_path,
    story_dir_name,
)
from taskflow.lib.types import (
    Feature,
    FeatureRef,
    Graph,
    ProjectIndex,
    TaskFile,
    TaskLocation,
    TaskRef,
)

logger = logging.getLogger(__name__)

# Collapses a multi-line string array back onto one line
_DEPENDENCIES_BLOCK = re.compile(r'"dependencies": \[\n\s*((?:"(?:[^"\\]|\\.)*",?\n\s*)+)\]')


def _dump_json(data: dict) -> str:
    """Serialize with 2-space indent and a trailing newline.

    Dependency lists are kept on one line so diffs stay small.
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)

    def _inline(match: re.Match) -> str:
        items = [item.strip().rstrip(",") for item in match.group(1).splitlines() if item.strip()]
        return f'"dependencies": [{", ".join(items)}]'

    return _DEPENDENCIES_BLOCK.sub(_inline, text) + "\n"


def _read_json(path: Path, schema_name: str) -> dict:
    if not path.exists():
        raise FileNotFoundError(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidFileFormatError(path, str(e)) from None
    try:
        validate.validate(data, schema_name)
    except validate.ValidationError as e:
        raise InvalidFileFormatError(path, e.detail) from None
    return data


def _write_json(path: Path, data: dict, schema_name: str) -> None:
    try:
        validate.validate_before_write(data, schema_name, path)
    except validate.ValidationError as e:
        raise InvalidFileFormatError(path, e.detail) from None
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_dump_json(data), encoding="utf-8")


# ---------------------------------------------------------------------------
# Project index and feature files
# ---------------------------------------------------------------------------

def load_project_index(root: Path) -> ProjectIndex:
    return ProjectIndex.from_dict(_read_json(project_index_path(root), "project-index"))


def load_feature(root: Path, feature_path: str) -> Feature:
    path = feature_file_path(root, feature_path)
    feature = Feature.from_dict(_read_json(path, "feature"), path=feature_path)
    _check_hierarchy(feature, path)
    return feature


def _check_hierarchy(feature: Feature, path: Path) -> None:
    """Child ids must extend their parent's id and be unique within it."""
    story_ids = set()
    for story in feature.stories:
        if story.feature_id != feature.id:
            raise InvalidFileFormatError(path, f"Story {story.id} does not belong to feature {feature.id}")
        if story.id in story_ids:
            raise InvalidFileFormatError(path, f"Duplicate story id {story.id}")
        story_ids.add(story.id)

        task_ids = set()
        for task in story.tasks:
            if task.story_id != story.id:
                raise InvalidFileFormatError(path, f"Task {task.id} does not belong to story {story.id}")
            if task.id in task_ids:
                raise InvalidFileFormatError(path, f"Duplicate task id {task.id}")
            task_ids.add(task.id)


def load_graph(root: Path, strict_dependencies: bool = False) -> Graph:
    """Build the full graph from the project index and every feature file.

    Raises:
        FileNotFoundError: index or a referenced feature file is missing
        InvalidFileFormatError: bad JSON, schema mismatch, or broken id hierarchy
    """
    root = Path(root)
    index = load_project_index(root)
    features = [load_feature(root, ref.path) for ref in index.features]
    features.sort(key=lambda f: int(f.id))

    seen = set()
    for feature in features:
        if feature.id in seen:
            raise InvalidFileFormatError(project_index_path(root), f"Duplicate feature id {feature.id}")
        seen.add(feature.id)

    graph = Graph(project=index.project, features=features)

    for task_id, dep_id in find_dangling_dependencies(graph):
        if strict_dependencies:
            raise InvalidFileFormatError(
                project_index_path(root),
                f"Task {task_id} depends on unknown task {dep_id}",
            )
        logger.warning(f"[STORE] Task {task_id} depends on unknown task {dep_id}; it will never be selectable")

    logger.debug(f"[STORE] Loaded {len(features)} features for project '{graph.project}'")
    return graph


def save_feature(root: Path, feature: Feature) -> None:
    if not feature.path:
        raise InvalidFileFormatError(f"feature {feature.id}", "Feature path is required for saving")
    path = feature_file_path(root, feature.path)
    _write_json(path, feature.to_dict(), "feature")


def save_project_index(root: Path, graph: Graph) -> None:
    index = ProjectIndex(
        project=graph.project,
        features=[
            FeatureRef(id=f.id, title=f.title, status=f.status, path=f.path or f"F{f.id}")
            for f in graph.features
        ],
    )
    _write_json(project_index_path(root), index.to_dict(), "project-index")


# ---------------------------------------------------------------------------
# Task files
# ---------------------------------------------------------------------------

def task_file_path(root: Path, graph: Graph, task_id: str) -> Optional[Path]:
    """Locate an existing task file, or None if it isn't on disk.

    The story directory is matched by its "S<id>-" prefix so renamed story
    titles still resolve.
    """
    loc = find_task_location(graph, task_id)
    if loc is None or not loc.feature.path:
        return None

    fdir = feature_dir(root, loc.feature.path)
    if not fdir.is_dir():
        return None

    story_dirs = sorted(d for d in fdir.iterdir() if d.is_dir() and d.name.startswith(f"S{loc.story.id}-"))
    for story_dir in story_dirs:
        exact = story_dir / f"T{task_id}.json"
        if exact.exists():
            return exact
        named = sorted(story_dir.glob(f"T{task_id}-*.json"))
        if named:
            return named[0]
    return None


def load_task_file(path: Path) -> TaskFile:
    return TaskFile.from_dict(_read_json(Path(path), "task"))


def write_task_file(path: Path, task: TaskFile) -> None:
    _write_json(Path(path), task.to_dict(), "task")


def create_task(
    root: Path,
    graph: Graph,
    title: str,
    description: str = "",
    story_id: Optional[str] = None,
    intermittent: bool = False,
    dependencies: Optional[list[str]] = None,
    skill: str = DEFAULT_SKILL,
) -> tuple[TaskLocation, Path]:
    """Create a TaskRef + TaskFile pair with status not-started.

    Intermittent tasks go to the reserved story 0.1, which is created on
    first use. Regular tasks need an existing story_id.
    """
    root = Path(root)
    if intermittent:
        story_loc = ensure_intermittent_story(graph)
    elif story_id:
        story_loc = require_story_location(graph, story_id)
        intermittent = story_loc.story.is_intermittent
    else:
        raise ValueError("story_id is required for non-intermittent tasks")

    dependencies = list(dependencies or [])
    for dep_id in dependencies:
        if find_task_location(graph, dep_id) is None:
            raise TaskNotFoundError(dep_id)

    feature, story = story_loc.feature, story_loc.story
    task_ref = TaskRef(
        id=next_task_id(story),
        title=title,
        status=NOT_STARTED,
        dependencies=dependencies,
        is_intermittent=intermittent,
    )
    story.tasks.append(task_ref)

    path = feature_dir(root, feature.path) / story_dir_name(story.id, story.title) / f"T{task_ref.id}.json"
    write_task_file(path, TaskFile(id=task_ref.id, title=title, description=description, skill=skill))

    recalculate_rollups(graph)
    save_feature(root, feature)
    save_project_index(root, graph)
    logger.info(f"[STORE] Created task {task_ref.id} in story {story.id}")
    return TaskLocation(feature, story, task_ref), path


# ---------------------------------------------------------------------------
# Per-invocation project handle
# ---------------------------------------------------------------------------

@dataclass
class Project:
    """Graph plus the root it was loaded from, for one command invocation."""
    config: ProjectConfig
    graph: Graph

    @classmethod
    def load(cls, config: ProjectConfig) -> "Project":
        graph = load_graph(config.root, strict_dependencies=config.strict_dependencies)
        return cls(config=config, graph=graph)

    @property
    def root(self) -> Path:
        return self.config.root

    def locate(self, task_id: str) -> TaskLocation:
        return require_task_location(self.graph, task_id)

    def task_path(self, task_id: str) -> Path:
        self.locate(task_id)
        path = task_file_path(self.root, self.graph, task_id)
        if path is None:
            raise FileNotFoundError(f"task file for {task_id}")
        return path

    def load_task(self, task_id: str) -> TaskFile:
        return load_task_file(self.task_path(task_id))

    def save_task(self, task: TaskFile) -> None:
        """Write a task file whose status did not change."""
        write_task_file(self.task_path(task.id), task)

    def commit_task(self, loc: TaskLocation, task: TaskFile) -> None:
        """Persist a task mutation: task file, roll-ups, feature file, index."""
        loc.task.status = task.status
        recalculate_rollups(self.graph)
        write_task_file(self.task_path(loc.task.id), task)
        save_feature(self.root, loc.feature)
        save_project_index(self.root, self.graph)
