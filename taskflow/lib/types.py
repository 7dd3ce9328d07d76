"""
Data types for the Feature -> Story -> Task graph.

The dataclasses mirror the JSON documents on disk. Field order in to_dict()
is the order written to disk, so keep it stable.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from taskflow.lib.constants import (
    DEFAULT_SKILL,
    INTERMITTENT_FEATURE_ID,
    NOT_STARTED,
)


@dataclass
class TaskRef:
    """Lightweight task handle stored inside a Story."""
    id: str                                    # 1.1.0
    title: str
    status: str = NOT_STARTED
    dependencies: list[str] = field(default_factory=list)
    is_intermittent: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "TaskRef":
        return cls(
            id=data["id"],
            title=data["title"],
            status=data["status"],
            dependencies=list(data.get("dependencies", [])),
            is_intermittent=bool(data.get("isIntermittent", False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "dependencies": list(self.dependencies),
            "isIntermittent": self.is_intermittent,
        }

    @property
    def story_id(self) -> str:
        return self.id.rsplit(".", 1)[0]


@dataclass
class Story:
    """User-facing scenario within a Feature, bound to one branch."""
    id: str                                    # 1.1
    title: str
    status: str = NOT_STARTED                  # roll-up, never authored
    tasks: list[TaskRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Story":
        return cls(
            id=data["id"],
            title=data["title"],
            status=data["status"],
            tasks=[TaskRef.from_dict(t) for t in data.get("tasks", [])],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @property
    def feature_id(self) -> str:
        return self.id.split(".", 1)[0]

    @property
    def is_intermittent(self) -> bool:
        return self.feature_id == INTERMITTENT_FEATURE_ID


@dataclass
class Feature:
    """Top-level functional area."""
    id: str                                    # 1
    title: str
    status: str = NOT_STARTED                  # roll-up, never authored
    path: Optional[str] = None                 # relative to tasks/, e.g. "F1"
    stories: list[Story] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict, path: Optional[str] = None) -> "Feature":
        return cls(
            id=data["id"],
            title=data["title"],
            status=data["status"],
            path=path or data.get("path"),
            stories=[Story.from_dict(s) for s in data.get("stories", [])],
        )

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "status": self.status,
        }
        if self.path:
            d["path"] = self.path
        d["stories"] = [s.to_dict() for s in self.stories]
        return d


@dataclass
class FeatureRef:
    """Entry of the project index."""
    id: str
    title: str
    status: str
    path: str

    @classmethod
    def from_dict(cls, data: dict) -> "FeatureRef":
        return cls(id=data["id"], title=data["title"], status=data["status"], path=data["path"])

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "status": self.status, "path": self.path}


@dataclass
class ProjectIndex:
    project: str
    features: list[FeatureRef] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectIndex":
        return cls(
            project=data["project"],
            features=[FeatureRef.from_dict(f) for f in data.get("features", [])],
        )

    def to_dict(self) -> dict:
        return {"project": self.project, "features": [f.to_dict() for f in self.features]}


@dataclass
class Graph:
    """The full in-memory Feature/Story/TaskRef tree for one project."""
    project: str
    features: list[Feature] = field(default_factory=list)


@dataclass
class StoryLocation:
    feature: Feature
    story: Story


@dataclass
class TaskLocation:
    feature: Feature
    story: Story
    task: TaskRef


@dataclass
class Subtask:
    id: str
    description: str
    status: str = "pending"                    # pending, completed

    @classmethod
    def from_dict(cls, data: dict) -> "Subtask":
        return cls(id=data["id"], description=data["description"], status=data["status"])

    def to_dict(self) -> dict:
        return {"id": self.id, "description": self.description, "status": self.status}


# Optional TaskFile keys, in the order they are written after the required ones.
# Maps JSON key -> attribute name.
_OPTIONAL_TASK_KEYS = {
    "blockedReason": "blocked_reason",
    "previousStatus": "previous_status",
    "notes": "notes",
    "estimatedHours": "estimated_hours",
    "actualHours": "actual_hours",
    "timeEntries": "time_entries",
    "acceptanceCriteria": "acceptance_criteria",
}

_KNOWN_TASK_KEYS = {
    "id", "title", "description", "status", "skill", "subtasks", "context",
    *_OPTIONAL_TASK_KEYS,
}


@dataclass
class TaskFile:
    """Full task detail, stored one file per task.

    Keys we don't model (e.g. isIntermittent written by older tooling) are kept
    in `extra` and written back untouched.
    """
    id: str
    title: str
    description: str
    status: str = NOT_STARTED
    skill: str = DEFAULT_SKILL
    subtasks: list[Subtask] = field(default_factory=list)
    context: list[str] = field(default_factory=list)
    blocked_reason: Optional[str] = None       # only while status == blocked
    previous_status: Optional[str] = None      # only while status == blocked
    notes: Optional[list[dict]] = None         # {timestamp, type?, content}
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    time_entries: Optional[list[dict]] = None
    acceptance_criteria: Optional[list[str]] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "TaskFile":
        task = cls(
            id=data["id"],
            title=data["title"],
            description=data["description"],
            status=data["status"],
            skill=data.get("skill", DEFAULT_SKILL),
            subtasks=[Subtask.from_dict(s) for s in data.get("subtasks", [])],
            context=list(data.get("context", [])),
            extra={k: v for k, v in data.items() if k not in _KNOWN_TASK_KEYS},
        )
        for key, attr in _OPTIONAL_TASK_KEYS.items():
            if key in data:
                setattr(task, attr, data[key])
        return task

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "skill": self.skill,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "context": list(self.context),
        }
        for key, attr in _OPTIONAL_TASK_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                d[key] = value
        d.update(self.extra)
        return d
