"""Shared fixtures: on-disk taskflow projects built under tmp_path."""

import json
import shutil
import subprocess
from pathlib import Path

import pytest

from taskflow.lib.config import load_project_config
from taskflow.lib.paths import story_dir_name
from taskflow.lib.storage import Project


def make_task(task_id, title, status="not-started", deps=None, intermittent=False):
    data = {"id": task_id, "title": title, "status": status, "dependencies": list(deps or [])}
    if intermittent:
        data["isIntermittent"] = True
    return data


def make_story(story_id, title, tasks, status="not-started"):
    return {"id": story_id, "title": title, "status": status, "tasks": tasks}


def make_feature(feature_id, title, stories, status="not-started"):
    return {"id": feature_id, "title": title, "status": status, "stories": stories}


def write_project(root: Path, features: list[dict], task_details=None, project="demo", branching="none") -> Path:
    """Write index, feature files, and one task file per task ref."""
    task_details = task_details or {}
    tasks_dir = root / "tasks"
    index = {"project": project, "features": []}

    for feature in features:
        path = f"F{feature['id']}"
        index["features"].append(
            {"id": feature["id"], "title": feature["title"], "status": feature["status"], "path": path}
        )
        feature_dir = tasks_dir / path
        feature_dir.mkdir(parents=True)
        (feature_dir / f"{path}.json").write_text(json.dumps(feature, indent=2) + "\n")

        for story in feature["stories"]:
            story_dir = feature_dir / story_dir_name(story["id"], story["title"])
            story_dir.mkdir()
            for ref in story["tasks"]:
                data = {
                    "id": ref["id"],
                    "title": ref["title"],
                    "description": f"Details for {ref['title']}",
                    "status": ref["status"],
                    "skill": "backend",
                    "subtasks": [],
                    "context": [],
                }
                data.update(task_details.get(ref["id"], {}))
                (story_dir / f"T{ref['id']}.json").write_text(json.dumps(data, indent=2) + "\n")

    (tasks_dir / "project-index.json").write_text(json.dumps(index, indent=2) + "\n")
    (root / "taskflow.yaml").write_text(f"project:\n  name: {project}\nbranching:\n  strategy: {branching}\n")
    return root


def sample_features(statuses=None):
    """Two features; 1.1.1 depends on 1.1.0, 1.2.0 depends on 1.1.1."""
    s = statuses or {}
    return [
        make_feature("1", "User Authentication", [
            make_story("1.1", "Login Flow", [
                make_task("1.1.0", "Create login form", s.get("1.1.0", "not-started")),
                make_task("1.1.1", "Add session handling", s.get("1.1.1", "not-started"), deps=["1.1.0"]),
            ]),
            make_story("1.2", "OAuth", [
                make_task("1.2.0", "Google provider", s.get("1.2.0", "not-started"), deps=["1.1.1"]),
            ]),
        ]),
        make_feature("2", "Billing", [
            make_story("2.1", "Invoices", [
                make_task("2.1.0", "Invoice model", s.get("2.1.0", "not-started")),
            ]),
        ]),
    ]


def read_json(path: Path) -> dict:
    return json.loads(Path(path).read_text())


@pytest.fixture
def sample_root(tmp_path):
    return write_project(tmp_path, sample_features())


@pytest.fixture
def config(sample_root):
    return load_project_config(sample_root)


@pytest.fixture
def project(config):
    return Project.load(config)


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), "-c", "commit.gpgsign=false", *args],
        capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


def init_repo(repo: Path) -> Path:
    """git init on main with one commit of whatever is in `repo`."""
    git(repo, "init", "-q")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    (repo / ".gitignore").write_text(".taskflow/\n")
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", "initial")
    return repo
