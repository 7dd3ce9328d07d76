"""Path helpers for a taskflow project directory."""

import re
from pathlib import Path

from taskflow.lib.constants import LOCK_FILE, PROJECT_INDEX_FILE, TASKFLOW_DIR, TASKS_DIR

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Lower-case, collapse non-alphanumeric runs to one hyphen, trim hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def tasks_dir(root: Path) -> Path:
    return Path(root) / TASKS_DIR


def project_index_path(root: Path) -> Path:
    return tasks_dir(root) / PROJECT_INDEX_FILE


def feature_file_path(root: Path, feature_path: str) -> Path:
    """Resolve a feature's path hint to its JSON file.

    A hint ending in .json is taken as the file itself; anything else is a
    directory holding <dirname>.json.
    """
    if feature_path.endswith(".json"):
        return tasks_dir(root) / feature_path
    return tasks_dir(root) / feature_path / f"{Path(feature_path).name}.json"


def feature_dir(root: Path, feature_path: str) -> Path:
    return feature_file_path(root, feature_path).parent


def story_dir_name(story_id: str, story_title: str) -> str:
    return f"S{story_id}-{slugify(story_title)}"


def lock_file_path(root: Path) -> Path:
    return Path(root) / TASKFLOW_DIR / LOCK_FILE
