"""
Configuration loader for taskflow.

Loads taskflow.yaml from the project root. If no config file exists, returns
defaults. A file that fails to parse is reported and ignored.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from taskflow.lib.constants import CONFIG_FILE, TASKFLOW_DIR, TASKS_DIR

logger = logging.getLogger(__name__)

VALID_BRANCH_STRATEGIES = ("per-story", "none")


@dataclass
class BranchingConfig:
    strategy: str = "per-story"                # per-story, none
    base: str = "main"
    story_prefix: str = "story/"
    intermittent_prefix: str = "intermittent/"

    @property
    def enabled(self) -> bool:
        return self.strategy != "none"


@dataclass
class ProjectConfig:
    """Project-level configuration from taskflow.yaml"""
    root: Path
    name: str = ""
    branching: BranchingConfig = field(default_factory=BranchingConfig)
    git_timeout: int = 30
    git_pull: bool = True                      # pull base before creating a story branch
    lock_timeout: float = 10
    strict_dependencies: bool = False          # fail load on dangling dependency ids

    @property
    def tasks_dir(self) -> Path:
        return self.root / TASKS_DIR

    @property
    def taskflow_dir(self) -> Path:
        return self.root / TASKFLOW_DIR


def _section(data: dict, key: str) -> dict:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        logger.warning(f"Ignoring '{key}' in {CONFIG_FILE}: expected a mapping")
        return {}
    return value


def _number(section: dict, name: str, key: str, default, cast):
    value = section.get(key, default)
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid {name}.{key} '{value}' in {CONFIG_FILE}, using {default}")
        return default


def load_project_config(root: Optional[Path]) -> ProjectConfig:
    """Load taskflow.yaml and return ProjectConfig.

    If the file doesn't exist, returns defaults rooted at `root`.
    """
    root = Path(root) if root is not None else Path.cwd()
    config = ProjectConfig(root=root)

    config_path = root / CONFIG_FILE
    if not config_path.exists():
        return config

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse {config_path}: {e}")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Failed to parse {config_path}: top level must be a mapping")
        return config

    project = _section(data, "project")
    config.name = str(project.get("name", ""))

    branching = _section(data, "branching")
    strategy = branching.get("strategy", "per-story")
    if strategy not in VALID_BRANCH_STRATEGIES:
        logger.warning(
            f"Unknown branching strategy '{strategy}', using 'per-story'. "
            f"Valid strategies: {', '.join(VALID_BRANCH_STRATEGIES)}"
        )
        strategy = "per-story"
    config.branching = BranchingConfig(
        strategy=strategy,
        base=branching.get("base", "main"),
        story_prefix=branching.get("story_prefix", "story/"),
        intermittent_prefix=branching.get("intermittent_prefix", "intermittent/"),
    )

    git = _section(data, "git")
    config.git_timeout = _number(git, "git", "timeout", 30, int)
    config.git_pull = bool(git.get("pull", True))

    lock = _section(data, "lock")
    config.lock_timeout = _number(lock, "lock", "timeout", 10, float)

    validation = _section(data, "validation")
    config.strict_dependencies = bool(validation.get("strict_dependencies", False))

    return config
