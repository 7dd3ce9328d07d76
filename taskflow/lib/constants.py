"""Shared constants for taskflow."""

import re

# ID validation
FEATURE_ID_PATTERN = re.compile(r'^\d+$')
STORY_ID_PATTERN = re.compile(r'^\d+\.\d+$')
TASK_ID_PATTERN = re.compile(r'^\d+\.\d+\.\d+$')

# Task statuses, in workflow order where one exists
NOT_STARTED = "not-started"
COMPLETED = "completed"
BLOCKED = "blocked"
ON_HOLD = "on-hold"
IN_PROGRESS = "in-progress"

WORKFLOW_CHAIN = [
    NOT_STARTED,
    "setup",
    "planning",
    "implementing",
    "verifying",
    "validating",
    "committing",
    COMPLETED,
]

ACTIVE_STATUSES = (
    "setup",
    "planning",
    "implementing",
    "verifying",
    "validating",
    "committing",
)

TASK_STATUSES = tuple(WORKFLOW_CHAIN) + (BLOCKED, ON_HOLD)

TASK_SKILLS = (
    "backend",
    "frontend",
    "fullstack",
    "devops",
    "docs",
    "development",
    "mobile",
    "ai",
)
DEFAULT_SKILL = "backend"

# Reserved location for intermittent (side-work) tasks
INTERMITTENT_FEATURE_ID = "0"
INTERMITTENT_STORY_ID = "0.1"
INTERMITTENT_FEATURE_TITLE = "Infrastructure & Quick Fixes"
INTERMITTENT_STORY_TITLE = "Intermittent Tasks"

# On-disk layout, relative to the project root
TASKS_DIR = "tasks"
TASKFLOW_DIR = ".taskflow"
PROJECT_INDEX_FILE = "project-index.json"
CONFIG_FILE = "taskflow.yaml"
LOCK_FILE = "session.lock"

AUTO_STASH_MESSAGE = "Auto-stash by taskflow before branch switch"

COMMIT_TYPES = ("feat", "fix", "docs", "style", "refactor", "test", "chore")


def is_active_status(status: str | None) -> bool:
    """Check if a status is one of the in-progress workflow states."""
    return status in ACTIVE_STATUSES
