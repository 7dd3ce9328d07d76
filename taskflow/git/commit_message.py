"""Commit message format for task commits.

    feat(F1): T1.1.0 - Add login form

    Optional body lines.

    Story: S1.1
"""

import re
from dataclasses import dataclass
from typing import Optional

from taskflow.lib.constants import COMMIT_TYPES

HEADER_RE = re.compile(
    rf"^({'|'.join(COMMIT_TYPES)})\(F(\d+)\): T(\d+\.\d+\.\d+) - (.+)$"
)
STORY_FOOTER_RE = re.compile(r"^Story:\s*S(\d+\.\d+)\s*$")


@dataclass
class CommitMessageParts:
    type: str
    feature_id: str
    task_id: str
    title: str
    body: Optional[str] = None
    story_id: Optional[str] = None


def build_commit_message(
    commit_type: str,
    feature_id: str,
    task_id: str,
    title: str,
    body_lines: list[str],
    story_id: str,
) -> str:
    """Render a task commit message. Raises ValueError for an unknown type."""
    if commit_type not in COMMIT_TYPES:
        raise ValueError(f"Unknown commit type '{commit_type}'. Expected one of: {', '.join(COMMIT_TYPES)}")
    header = f"{commit_type}(F{feature_id}): T{task_id} - {title}"
    body = "\n\n" + "\n".join(body_lines) if body_lines else ""
    return f"{header}{body}\n\nStory: S{story_id}"


def parse_commit_message(message: str) -> Optional[CommitMessageParts]:
    """Split a commit message into its parts, or None if the header is malformed."""
    lines = message.strip().splitlines()
    if not lines:
        return None

    match = HEADER_RE.match(lines[0])
    if not match:
        return None
    commit_type, feature_id, task_id, title = match.groups()

    story_id = None
    body_lines = []
    for line in lines[1:]:
        footer = STORY_FOOTER_RE.match(line.strip())
        if footer:
            story_id = footer.group(1)
            break
        body_lines.append(line)

    body = "\n".join(body_lines).strip()
    return CommitMessageParts(
        type=commit_type,
        feature_id=feature_id,
        task_id=task_id,
        title=title,
        body=body or None,
        story_id=story_id,
    )


def validate_commit_message_format(message: str) -> bool:
    """True if the header parses and the Story footer is present."""
    parts = parse_commit_message(message)
    return parts is not None and parts.story_id is not None
