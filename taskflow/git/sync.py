"""
Keep the working tree on the branch that belongs to the active story.

Each story maps to exactly one branch:
    story/S<story-id>-<slug>          regular stories
    intermittent/S<story-id>-<slug>   stories under the reserved feature 0

verify_branch() switches to that branch, creating it from the base branch
when needed and carrying uncommitted work across via a stash. It is safe to
re-run after a partial failure.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from taskflow.git.branch import branch_exists, checkout, create_branch, get_current_branch
from taskflow.git.remote import PULL_TIMEOUT, has_remote, pull
from taskflow.git.runner import DEFAULT_TIMEOUT
from taskflow.git.stash import stash_pop, stash_push, top_stash_matches
from taskflow.git.status import get_changed_entries
from taskflow.lib.config import BranchingConfig, ProjectConfig
from taskflow.lib.constants import AUTO_STASH_MESSAGE, INTERMITTENT_FEATURE_ID
from taskflow.lib.errors import GitOperationError, WrongBranchError
from taskflow.lib.paths import slugify
from taskflow.lib.types import Story

logger = logging.getLogger(__name__)


def expected_branch(story: Story, branching: Optional[BranchingConfig] = None) -> str:
    """Deterministic branch name for a story."""
    branching = branching or BranchingConfig()
    if story.id.startswith(f"{INTERMITTENT_FEATURE_ID}."):
        prefix = branching.intermittent_prefix
    else:
        prefix = branching.story_prefix
    slug = slugify(story.title)
    if not slug:
        return f"{prefix}S{story.id}"
    return f"{prefix}S{story.id}-{slug}"


def auto_stash_message(expected: str) -> str:
    """Stash message naming the branch the stash is meant for."""
    return f"{AUTO_STASH_MESSAGE} -> {expected}"


def branch_switch_command(repo: Path, current: Optional[str], expected: str, base: str = "main") -> str:
    """Shell command a user can run to get onto `expected` by hand."""
    if branch_exists(repo, expected):
        return f"git checkout {expected}"
    if current == base:
        return f"git pull && git checkout -b {expected}"
    return f"git checkout {base} && git pull && git checkout -b {expected}"


@dataclass
class BranchSyncResult:
    """What verify_branch() did."""
    expected: str
    previous: Optional[str]
    action: str                                # none, checkout, created
    stashed: bool = False
    pulled: bool = False
    carried: list[str] = field(default_factory=list)   # paths moved across via the stash

    @property
    def switched(self) -> bool:
        return self.action != "none"


def verify_branch(
    repo: Path,
    story: Story,
    branching: Optional[BranchingConfig] = None,
    pull_base: bool = True,
    timeout: int = DEFAULT_TIMEOUT,
) -> BranchSyncResult:
    """
    Make sure the working tree is on the story's branch.

    1. Already on it: nothing to do.
    2. Branch exists locally: check it out.
    3. Otherwise: stash uncommitted work, check out the base branch, pull,
       create the story branch, pop the stash.

    A taskflow auto-stash for this same branch left on top of the stash
    list by an interrupted run is adopted instead of stashing again. Stashes
    made for other branches are left alone.

    Raises:
        GitOperationError: any git step failed or timed out
        WrongBranchError: git reported success but HEAD is elsewhere
    """
    branching = branching or BranchingConfig()
    base = branching.base
    expected = expected_branch(story, branching)
    current = get_current_branch(repo, timeout)

    if current == expected:
        logger.debug(f"[GIT] Already on {expected}")
        return BranchSyncResult(expected=expected, previous=current, action="none")

    if branch_exists(repo, expected, timeout):
        logger.info(f"[GIT] Switching {current} -> {expected}")
        checkout(repo, expected, timeout)
        result = BranchSyncResult(expected=expected, previous=current, action="checkout")
    else:
        result = BranchSyncResult(expected=expected, previous=current, action="created")
        try:
            _create_from_base(repo, expected, base, current, pull_base, timeout, result)
        except GitOperationError:
            if result.stashed:
                logger.warning(
                    f"[GIT] Changes were stashed as '{auto_stash_message(expected)}' but the branch switch failed. "
                    "Re-run the command, or run 'git stash pop' to restore them."
                )
            raise

    now = get_current_branch(repo, timeout)
    if now != expected:
        raise WrongBranchError(now or "(detached HEAD)", expected, branch_switch_command(repo, now, expected, base))
    return result


def _create_from_base(
    repo: Path,
    expected: str,
    base: str,
    current: Optional[str],
    pull_base: bool,
    timeout: int,
    result: BranchSyncResult,
) -> None:
    message = auto_stash_message(expected)
    changed = get_changed_entries(repo, timeout)
    if changed:
        logger.info(f"[GIT] Stashing {len(changed)} changed path(s) before switching to {expected}")
        result.carried = [path for _, path in changed]
        result.stashed = stash_push(repo, message, timeout)
    elif current == base and top_stash_matches(repo, message, timeout):
        logger.info(f"[GIT] Found auto-stash for {expected} from an interrupted switch, will restore it")
        result.stashed = True

    if current != base:
        checkout(repo, base, timeout)

    if pull_base and has_remote(repo, timeout):
        pull(repo, timeout=max(timeout, PULL_TIMEOUT))
        result.pulled = True

    logger.info(f"[GIT] Creating {expected} from {base}")
    create_branch(repo, expected, timeout)

    if result.stashed:
        stash_pop(repo, timeout)


def assert_on_branch(
    repo: Path,
    story: Story,
    branching: Optional[BranchingConfig] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> None:
    """Raise WrongBranchError unless HEAD is on the story's branch. Never switches."""
    branching = branching or BranchingConfig()
    expected = expected_branch(story, branching)
    current = get_current_branch(repo, timeout)
    if current != expected:
        raise WrongBranchError(
            current or "(detached HEAD)",
            expected,
            branch_switch_command(repo, current, expected, branching.base),
        )


def sync_story_branch(config: ProjectConfig, story: Story) -> Optional[BranchSyncResult]:
    """verify_branch() with project settings. None when branching is disabled."""
    if not config.branching.enabled:
        return None
    return verify_branch(
        config.root,
        story,
        config.branching,
        pull_base=config.git_pull,
        timeout=config.git_timeout,
    )


def check_story_branch(config: ProjectConfig, story: Story) -> None:
    """assert_on_branch() with project settings. No-op when branching is disabled."""
    if config.branching.enabled:
        assert_on_branch(config.root, story, config.branching, timeout=config.git_timeout)
