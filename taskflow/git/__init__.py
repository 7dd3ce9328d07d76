"""Git operations for taskflow.

Return type conventions:
- Functions returning GitResult raise GitOperationError on failure.
  Examples: checkout(), create_branch(), pull(), commit()
- Functions returning bool: True when the condition holds, False otherwise.
  Examples: has_uncommitted_changes(), branch_exists(), has_remote()
- Functions returning parsed values (str, list): empty on failure.
  Examples: get_current_branch() -> None, stash_messages() -> []
"""

from taskflow.git.runner import (
    GitResult,
    run_git,
    run_git_checked,
)
from taskflow.git.status import (
    has_uncommitted_changes,
    get_status_porcelain,
    get_changed_entries,
)
from taskflow.git.branch import (
    get_current_branch,
    branch_exists,
    checkout,
    create_branch,
)
from taskflow.git.commit import (
    stage_all,
    commit,
    head_sha,
)
from taskflow.git.stash import (
    stash_push,
    stash_pop,
    stash_messages,
    top_stash_matches,
)
from taskflow.git.remote import (
    has_remote,
    pull,
)
from taskflow.git.sync import (
    BranchSyncResult,
    expected_branch,
    auto_stash_message,
    branch_switch_command,
    verify_branch,
    assert_on_branch,
    sync_story_branch,
    check_story_branch,
)
from taskflow.git.commit_message import (
    CommitMessageParts,
    build_commit_message,
    parse_commit_message,
    validate_commit_message_format,
)

__all__ = [
    # runner
    "GitResult",
    "run_git",
    "run_git_checked",
    # status
    "has_uncommitted_changes",
    "get_status_porcelain",
    "get_changed_entries",
    # branch
    "get_current_branch",
    "branch_exists",
    "checkout",
    "create_branch",
    # commit
    "stage_all",
    "commit",
    "head_sha",
    # stash
    "stash_push",
    "stash_pop",
    "stash_messages",
    "top_stash_matches",
    # remote
    "has_remote",
    "pull",
    # sync
    "BranchSyncResult",
    "expected_branch",
    "auto_stash_message",
    "branch_switch_command",
    "verify_branch",
    "assert_on_branch",
    "sync_story_branch",
    "check_story_branch",
    # commit messages
    "CommitMessageParts",
    "build_commit_message",
    "parse_commit_message",
    "validate_commit_message_format",
]
