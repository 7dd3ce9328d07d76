"""Git remote operations."""

from pathlib import Path

from taskflow.git.runner import DEFAULT_TIMEOUT, GitResult, run_git, run_git_checked

PULL_TIMEOUT = 60


def has_remote(repo: Path, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Check if repo has any remotes configured."""
    result = run_git(["remote"], repo, timeout=timeout)
    return bool(result.stdout.strip())


def pull(repo: Path, timeout: int = PULL_TIMEOUT) -> GitResult:
    """Pull the current branch. Raises GitOperationError on failure or timeout."""
    return run_git_checked(["pull"], repo, "pull", timeout=timeout)
