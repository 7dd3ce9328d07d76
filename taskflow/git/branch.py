"""Git branch operations."""

from pathlib import Path

from taskflow.git.runner import DEFAULT_TIMEOUT, GitResult, run_git, run_git_checked


def get_current_branch(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> str | None:
    """Get the current branch name, or None if detached HEAD."""
    result = run_git(["branch", "--show-current"], worktree, timeout=timeout)
    if result.success:
        return result.stdout.strip() or None
    return None


def branch_exists(repo: Path, branch: str, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Check if a local branch exists."""
    result = run_git(["rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"], repo, timeout=timeout)
    return result.success


def checkout(repo: Path, branch: str, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """Checkout an existing branch. Raises GitOperationError on failure."""
    return run_git_checked(["checkout", branch], repo, f"checkout {branch}", timeout=timeout)


def create_branch(repo: Path, branch: str, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """Create a branch from HEAD and check it out. Raises GitOperationError on failure."""
    return run_git_checked(["checkout", "-b", branch], repo, f"checkout -b {branch}", timeout=timeout)
