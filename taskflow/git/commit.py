"""Git commit operations."""

from pathlib import Path

from taskflow.git.runner import DEFAULT_TIMEOUT, GitResult, run_git, run_git_checked


def stage_all(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """Stage all changes (new, modified, deleted). Raises GitOperationError on failure."""
    return run_git_checked(["add", "-A"], worktree, "add -A", timeout=timeout)


def commit(worktree: Path, message: str, timeout: int = DEFAULT_TIMEOUT) -> GitResult:
    """Create a commit with the given message. Raises GitOperationError on failure."""
    return run_git_checked(["commit", "-m", message], worktree, "commit", timeout=timeout)


def head_sha(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> str | None:
    """Short SHA of HEAD, or None if there is no commit yet."""
    result = run_git(["rev-parse", "--short", "HEAD"], worktree, timeout=timeout)
    if result.success:
        return result.stdout.strip() or None
    return None
