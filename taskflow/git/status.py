"""Git status operations."""

from pathlib import Path

from taskflow.git.runner import DEFAULT_TIMEOUT, run_git_checked


def get_status_porcelain(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> str:
    """Get git status in porcelain format."""
    return run_git_checked(["status", "--porcelain"], worktree, "status", timeout=timeout).stdout


def has_uncommitted_changes(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Check if worktree has any uncommitted changes (staged, unstaged, or untracked)."""
    return bool(get_status_porcelain(worktree, timeout).strip())


def get_changed_entries(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> list[tuple[str, str]]:
    """(status code, path) per changed file, e.g. (" M", "src/app.py")."""
    entries = []
    for line in get_status_porcelain(worktree, timeout).splitlines():
        if len(line) < 4:
            continue
        entries.append((line[:2], line[3:]))
    return entries
