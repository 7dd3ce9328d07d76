"""Git stash operations."""

from pathlib import Path

from taskflow.git.runner import DEFAULT_TIMEOUT, run_git, run_git_checked


def stash_push(worktree: Path, message: str, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Stash all local changes (including untracked files) under `message`.

    Returns False when git reports there was nothing to stash.
    """
    result = run_git_checked(
        ["stash", "push", "--include-untracked", "-m", message],
        worktree,
        "stash push",
        timeout=timeout,
    )
    return "No local changes to save" not in result.stdout


def stash_pop(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> None:
    """Pop the top stash entry. Raises GitOperationError (e.g. on conflicts)."""
    run_git_checked(["stash", "pop"], worktree, "stash pop", timeout=timeout)


def stash_messages(worktree: Path, timeout: int = DEFAULT_TIMEOUT) -> list[str]:
    """Stash subjects, newest first ("On main: <message>")."""
    result = run_git(["stash", "list", "--format=%gs"], worktree, timeout=timeout)
    if not result.success:
        return []
    return [line for line in result.stdout.splitlines() if line.strip()]


def top_stash_matches(worktree: Path, message: str, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Check if the newest stash entry was created with `message`."""
    messages = stash_messages(worktree, timeout)
    return bool(messages) and messages[0].endswith(f": {message}")
