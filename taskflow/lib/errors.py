"""
Error taxonomy for taskflow.

Every error carries a machine-readable code and a recovery hint. The hints are
parsed by downstream tooling and agent guidance, so their wording is stable.
"""

import builtins


class TaskflowError(Exception):
    """Base class for all taskflow errors."""

    code = "TASKFLOW_ERROR"

    def __init__(self, message: str, code: str | None = None, recovery_hint: str | None = None):
        self.message = message
        if code:
            self.code = code
        self.recovery_hint = recovery_hint
        super().__init__(message)


class TaskNotFoundError(TaskflowError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(
            f"Task {task_id} not found",
            "TASK_NOT_FOUND",
            "Run 'taskflow next' to find available tasks.",
        )


class StoryNotFoundError(TaskflowError):
    def __init__(self, story_id: str):
        self.story_id = story_id
        super().__init__(
            f"Story {story_id} not found",
            "STORY_NOT_FOUND",
            "Run 'taskflow status' to view project overview.",
        )


class FeatureNotFoundError(TaskflowError):
    def __init__(self, feature_id: str):
        self.feature_id = feature_id
        super().__init__(
            f"Feature {feature_id} not found",
            "FEATURE_NOT_FOUND",
            "Run 'taskflow status' to view project overview.",
        )


class NoActiveSessionError(TaskflowError):
    def __init__(self):
        super().__init__(
            "No active task session",
            "NO_ACTIVE_SESSION",
            "Run 'taskflow start <id>' to start a new task session.",
        )


class ActiveSessionExistsError(TaskflowError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(
            f"Another task is already active ({task_id})",
            "ACTIVE_SESSION_EXISTS",
            "Complete the current task with 'taskflow check' (or mark as blocked) before starting a new one.",
        )


class TaskAlreadyCompletedError(TaskflowError):
    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(
            f"Task {task_id} is already completed",
            "TASK_ALREADY_COMPLETED",
            "Run 'taskflow next' to find the next available task.",
        )


class TaskBlockedError(TaskflowError):
    def __init__(self, task_id: str, reason: str):
        self.task_id = task_id
        self.reason = reason
        super().__init__(
            f"Task {task_id} is blocked: {reason}",
            "TASK_BLOCKED",
            "Resolve the blocking issue first.",
        )


class DependencyNotMetError(TaskflowError):
    def __init__(self, task_id: str, unmet_dependencies: list[str]):
        self.task_id = task_id
        self.unmet_dependencies = list(unmet_dependencies)
        super().__init__(
            f"Task {task_id} has unmet dependencies: {', '.join(unmet_dependencies)}",
            "DEPENDENCY_NOT_MET",
            "Complete the dependent tasks first.",
        )


class InvalidWorkflowStateError(TaskflowError):
    def __init__(self, current_status: str, required_status: str, action: str):
        self.current_status = current_status
        self.required_status = required_status
        self.action = action
        super().__init__(
            f"Cannot {action} in status '{current_status}'. Required status: '{required_status}'",
            "INVALID_STATUS",
            "Run 'taskflow check' to advance to the required status.",
        )


class WrongBranchError(TaskflowError):
    def __init__(self, current_branch: str, expected_branch: str, switch_command: str):
        self.current_branch = current_branch
        self.expected_branch = expected_branch
        self.switch_command = switch_command
        super().__init__(
            f"Wrong branch: current is '{current_branch}', expected '{expected_branch}'",
            "WRONG_BRANCH",
            f"Run: {switch_command}",
        )


class GitOperationError(TaskflowError):
    def __init__(self, operation: str, details: str | None = None):
        self.operation = operation
        self.details = details
        super().__init__(
            f"Git {operation} failed" + (f": {details}" if details else ""),
            "GIT_OPERATION_FAILED",
            "Check git status and resolve any issues before retrying.",
        )


class FileNotFoundError(TaskflowError, builtins.FileNotFoundError):
    """An expected index, feature, or task file is missing.

    Also a builtin FileNotFoundError so generic OSError handlers still match.
    """

    def __init__(self, file_path):
        self.file_path = str(file_path)
        TaskflowError.__init__(
            self,
            f"File not found: {file_path}",
            "FILE_NOT_FOUND",
            "Verify the file path exists.",
        )

    def __str__(self) -> str:
        return self.message


class InvalidFileFormatError(TaskflowError):
    def __init__(self, file_path, parse_error: str):
        self.file_path = str(file_path)
        self.parse_error = parse_error
        super().__init__(
            f"Invalid file format in {file_path}: {parse_error}",
            "INVALID_FILE_FORMAT",
            "Check the file for JSON syntax errors or missing required fields.",
        )


class SessionLockedError(TaskflowError):
    """Another taskflow process holds the project lock."""

    def __init__(self, lock_path, holder_pid: int | None, timeout: float):
        self.lock_path = str(lock_path)
        self.holder_pid = holder_pid
        self.timeout = timeout
        holder = f" (held by pid {holder_pid})" if holder_pid else ""
        super().__init__(
            f"Could not acquire project lock within {timeout}s{holder}",
            "SESSION_LOCKED",
            f"Wait for the other taskflow command to finish, or remove {lock_path} if no taskflow process is running.",
        )


def is_taskflow_error(error: BaseException) -> bool:
    return isinstance(error, TaskflowError)


def format_error(error: BaseException) -> str:
    """Render an error as 'Name: message' plus its recovery hint."""
    if isinstance(error, TaskflowError):
        msg = f"{type(error).__name__}: {error.message}"
        if error.recovery_hint:
            msg += f"\nHint: {error.recovery_hint}"
        return msg
    return str(error)
