"""Git Errors - Structured failures with machine-readable codes."""

from typing import Any

NOT_GIT_REPO = "NOT_GIT_REPO"
DANGEROUS_COMMAND_BLOCKED = "DANGEROUS_COMMAND_BLOCKED"
GIT_COMMAND_FAILED = "GIT_COMMAND_FAILED"
GIT_NOT_FOUND = "GIT_NOT_FOUND"
GIT_TIMEOUT = "GIT_TIMEOUT"
INVALID_COMMIT_MESSAGE = "INVALID_COMMIT_MESSAGE"
INVALID_TOOL_INPUT = "INVALID_TOOL_INPUT"
NO_STAGED_CHANGES = "NO_STAGED_CHANGES"
FILE_NOT_FOUND = "FILE_NOT_FOUND"
UNKNOWN_ERROR = "UNKNOWN_ERROR"


class GitError(Exception):
    """Raised when a git operation fails.

    Carries everything needed to build an error Tool Result: a code the
    agent can branch on, free-form details, whether retrying can help,
    and an optional one-line suggestion.
    """

    def __init__(
        self,
        message: str,
        code: str = GIT_COMMAND_FAILED,
        details: Any = None,
        recoverable: bool = True,
        suggestion: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.recoverable = recoverable
        self.suggestion = suggestion

    def __repr__(self) -> str:
        return f"GitError({self.code}: {self.message})"
