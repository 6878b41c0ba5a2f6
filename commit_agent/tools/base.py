"""Base class for the convenience git tools (status, diff, add, commit)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from commit_agent.git.errors import GitError
from commit_agent.git.executor import ExecutionOutcome, GitExecutor
from commit_agent.tools.git_command import invalid_input
from commit_agent.tools.result import ToolResult


@dataclass
class Progress:
    """What a multi-step tool has gathered so far."""
    warnings: list[str] = field(default_factory=list)
    partial_results: dict[str, Any] = field(default_factory=dict)


class GitTool(ABC):
    """Runs a fixed sequence of git commands and reports one ToolResult.

    Required steps raise; optional steps degrade to warnings. When a step
    fails, whatever earlier steps produced is still returned in
    partial_results.
    """

    name: str = ""
    label: str = ""
    definition: dict = {}

    def __init__(self, executor: GitExecutor):
        self.executor = executor

    def __call__(self, payload: dict | None = None) -> str:
        return self.execute(payload).to_json()

    def execute(self, payload: dict | None = None) -> ToolResult:
        payload = payload if payload is not None else {}
        errors = self.validate(payload)
        if errors:
            return invalid_input(errors, self.label)

        progress = Progress()
        try:
            self.executor.verify_repo()
            return self._run(payload, progress)
        except Exception as e:
            return ToolResult.from_exception(
                e,
                self.label,
                warnings=progress.warnings,
                partial_results=progress.partial_results or None,
            )

    def validate(self, payload: Any) -> list[str]:
        if not isinstance(payload, dict):
            return ["Tool input must be an object"]
        return []

    @abstractmethod
    def _run(self, payload: dict, progress: Progress) -> ToolResult:
        """Tool-specific command sequence."""

    def _required(self, command: str, args: list[str], error_message: str) -> ExecutionOutcome:
        return self.executor.run_checked(command, args, error_message)

    def _optional(self, progress: Progress, command: str, args: list[str],
                  warning: str) -> ExecutionOutcome | None:
        """Run a non-critical step; on failure record a warning and return None."""
        try:
            outcome = self.executor.run(command, args)
        except GitError:
            progress.warnings.append(warning)
            return None
        if not outcome.success:
            progress.warnings.append(warning)
            return None
        return outcome


def validate_files(payload: dict, errors: list[str]) -> None:
    files = payload.get("files")
    if files is not None and (not isinstance(files, list) or not all(isinstance(f, str) for f in files)):
        errors.append("'files' must be an array of strings")


def split_lines(text: str) -> list[str]:
    return [line for line in text.split('\n') if line.strip()]
