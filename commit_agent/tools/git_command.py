"""Master Git Tool - Run any git command on behalf of the agent.

Every call goes through the same pipeline:

    input check -> repository check -> syntax normalization
    -> commit message file (commit only) -> safety classification
    -> execution -> logging -> temp file cleanup -> ToolResult

and every call returns exactly one ToolResult; exceptions never escape.
"""

import time
from typing import Any

from commit_agent.git.errors import GitError, INVALID_TOOL_INPUT
from commit_agent.git.executor import GitExecutor, command_failed
from commit_agent.git.logger import ExecutionLogger
from commit_agent.git.message_file import commit_message_file, rewrite_commit_args
from commit_agent.git.safety import (
    Safety, SafetyPolicy, blocked_error, caution_warning, format_command,
)
from commit_agent.git.syntax import normalize_command
from commit_agent.tools.result import ToolError, ToolResult

# Commands that leave the repository untouched in dry-run mode
DRY_RUN_SKIPPED = frozenset({'commit', 'push'})

TOOL_DEFINITION = {
    "name": "execute_git_command",
    "description": (
        "Execute any git command with logging and safety checks. For commit commands, pass the "
        "full multi-line message in commit_message (never use -m); it is written to a file and "
        "passed with -F. Dangerous commands (reset --hard, push --force, clean -f, ...) are "
        "blocked unless allow_dangerous is true. Returns a JSON result with success, data or error."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "command": {
                "type": "string",
                "description": "The git command to execute (e.g. 'status', 'diff', 'add', 'commit')",
            },
            "args": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Arguments for the git command (e.g. ['--porcelain'], ['.']). "
                               "For commit, do NOT include -m; use commit_message instead.",
            },
            "allow_dangerous": {
                "type": "boolean",
                "description": "Allow commands that could cause data loss (default: false)",
            },
            "commit_message": {
                "type": "string",
                "description": "For commit only: the complete multi-line conventional commit message.",
            },
        },
        "required": ["command", "args"],
    },
}


def validate_input(payload: Any) -> list[str]:
    """Check a tool payload against the input schema. Returns error strings."""
    if not isinstance(payload, dict):
        return ["Tool input must be an object"]

    errors = []
    command = payload.get("command")
    if not isinstance(command, str) or not command.strip():
        errors.append("'command' is required and must be a non-empty string")

    args = payload.get("args")
    if not isinstance(args, list):
        errors.append("'args' is required and must be an array of strings")
    elif not all(isinstance(arg, str) for arg in args):
        errors.append("'args' must only contain strings")

    allow_dangerous = payload.get("allow_dangerous")
    if allow_dangerous is not None and not isinstance(allow_dangerous, bool):
        errors.append("'allow_dangerous' must be a boolean")

    commit_message = payload.get("commit_message")
    if commit_message is not None and not isinstance(commit_message, str):
        errors.append("'commit_message' must be a string")

    return errors


def invalid_input(errors: list[str], command: str | None = None) -> ToolResult:
    return ToolResult.fail(ToolError(
        code=INVALID_TOOL_INPUT,
        message="Invalid tool input",
        command=command,
        details={"errors": errors},
        recoverable=True,
        suggestion="; ".join(errors),
    ))


class GitCommandTool:
    """The agent-facing entry point for arbitrary git commands."""

    name = TOOL_DEFINITION["name"]
    definition = TOOL_DEFINITION

    def __init__(
        self,
        executor: GitExecutor,
        policy: SafetyPolicy | None = None,
        logger: ExecutionLogger | None = None,
        dry_run: bool = False,
    ):
        self.executor = executor
        self.policy = policy or SafetyPolicy()
        self.logger = logger or getattr(executor, 'logger', None)
        self.dry_run = dry_run

    def __call__(self, payload: dict) -> str:
        return self.execute(payload).to_json()

    def execute(self, payload: dict) -> ToolResult:
        errors = validate_input(payload)
        if errors:
            return invalid_input(errors)

        command = payload["command"].strip()
        args = list(payload["args"])
        allow_dangerous = bool(payload.get("allow_dangerous") or False)
        commit_message = payload.get("commit_message")

        try:
            self.executor.verify_repo()
            args, warnings = normalize_command(args)

            if command == 'commit' and commit_message:
                with commit_message_file(commit_message, self.executor.working_dir) as path:
                    args = rewrite_commit_args(args, path)
                    if self.logger:
                        self.logger.log_commit_subject(commit_message)
                    return self._classify_and_run(command, args, allow_dangerous, warnings)

            return self._classify_and_run(command, args, allow_dangerous, warnings)
        except GitError as e:
            return ToolResult.from_exception(e, format_command(command, args))
        except Exception as e:
            if self.logger:
                now = time.perf_counter()
                self.logger.log_execution(command, args, now, now, False, error_message=str(e))
            return ToolResult.from_exception(e, format_command(command, args))

    def _classify_and_run(self, command: str, args: list[str], allow_dangerous: bool,
                          warnings: list[str]) -> ToolResult:
        command_line = format_command(command, args)
        safety = self.policy.classify(command, args, allow_dangerous)

        if safety is Safety.BLOCKED:
            error = blocked_error(command, args)
            if self.logger:
                now = time.perf_counter()
                self.logger.log_execution(command, args, now, now, False, error_message=error.message)
            return ToolResult.from_exception(error, command_line, warnings=warnings)

        if safety is Safety.CAUTION:
            warnings.append(caution_warning(command))

        if self.dry_run and command in DRY_RUN_SKIPPED:
            warnings.append(f"Dry run: '{command_line}' was not executed")
            return ToolResult.ok({
                "command": command_line,
                "stdout": "",
                "stderr": "",
                "exit_code": 0,
                "execution_time_ms": 0,
                "dry_run": True,
            }, warnings=warnings)

        outcome = self.executor.run(command, args)
        if not outcome.success:
            return ToolResult.from_exception(command_failed(outcome), command_line, warnings=warnings)

        return ToolResult.ok({
            "command": command_line,
            "stdout": outcome.stdout,
            "stderr": outcome.stderr,
            "exit_code": outcome.exit_code,
            "execution_time_ms": outcome.duration_ms,
        }, warnings=warnings)
