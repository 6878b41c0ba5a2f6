"""Process Executor - Run git as a subprocess and capture the outcome."""

import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path

from commit_agent.git.errors import (
    GitError, GIT_COMMAND_FAILED, GIT_NOT_FOUND, GIT_TIMEOUT, NOT_GIT_REPO,
)
from commit_agent.git.logger import ExecutionLogger
from commit_agent.git.safety import format_command

DEFAULT_TIMEOUT_MS = 30_000

# Git must not stop to ask for credentials
NON_INTERACTIVE_ENV = {"GIT_TERMINAL_PROMPT": "0"}


@dataclass
class ExecutionOutcome:
    """Result of one git subprocess run."""
    command: str
    args: list[str] = field(default_factory=list)
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return format_command(self.command, self.args)


class GitExecutor:
    """Runs git subcommands in a working directory with a bounded timeout.

    A nonzero exit status is data, not an exception: run() hands back the
    exit code and both streams so callers decide what a failure means.
    Only conditions the outcome cannot represent raise GitError.
    """

    def __init__(
        self,
        cwd: str | Path | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        program: str = 'git',
        logger: ExecutionLogger | None = None,
    ):
        self.cwd = Path(cwd) if cwd else None
        self.timeout_ms = timeout_ms
        self.program = program
        self.logger = logger

    @property
    def working_dir(self) -> Path:
        return self.cwd or Path.cwd()

    def _log(self, command, args, start, end, succeeded, stdout="", stderr="", error_message=None):
        if self.logger:
            self.logger.log_execution(
                command, args, start, end, succeeded,
                stdout=stdout, stderr=stderr, error_message=error_message,
            )

    def run(self, command: str, args: list[str] | None = None) -> ExecutionOutcome:
        """Run `git <command> <args...>` and capture the result."""
        args = list(args or [])
        start = time.perf_counter()
        try:
            proc = subprocess.run(
                [self.program, command, *args],
                cwd=self.cwd,
                stdin=subprocess.DEVNULL,
                env={**os.environ, **NON_INTERACTIVE_ENV},
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout_ms / 1000,
            )
        except FileNotFoundError:
            end = time.perf_counter()
            message = f"{self.program} is not installed or not in PATH"
            self._log(command, args, start, end, False, error_message=message)
            raise GitError(
                message,
                GIT_NOT_FOUND,
                details={"program": self.program},
                recoverable=False,
                suggestion="Install git and make sure it is on PATH",
            )
        except subprocess.TimeoutExpired as e:
            end = time.perf_counter()
            message = f"Git command timed out after {self.timeout_ms}ms: {format_command(command, args)}"
            self._log(command, args, start, end, False, error_message=message)
            raise GitError(
                message,
                GIT_TIMEOUT,
                details={"timeout_ms": self.timeout_ms, "stdout": _decode(e.stdout), "stderr": _decode(e.stderr)},
                recoverable=True,
                suggestion="The command may be waiting for input; avoid interactive commands",
            )

        end = time.perf_counter()
        outcome = ExecutionOutcome(
            command=command,
            args=args,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int(round((end - start) * 1000)),
        )
        self._log(command, args, start, end, outcome.success, outcome.stdout, outcome.stderr)
        return outcome

    def run_checked(self, command: str, args: list[str] | None = None,
                    error_message: str | None = None) -> ExecutionOutcome:
        """Like run(), but a nonzero exit raises GIT_COMMAND_FAILED."""
        outcome = self.run(command, args)
        if not outcome.success:
            raise command_failed(outcome, error_message)
        return outcome

    def verify_repo(self) -> None:
        """Fail fast if the working directory is not inside a git repository."""
        try:
            outcome = self.run('rev-parse', ['--git-dir'])
        except GitError as e:
            if e.code == GIT_NOT_FOUND:
                raise
            outcome = None
        if outcome is None or not outcome.success:
            raise GitError(
                "Not a git repository",
                NOT_GIT_REPO,
                details={"cwd": str(self.working_dir), "stderr": outcome.stderr if outcome else ""},
                recoverable=False,
                suggestion="Initialize a git repository with 'git init' or navigate to a git repository",
            )

    def version(self) -> str:
        """Return the git version number, or 'unknown'."""
        try:
            outcome = self.run('--version')
        except GitError:
            return "unknown"
        if not outcome.success:
            return "unknown"
        # "git version 2.39.1" -> "2.39.1"
        return outcome.stdout.strip().rsplit(' ', 1)[-1] or "unknown"


def command_failed(outcome: ExecutionOutcome, message: str | None = None) -> GitError:
    """Build the error for a git command that exited nonzero."""
    return GitError(
        message or f"Git command failed: {outcome.command_line}",
        GIT_COMMAND_FAILED,
        details={
            "exit_code": outcome.exit_code,
            "stderr": outcome.stderr,
            "stdout": outcome.stdout,
        },
        recoverable=True,
        suggestion="Check the command syntax and repository state",
    )


def _decode(stream) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode('utf-8', errors='replace')
    return stream
