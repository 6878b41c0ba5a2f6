"""Execution Logger - One line per git invocation."""

import sys
from typing import TextIO

from commit_agent.git.safety import format_command
from commit_agent.output import MEMO, Style

OUTPUT_EXCERPT_CHARS = 500


def _truncate(text: str, limit: int = OUTPUT_EXCERPT_CHARS) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... ({len(text) - limit} more chars)"


class ExecutionLogger:
    """Prints a minimal audit trail of executed git commands.

    Output looks like:
        ✓ git status --porcelain (45ms)
        ✗ git commit -F commit_message_1700000000000.txt (12ms)
          Error: nothing to commit, working tree clean
    """

    def __init__(self, verbose: bool = False, stream: TextIO | None = None):
        self.verbose = verbose
        self._stream = stream
        self.style = Style(stream)

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _emit(self, line: str) -> None:
        # A closed or broken stdout must never turn into a failed git command
        try:
            print(line, file=self.stream, flush=True)
        except (OSError, ValueError):
            pass

    def log_execution(
        self,
        command: str,
        args: list[str],
        start: float,
        end: float,
        succeeded: bool,
        stdout: str = "",
        stderr: str = "",
        error_message: str | None = None,
    ) -> None:
        """Log one invocation. start/end are perf_counter() seconds."""
        duration_ms = max(0, int(round((end - start) * 1000)))
        icon = self.style.status_icon(succeeded)
        self._emit(f"{icon} {format_command(command, args)} {self.style.dim(f'({duration_ms}ms)')}")

        if not succeeded:
            message = error_message or stderr.strip() or "unknown error"
            self._emit(f"  Error: {_truncate(message)}")
        elif self.verbose and stdout.strip():
            for line in _truncate(stdout).split('\n'):
                self._emit(self.style.dim(f"  {line}"))

    def log_commit_subject(self, message: str) -> None:
        first_line = message.split('\n')[0]
        self._emit(f"{MEMO} Commit: {self.style.bold(first_line)}")
