"""Command Safety - Decide whether a requested git command may run."""

from dataclasses import dataclass
from enum import Enum

from commit_agent.git.errors import GitError, DANGEROUS_COMMAND_BLOCKED

# Matched as substrings of "<command> <args...>", so "push --force-with-lease"
# and an argument value that happens to contain "rm -rf" are blocked too.
DEFAULT_DANGEROUS = (
    "reset --hard",
    "push --force",
    "push -f",
    "clean -fd",
    "clean -f",
    "rm -rf",
)

# Matched against the command name only
DEFAULT_CAUTION = ("rebase", "merge", "cherry-pick", "reset")


class Safety(Enum):
    BLOCKED = "blocked"
    CAUTION = "caution"
    CLEAR = "clear"


@dataclass(frozen=True)
class SafetyPolicy:
    """Dangerous phrases and caution commands used by the classifier."""
    dangerous: tuple[str, ...] = DEFAULT_DANGEROUS
    caution: tuple[str, ...] = DEFAULT_CAUTION

    def is_dangerous(self, command: str, args: list[str]) -> bool:
        full_command = f"{command} {' '.join(args)}"
        return any(phrase in full_command for phrase in self.dangerous)

    def requires_caution(self, command: str) -> bool:
        return command in self.caution

    def classify(self, command: str, args: list[str], allow_dangerous: bool = False) -> Safety:
        """Classify a command. The override lifts blocking, never caution."""
        if not allow_dangerous and self.is_dangerous(command, args):
            return Safety.BLOCKED
        if self.requires_caution(command):
            return Safety.CAUTION
        return Safety.CLEAR


def format_command(command: str, args: list[str]) -> str:
    """Render a command the way it is shown to users and the agent."""
    args_str = f" {' '.join(args)}" if args else ""
    return f"git {command}{args_str}"


def caution_warning(command: str) -> str:
    return f"Caution: '{command}' command requires careful review"


def blocked_error(command: str, args: list[str]) -> GitError:
    return GitError(
        f"Dangerous command blocked: {format_command(command, args)}",
        DANGEROUS_COMMAND_BLOCKED,
        details={"command": command, "args": list(args)},
        recoverable=False,
        suggestion="This command could cause data loss. If you're sure, set allow_dangerous: true",
    )
