"""Git Operations Package"""

from commit_agent.git.errors import GitError
from commit_agent.git.executor import GitExecutor, ExecutionOutcome, DEFAULT_TIMEOUT_MS
from commit_agent.git.logger import ExecutionLogger
from commit_agent.git.message_file import commit_message_file, rewrite_commit_args
from commit_agent.git.safety import Safety, SafetyPolicy, format_command
from commit_agent.git.syntax import normalize_args, EQUALS_FLAGS
from commit_agent.git.validators import validate_commit_message, ValidationResult

__all__ = [
    "GitError",
    "GitExecutor",
    "ExecutionOutcome",
    "DEFAULT_TIMEOUT_MS",
    "ExecutionLogger",
    "commit_message_file",
    "rewrite_commit_args",
    "Safety",
    "SafetyPolicy",
    "format_command",
    "normalize_args",
    "EQUALS_FLAGS",
    "validate_commit_message",
    "ValidationResult",
]
