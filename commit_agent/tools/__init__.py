"""Agent Tools Package"""

import json
from typing import Callable

from commit_agent.config import Config
from commit_agent.git.executor import GitExecutor
from commit_agent.git.safety import SafetyPolicy
from commit_agent.tools.git_command import GitCommandTool, TOOL_DEFINITION, invalid_input
from commit_agent.tools.result import ToolError, ToolResult
from commit_agent.tools.wrappers import GitAddTool, GitCommitTool, GitDiffTool, GitStatusTool


class ToolRegistry:
    """Name -> tool lookup that always answers with a JSON ToolResult."""

    def __init__(self) -> None:
        self._tools: dict[str, Callable] = {}

    def register(self, tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str):
        return self._tools.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def definitions(self) -> list[dict]:
        """Tool definitions in Anthropic format (name, description, input_schema)."""
        return [tool.definition for tool in self._tools.values()]

    def dispatch(self, name: str, payload) -> str:
        tool = self._tools.get(name)
        if tool is None:
            return invalid_input([f"Unknown tool '{name}'. Available: {', '.join(self._tools)}"]).to_json()
        if isinstance(payload, str):
            try:
                payload = json.loads(payload) if payload.strip() else {}
            except json.JSONDecodeError as e:
                return invalid_input([f"Tool input is not valid JSON: {e}"]).to_json()
        return tool(payload)


def build_registry(config: Config, executor: GitExecutor, policy: SafetyPolicy | None = None) -> ToolRegistry:
    """Register the master git tool and the convenience wrappers."""
    registry = ToolRegistry()
    registry.register(GitCommandTool(executor, policy=policy, dry_run=config.dry_run))
    registry.register(GitStatusTool(executor))
    registry.register(GitDiffTool(executor))
    registry.register(GitAddTool(executor))
    registry.register(GitCommitTool(
        executor,
        validate_default=config.conventional_strict,
        max_subject_length=config.subject_max_length,
        skip_verification=config.skip_verification,
        dry_run=config.dry_run,
    ))
    return registry


__all__ = [
    "ToolRegistry",
    "build_registry",
    "GitCommandTool",
    "GitStatusTool",
    "GitDiffTool",
    "GitAddTool",
    "GitCommitTool",
    "ToolResult",
    "ToolError",
    "TOOL_DEFINITION",
]
