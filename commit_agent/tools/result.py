"""Tool Result - The envelope every tool call returns to the agent."""

import json
from dataclasses import dataclass, field
from typing import Any

from commit_agent.git.errors import GitError, UNKNOWN_ERROR

DEFAULT_SUGGESTION = "Check git installation and repository state"


@dataclass
class ToolError:
    code: str
    message: str
    command: str | None = None
    details: Any = None
    recoverable: bool = True
    suggestion: str | None = None

    @classmethod
    def from_exception(cls, exc: Exception, command: str | None = None) -> 'ToolError':
        """Map a GitError onto its fields; anything else is UNKNOWN_ERROR."""
        if isinstance(exc, GitError):
            return cls(
                code=exc.code,
                message=exc.message,
                command=command,
                details=exc.details,
                recoverable=exc.recoverable,
                suggestion=exc.suggestion,
            )
        return cls(
            code=UNKNOWN_ERROR,
            message=str(exc) or type(exc).__name__,
            command=command,
            details={"type": type(exc).__name__},
            recoverable=True,
            suggestion=DEFAULT_SUGGESTION,
        )

    def to_dict(self) -> dict:
        result = {
            "code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
        }
        if self.command is not None:
            result["command"] = self.command
        if self.details is not None:
            result["details"] = self.details
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


@dataclass
class ToolResult:
    """Success/error envelope. Exactly one of data/error is set, keyed by success."""
    success: bool
    data: Any = None
    error: ToolError | None = None
    warnings: list[str] = field(default_factory=list)
    partial_results: dict[str, Any] | None = None

    def __post_init__(self):
        if self.success and (self.data is None or self.error is not None):
            raise ValueError("successful ToolResult needs data and no error")
        if not self.success and (self.error is None or self.data is not None):
            raise ValueError("failed ToolResult needs an error and no data")

    @classmethod
    def ok(cls, data: Any, warnings: list[str] | None = None,
           partial_results: dict[str, Any] | None = None) -> 'ToolResult':
        return cls(success=True, data=data, warnings=list(warnings or []), partial_results=partial_results)

    @classmethod
    def fail(cls, error: ToolError, warnings: list[str] | None = None,
             partial_results: dict[str, Any] | None = None) -> 'ToolResult':
        return cls(success=False, error=error, warnings=list(warnings or []), partial_results=partial_results)

    @classmethod
    def from_exception(cls, exc: Exception, command: str | None = None, **kwargs) -> 'ToolResult':
        return cls.fail(ToolError.from_exception(exc, command), **kwargs)

    def to_dict(self) -> dict:
        result: dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error.to_dict()
        if self.warnings:
            result["warnings"] = list(self.warnings)
        if self.partial_results is not None:
            result["partial_results"] = self.partial_results
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, default=str)
