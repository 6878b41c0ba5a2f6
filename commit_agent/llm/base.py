"""LLM Base Classes and Shared Code"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Protocol


class ToolDispatcher(Protocol):
    """What a client needs from the tool registry."""

    def definitions(self) -> list[dict]: ...

    def dispatch(self, name: str, payload) -> str: ...


@dataclass
class ToolCall:
    """One tool invocation made by the model."""
    name: str
    input: dict
    output: str


@dataclass
class LLMResponse:
    """Structured response from any LLM provider."""
    content: str
    model: str = ""
    tokens_used: int = 0
    tool_calls: list[ToolCall] = field(default_factory=list)


class LLMError(Exception):
    """Raised when LLM operations fail."""
    pass


class LLMClient(ABC):
    """Abstract base for LLM clients.

    run() drives the tool loop: send the instructions, execute every tool
    call the model asks for in order, feed the results back, and stop when
    the model answers with plain text.
    """

    MAX_TURNS = 25

    @abstractmethod
    def run(self, system: str, task: str, tools: ToolDispatcher) -> LLMResponse:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        pass
