"""Claude (Anthropic) LLM Client"""

import os

import anthropic

from commit_agent.llm.base import LLMClient, LLMResponse, LLMError, ToolCall, ToolDispatcher


def _text_of(content) -> str:
    return "\n".join(block.text for block in content if block.type == "text").strip()


class ClaudeClient(LLMClient):
    """Claude Messages API with tool use. Requires ANTHROPIC_API_KEY.

    ANTHROPIC_MODEL overrides the default model when no model is passed.
    """

    DEFAULT_MODEL = "claude-sonnet-4-20250514"
    MAX_TOKENS = 4000
    TEMPERATURE = 0.2

    def __init__(self, api_key: str | None = None, model: str | None = None):
        api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        if not api_key:
            raise LLMError(
                "No API key found. Set ANTHROPIC_API_KEY environment variable:\n"
                "  export ANTHROPIC_API_KEY='your-key-here'"
            )
        self.model = model or os.environ.get("ANTHROPIC_MODEL") or self.DEFAULT_MODEL
        # The SDK retries rate limits and overloaded responses with backoff
        self._client = anthropic.Anthropic(api_key=api_key, max_retries=3)

    @property
    def name(self) -> str:
        return f"Claude ({self.model})"

    def _run_tools(self, content, tools: ToolDispatcher, calls: list[ToolCall]) -> list[dict]:
        """Execute each tool_use block in order and build the tool_result blocks."""
        results = []
        for block in content:
            if block.type != "tool_use":
                continue
            output = tools.dispatch(block.name, block.input)
            calls.append(ToolCall(name=block.name, input=block.input, output=output))
            results.append({"type": "tool_result", "tool_use_id": block.id, "content": output})
        return results

    def run(self, system: str, task: str, tools: ToolDispatcher) -> LLMResponse:
        messages: list[dict] = [{"role": "user", "content": task}]
        definitions = tools.definitions()
        calls: list[ToolCall] = []
        tokens = 0

        for _ in range(self.MAX_TURNS):
            try:
                response = self._client.messages.create(
                    model=self.model,
                    max_tokens=self.MAX_TOKENS,
                    temperature=self.TEMPERATURE,
                    system=system,
                    tools=definitions,
                    messages=messages,
                )
            except anthropic.AuthenticationError:
                raise LLMError("Invalid API key. Check your ANTHROPIC_API_KEY.")
            except anthropic.APIError as e:
                raise LLMError(f"Claude API error: {e.message}")

            tokens += response.usage.input_tokens + response.usage.output_tokens
            if response.stop_reason != "tool_use":
                return LLMResponse(
                    content=_text_of(response.content),
                    model=self.model,
                    tokens_used=tokens,
                    tool_calls=calls,
                )

            messages.append({"role": "assistant", "content": response.content})
            messages.append({"role": "user", "content": self._run_tools(response.content, tools, calls)})

        raise LLMError(f"Agent did not finish within {self.MAX_TURNS} turns")
