"""LLM Client Package"""

from commit_agent.llm.base import LLMClient, LLMResponse, LLMError, ToolCall, ToolDispatcher
from commit_agent.llm.claude import ClaudeClient
from commit_agent.llm.ollama import OllamaClient

PROVIDERS: dict[str, type[LLMClient]] = {
    "claude": ClaudeClient,
    "ollama": OllamaClient,
}

# Local first: no API cost when Ollama is running
AUTO_DETECT_ORDER = ("ollama", "claude")

SETUP_HELP = (
    "Option 1 - Use Ollama (free, local):\n"
    "  1. Install: https://ollama.ai\n"
    "  2. Start: ollama serve\n"
    "  3. Pull a model with tool support: ollama pull qwen2.5:7b\n\n"
    "Option 2 - Use Claude API:\n"
    "  export ANTHROPIC_API_KEY='your-key-here'"
)


def get_client(provider: str = "auto", model: str | None = None) -> LLMClient:
    """Build the client for provider ('claude', 'ollama' or 'auto').

    With 'auto' every provider in AUTO_DETECT_ORDER is tried; if none is
    usable the error lists why each one was skipped.
    """
    if provider != "auto":
        client_class = PROVIDERS.get(provider)
        if client_class is None:
            raise LLMError(f"Unknown provider: {provider}. Use 'auto', {', '.join(repr(p) for p in PROVIDERS)}.")
        return client_class(model=model)

    skipped = []
    for key in AUTO_DETECT_ORDER:
        try:
            return PROVIDERS[key](model=model)
        except LLMError as e:
            skipped.append(f"  {key}: {str(e).splitlines()[0]}")

    raise LLMError("No LLM provider available.\n" + "\n".join(skipped) + "\n\n" + SETUP_HELP)


__all__ = [
    "LLMClient",
    "LLMResponse",
    "LLMError",
    "ToolCall",
    "ToolDispatcher",
    "ClaudeClient",
    "OllamaClient",
    "get_client",
    "PROVIDERS",
]
