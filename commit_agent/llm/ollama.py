"""Ollama LLM Client for Local Models"""

import os
import json
import http.client
import socket
import urllib.request
import urllib.error

from commit_agent.llm.base import LLMClient, LLMResponse, LLMError, ToolCall, ToolDispatcher


def _to_ollama_tool(definition: dict) -> dict:
    """Anthropic-style definition -> Ollama/OpenAI function tool."""
    return {
        "type": "function",
        "function": {
            "name": definition["name"],
            "description": definition.get("description", ""),
            "parameters": definition.get("input_schema", {"type": "object", "properties": {}}),
        },
    }


class OllamaClient(LLMClient):
    """Ollama client for local models. Requires: ollama serve

    The model must support tool calling (e.g. llama3.1, qwen2.5).
    """

    DEFAULT_MODEL = "qwen2.5:7b"
    DEFAULT_HOST = "http://localhost:11434"
    DEFAULT_TIMEOUT = 300  # 5 minutes for CPU inference

    def __init__(self, model: str | None = None, host: str | None = None):
        self.model = model or self.DEFAULT_MODEL
        self.host = host or os.environ.get("OLLAMA_HOST", self.DEFAULT_HOST)
        self.timeout = int(os.environ.get("CA_LLM_TIMEOUT", self.DEFAULT_TIMEOUT))
        self._verify_connection()

    @property
    def name(self) -> str:
        return f"Ollama ({self.model})"

    def _verify_connection(self) -> None:
        """Check if Ollama is running and accessible."""
        try:
            req = urllib.request.Request(f"{self.host}/api/tags")
            with urllib.request.urlopen(req, timeout=5):
                pass
        except urllib.error.URLError:
            raise LLMError("Ollama not running. Start with: ollama serve")

    def _call_api(self, messages: list[dict], tools: list[dict]) -> dict:
        """Make a single chat API call to Ollama."""
        payload = {
            "model": self.model,
            "messages": messages,
            "tools": tools,
            "stream": False,
            "keep_alive": "10m",
            "options": {"temperature": 0.2},
        }

        data = json.dumps(payload).encode('utf-8')
        req = urllib.request.Request(
            f"{self.host}/api/chat", data=data, headers={"Content-Type": "application/json"}
        )

        with urllib.request.urlopen(req, timeout=self.timeout) as response:
            return json.loads(response.read().decode('utf-8'))

    def run(self, system: str, task: str, tools: ToolDispatcher) -> LLMResponse:
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": task},
        ]
        ollama_tools = [_to_ollama_tool(d) for d in tools.definitions()]
        calls: list[ToolCall] = []
        tokens = 0

        try:
            for _ in range(self.MAX_TURNS):
                result = self._call_api(messages, ollama_tools)
                tokens += result.get("prompt_eval_count", 0) + result.get("eval_count", 0)
                message = result.get("message", {})
                tool_calls = message.get("tool_calls") or []

                if not tool_calls:
                    return LLMResponse(
                        content=message.get("content", "").strip(),
                        model=self.model,
                        tokens_used=tokens,
                        tool_calls=calls,
                    )

                messages.append(message)
                for call in tool_calls:
                    function = call.get("function", {})
                    name = function.get("name", "")
                    arguments = function.get("arguments", {})
                    output = tools.dispatch(name, arguments)
                    calls.append(ToolCall(
                        name=name,
                        input=arguments if isinstance(arguments, dict) else {},
                        output=output,
                    ))
                    messages.append({"role": "tool", "content": output, "tool_name": name})

        except urllib.error.HTTPError as e:
            if e.code == 404:
                raise LLMError(f"Model '{self.model}' not found. Run: ollama pull {self.model}")
            if e.code == 400:
                raise LLMError(f"Ollama rejected the request ({e.reason}). Does '{self.model}' support tools?")
            raise LLMError(f"Ollama error ({e.code}): {e.reason}")
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise LLMError(f"Request timed out after {self.timeout}s. Increase timeout: set CA_LLM_TIMEOUT=600")
            if "Connection refused" in str(e):
                raise LLMError("Ollama not running. Start with: ollama serve")
            raise LLMError(f"Ollama request failed: {e}")
        except socket.timeout:
            raise LLMError(f"Request timed out after {self.timeout}s. Increase timeout: set CA_LLM_TIMEOUT=600")
        except json.JSONDecodeError:
            raise LLMError("Invalid response from Ollama. Try a different model.")
        except http.client.HTTPException as e:
            raise LLMError(f"Incomplete response from Ollama: {e}. The model may have run out of memory.")
        except OSError as e:
            raise LLMError(f"Connection to Ollama lost: {e}. Check that 'ollama serve' is still running.")

        raise LLMError(f"Agent did not finish within {self.MAX_TURNS} turns")
