"""
Tests for the LLM tool loops and the CommitAgent wiring. No network:
the Anthropic client and the Ollama HTTP call are replaced with scripted
fakes.

Run with:
    pytest tests/test_agent.py -v
"""

import json
from types import SimpleNamespace

import pytest

from commit_agent.agent import CommitAgent
from commit_agent.config import Config
from commit_agent.llm import ClaudeClient, LLMError, LLMResponse, OllamaClient, get_client
from commit_agent.llm.base import LLMClient
from commit_agent.llm.ollama import _to_ollama_tool
from commit_agent.tools import build_registry

from conftest import FakeExecutor


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

class FakeMessages:
    """Replays canned Anthropic responses and records each request."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def create(self, **kwargs):
        # Snapshot: the client keeps appending to the same list
        self.requests.append({**kwargs, "messages": list(kwargs["messages"])})
        return self.responses.pop(0)


def _usage(tokens_in=10, tokens_out=5):
    return SimpleNamespace(input_tokens=tokens_in, output_tokens=tokens_out)


def _text_response(text):
    return SimpleNamespace(
        stop_reason="end_turn",
        usage=_usage(),
        content=[SimpleNamespace(type="text", text=text)],
    )


def _tool_response(*calls):
    return SimpleNamespace(
        stop_reason="tool_use",
        usage=_usage(),
        content=[
            SimpleNamespace(type="tool_use", id=f"toolu_{i}", name=name, input=payload)
            for i, (name, payload) in enumerate(calls)
        ],
    )


@pytest.fixture
def registry(fake_executor):
    return build_registry(Config(), fake_executor)


@pytest.fixture
def claude_client():
    def _make(responses):
        client = ClaudeClient(api_key="test-key", model="claude-test")
        client._client = SimpleNamespace(messages=FakeMessages(responses))
        return client
    return _make


@pytest.fixture
def ollama_client(monkeypatch):
    def _make(responses):
        monkeypatch.setattr(OllamaClient, "_verify_connection", lambda self: None)
        client = OllamaClient(model="qwen-test")
        sent = []

        def _call_api(messages, tools):
            sent.append({"messages": list(messages), "tools": tools})
            return responses.pop(0)

        client._call_api = _call_api
        client.sent = sent
        return client
    return _make


# ---------------------------------------------------------------------------
# Claude tool loop
# ---------------------------------------------------------------------------

class TestClaudeClient:

    def test_requires_api_key(self, monkeypatch):
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMError, match="ANTHROPIC_API_KEY"):
            ClaudeClient()

    def test_plain_answer(self, claude_client, registry):
        client = claude_client([_text_response("feat: add login")])
        response = client.run("system", "task", registry)
        assert response.content == "feat: add login"
        assert response.tokens_used == 15
        assert response.tool_calls == []

    def test_tool_calls_are_dispatched_in_order(self, claude_client, registry, fake_executor):
        client = claude_client([
            _tool_response(
                ("execute_git_command", {"command": "status", "args": ["--porcelain"]}),
                ("execute_git_command", {"command": "diff", "args": ["--cached"]}),
            ),
            _text_response("chore: tidy up"),
        ])
        response = client.run("system", "task", registry)

        assert fake_executor.calls == [["status", "--porcelain"], ["diff", "--cached"]]
        assert [call.name for call in response.tool_calls] == ["execute_git_command"] * 2
        assert response.tokens_used == 30

        second_request = client._client.messages.requests[1]
        results = second_request["messages"][-1]["content"]
        assert [r["tool_use_id"] for r in results] == ["toolu_0", "toolu_1"]
        assert json.loads(results[0]["content"])["success"] is True

    def test_request_carries_system_and_tools(self, claude_client, registry):
        client = claude_client([_text_response("done")])
        client.run("the system prompt", "the task", registry)
        request = client._client.messages.requests[0]
        assert request["system"] == "the system prompt"
        assert request["messages"] == [{"role": "user", "content": "the task"}]
        assert {tool["name"] for tool in request["tools"]} == set(registry.names)
        assert request["model"] == "claude-test"

    def test_blocked_command_reaches_model_as_result(self, claude_client, registry, fake_executor):
        client = claude_client([
            _tool_response(("execute_git_command", {"command": "reset", "args": ["--hard"]})),
            _text_response("stopped"),
        ])
        response = client.run("system", "task", registry)
        payload = json.loads(response.tool_calls[0].output)
        assert payload["error"]["code"] == "DANGEROUS_COMMAND_BLOCKED"
        assert fake_executor.calls == []

    def test_turn_limit(self, claude_client, registry, monkeypatch):
        monkeypatch.setattr(ClaudeClient, "MAX_TURNS", 2)
        client = claude_client([
            _tool_response(("git_status", {})),
            _tool_response(("git_status", {})),
        ])
        with pytest.raises(LLMError, match="2 turns"):
            client.run("system", "task", registry)


# ---------------------------------------------------------------------------
# Ollama tool loop
# ---------------------------------------------------------------------------

class TestOllamaClient:

    def test_tool_definition_conversion(self):
        definition = {"name": "git_status", "description": "status", "input_schema": {"type": "object"}}
        assert _to_ollama_tool(definition) == {
            "type": "function",
            "function": {"name": "git_status", "description": "status", "parameters": {"type": "object"}},
        }

    def test_tool_loop(self, ollama_client, registry, fake_executor):
        client = ollama_client([
            {
                "message": {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [{"function": {
                        "name": "execute_git_command",
                        "arguments": {"command": "log", "args": ["-1"]},
                    }}],
                },
                "prompt_eval_count": 100,
                "eval_count": 20,
            },
            {"message": {"role": "assistant", "content": "  fix: handle timeout  "}, "eval_count": 7},
        ])
        response = client.run("system", "task", registry)

        assert response.content == "fix: handle timeout"
        assert response.tokens_used == 127
        assert fake_executor.calls == [["log", "-1"]]

        tool_message = client.sent[1]["messages"][-1]
        assert tool_message["role"] == "tool"
        assert tool_message["tool_name"] == "execute_git_command"
        assert client.sent[0]["messages"][0] == {"role": "system", "content": "system"}
        assert client.sent[0]["tools"][0]["type"] == "function"


# ---------------------------------------------------------------------------
# Provider selection
# ---------------------------------------------------------------------------

class TestGetClient:

    def test_unknown_provider(self):
        with pytest.raises(LLMError, match="Unknown provider"):
            get_client("gpt")

    def test_auto_falls_back_to_claude(self, monkeypatch):
        def _unavailable(self):
            raise LLMError("Ollama not running")

        monkeypatch.setattr(OllamaClient, "_verify_connection", _unavailable)
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
        assert isinstance(get_client("auto"), ClaudeClient)

    def test_auto_with_nothing_available(self, monkeypatch):
        def _unavailable(self):
            raise LLMError("Ollama not running")

        monkeypatch.setattr(OllamaClient, "_verify_connection", _unavailable)
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        with pytest.raises(LLMError, match="No LLM provider available"):
            get_client("auto")


# ---------------------------------------------------------------------------
# CommitAgent
# ---------------------------------------------------------------------------

class RecordingClient(LLMClient):

    def __init__(self):
        self.runs = []

    @property
    def name(self):
        return "recording"

    def run(self, system, task, tools):
        self.runs.append((system, task, tools))
        return LLMResponse(content="feat: done")


class TestCommitAgent:

    def test_runs_client_with_prompts_and_registry(self, fake_executor):
        config = Config(scope="auth")
        registry = build_registry(config, fake_executor)
        client = RecordingClient()

        response = CommitAgent(config, client, registry, fake_executor).run()

        assert response.content == "feat: done"
        system, task, tools = client.runs[0]
        assert "Git version: 2.43.0" in system
        assert 'scope "auth"' in task
        assert tools is registry

    def test_stops_before_model_outside_repository(self, tmp_path):
        from commit_agent.git.errors import GitError

        executor = FakeExecutor(tmp_path, is_repo=False)
        client = RecordingClient()
        agent = CommitAgent(Config(), client, build_registry(Config(), executor), executor)
        with pytest.raises(GitError):
            agent.run()
        assert client.runs == []
