"""Commit Agent - Wire prompts, tools and an LLM client together."""

from commit_agent.config import Config
from commit_agent.git.executor import GitExecutor
from commit_agent.llm import LLMClient, LLMResponse
from commit_agent.prompts import PromptBuilder
from commit_agent.tools import ToolRegistry


class CommitAgent:
    """Runs one stage-and-commit session against a working tree."""

    def __init__(self, config: Config, client: LLMClient, registry: ToolRegistry, executor: GitExecutor):
        self.config = config
        self.client = client
        self.registry = registry
        self.executor = executor
        self.builder = PromptBuilder()

    def build_prompts(self) -> tuple[str, str]:
        git_version = self.executor.version()
        system = self.builder.build_system(self.config, git_version)
        task = self.builder.build_task(self.config)
        return system, task

    def run(self) -> LLMResponse:
        """Verify the repository, then let the model work through the tools."""
        self.executor.verify_repo()
        system, task = self.build_prompts()
        return self.client.run(system, task, self.registry)
