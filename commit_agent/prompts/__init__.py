"""Prompt Generation Package"""

from commit_agent.prompts.builder import PromptBuilder

__all__ = ["PromptBuilder"]
