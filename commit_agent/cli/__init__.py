"""Command Line Interface Package"""

from commit_agent.cli.main import main

__all__ = ["main"]
