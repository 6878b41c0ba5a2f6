"""
Git Commit Agent

LLM-driven agent that inspects a working tree, stages changes and commits
them with a conventional commit message.
"""

__version__ = "1.0.0"

# Centralized commit types - single source of truth
# Used by: git/validators.py, prompts, cli/args.py (argparse)
COMMIT_TYPES = {
    'feat': 'A new feature or capability',
    'fix': 'A bug fix',
    'docs': 'Documentation only changes',
    'style': 'Formatting, whitespace, no code change',
    'refactor': 'Code restructuring without behavior change',
    'perf': 'Performance improvement',
    'test': 'Adding or updating tests',
    'build': 'Build system or external dependency changes',
    'ci': 'CI/CD configuration changes',
    'chore': 'Maintenance tasks, dependencies, tooling',
    'revert': 'Reverts a previous commit',
}

# List of type names for validation and argparse
COMMIT_TYPE_NAMES = list(COMMIT_TYPES.keys())
