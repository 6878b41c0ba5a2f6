"""Shared fixtures: a scripted fake executor and a throwaway git repository."""

import shutil
import subprocess

import pytest

from commit_agent.git.errors import GitError, NOT_GIT_REPO
from commit_agent.git.executor import ExecutionOutcome, command_failed

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class FakeExecutor:
    """Stands in for GitExecutor and records every command it is asked to run.

    responses maps either the full command line ("diff --cached --name-only")
    or just the command name ("commit") to (exit_code, stdout, stderr), or to
    an exception instance to raise.
    """

    def __init__(self, cwd, responses=None, is_repo=True):
        self.cwd = cwd
        self.responses = responses or {}
        self.is_repo = is_repo
        self.logger = None
        self.calls = []
        self.message_files = {}

    @property
    def working_dir(self):
        return self.cwd

    def verify_repo(self):
        if not self.is_repo:
            raise GitError(
                "Not a git repository",
                NOT_GIT_REPO,
                recoverable=False,
                suggestion="Initialize a git repository with 'git init' or navigate to a git repository",
            )

    def version(self):
        return "2.43.0"

    def run(self, command, args=None):
        args = list(args or [])
        self.calls.append([command, *args])
        if command == "commit" and args[:1] == ["-F"]:
            # Snapshot the message file while it still exists
            with open(args[1], encoding="utf-8", newline="") as f:
                self.message_files[args[1]] = f.read()

        response = self.responses.get(" ".join([command, *args]), self.responses.get(command, (0, "", "")))
        if isinstance(response, Exception):
            raise response
        exit_code, stdout, stderr = response
        return ExecutionOutcome(command=command, args=args, exit_code=exit_code,
                                stdout=stdout, stderr=stderr, duration_ms=5)

    def run_checked(self, command, args=None, error_message=None):
        outcome = self.run(command, args)
        if not outcome.success:
            raise command_failed(outcome, error_message)
        return outcome


@pytest.fixture
def fake_executor(tmp_path):
    return FakeExecutor(tmp_path)


def _git(cwd, *args):
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True, text=True)


@pytest.fixture
def git_repo(tmp_path):
    """An initialized repository with one commit and a local identity."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "config", "user.email", "dev@example.com")
    _git(repo, "config", "user.name", "Dev Example")
    _git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("# demo\n")
    _git(repo, "add", "README.md")
    _git(repo, "commit", "-q", "-m", "chore: initial commit")
    return repo
