"""
Tests for GitExecutor and ExecutionLogger against real processes.

Run with:
    pytest tests/test_executor.py -v
"""

import io
import os
import re
import shutil
import subprocess
import time

import pytest

from commit_agent.git.errors import GitError, GIT_COMMAND_FAILED, GIT_NOT_FOUND, GIT_TIMEOUT, NOT_GIT_REPO
from commit_agent.git.executor import ExecutionOutcome, GitExecutor, command_failed
from commit_agent.git.logger import ExecutionLogger

from conftest import requires_git

ANSI_RE = re.compile(r'\033\[[0-9;]*m')


@pytest.fixture
def log_stream():
    return io.StringIO()


def _lines(stream):
    return [ANSI_RE.sub('', line) for line in stream.getvalue().splitlines()]


# ---------------------------------------------------------------------------
# ExecutionOutcome
# ---------------------------------------------------------------------------

class TestExecutionOutcome:

    def test_success_follows_exit_code(self):
        assert ExecutionOutcome("status", exit_code=0).success
        assert not ExecutionOutcome("status", exit_code=1).success

    def test_command_line(self):
        assert ExecutionOutcome("diff", ["--cached"]).command_line == "git diff --cached"

    def test_command_failed_error(self):
        outcome = ExecutionOutcome("commit", ["-F", "m.txt"], exit_code=1, stderr="nothing to commit")
        err = command_failed(outcome)
        assert err.code == GIT_COMMAND_FAILED
        assert err.message == "Git command failed: git commit -F m.txt"
        assert err.details == {"exit_code": 1, "stderr": "nothing to commit", "stdout": ""}
        assert err.recoverable is True

    def test_command_failed_custom_message(self):
        err = command_failed(ExecutionOutcome("status", exit_code=128), "Failed to get git status")
        assert err.message == "Failed to get git status"


# ---------------------------------------------------------------------------
# GitExecutor with a real git
# ---------------------------------------------------------------------------

@requires_git
class TestGitExecutor:

    def test_captures_stdout(self, git_repo):
        (git_repo / "new.txt").write_text("x\n")
        outcome = GitExecutor(git_repo).run("status", ["--porcelain"])
        assert outcome.success
        assert "?? new.txt" in outcome.stdout
        assert outcome.duration_ms >= 0

    def test_nonzero_exit_is_returned_not_raised(self, git_repo):
        outcome = GitExecutor(git_repo).run("checkout", ["no-such-branch"])
        assert outcome.exit_code != 0
        assert outcome.stderr

    def test_run_checked_raises(self, git_repo):
        with pytest.raises(GitError) as exc_info:
            GitExecutor(git_repo).run_checked("checkout", ["no-such-branch"], "Checkout failed")
        assert exc_info.value.code == GIT_COMMAND_FAILED
        assert exc_info.value.message == "Checkout failed"

    def test_verify_repo(self, git_repo):
        GitExecutor(git_repo).verify_repo()

    def test_verify_repo_outside_repository(self, tmp_path, monkeypatch):
        outside = tmp_path / "plain"
        outside.mkdir()
        monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
        with pytest.raises(GitError) as exc_info:
            GitExecutor(outside).verify_repo()
        assert exc_info.value.code == NOT_GIT_REPO
        assert exc_info.value.recoverable is False

    def test_version(self, git_repo):
        version = GitExecutor(git_repo).version()
        assert version != "unknown"
        assert version[0].isdigit()

    def test_working_dir(self, git_repo):
        assert GitExecutor(git_repo).working_dir == git_repo

    def test_utf8_output(self, git_repo):
        (git_repo / "README.md").write_text("# démo ✓\n", encoding="utf-8")
        outcome = GitExecutor(git_repo).run("diff", [])
        assert "démo ✓" in outcome.stdout

    @pytest.mark.skipif(shutil.which("head") is None, reason="head not available")
    def test_child_does_not_read_caller_stdin(self, git_repo):
        subprocess.run(["git", "config", "alias.readin", "!head -c 3"], cwd=git_repo, check=True)
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"abc")
        os.close(write_fd)
        saved_stdin = os.dup(0)
        os.dup2(read_fd, 0)
        try:
            outcome = GitExecutor(git_repo).run("readin")
        finally:
            os.dup2(saved_stdin, 0)
            os.close(saved_stdin)
            os.close(read_fd)
        assert outcome.success
        assert outcome.stdout == ""

    @pytest.mark.skipif(shutil.which("printenv") is None, reason="printenv not available")
    def test_terminal_prompts_disabled(self, git_repo):
        subprocess.run(["git", "config", "alias.promptenv", "!printenv GIT_TERMINAL_PROMPT"], cwd=git_repo, check=True)
        assert GitExecutor(git_repo).run("promptenv").stdout.strip() == "0"


# ---------------------------------------------------------------------------
# GitExecutor failure modes
# ---------------------------------------------------------------------------

class TestExecutorFailures:

    def test_missing_program(self, tmp_path):
        executor = GitExecutor(tmp_path, program="git-binary-that-does-not-exist")
        with pytest.raises(GitError) as exc_info:
            executor.run("status")
        assert exc_info.value.code == GIT_NOT_FOUND
        assert exc_info.value.recoverable is False

    def test_missing_program_is_not_reported_as_not_a_repo(self, tmp_path):
        executor = GitExecutor(tmp_path, program="git-binary-that-does-not-exist")
        with pytest.raises(GitError) as exc_info:
            executor.verify_repo()
        assert exc_info.value.code == GIT_NOT_FOUND

    def test_version_unknown_without_git(self, tmp_path):
        assert GitExecutor(tmp_path, program="git-binary-that-does-not-exist").version() == "unknown"

    @pytest.mark.skipif(shutil.which("sleep") is None, reason="sleep not available")
    def test_timeout(self, tmp_path, log_stream):
        # "sleep 5" stands in for a git command that hangs
        executor = GitExecutor(tmp_path, timeout_ms=200, program="sleep",
                               logger=ExecutionLogger(stream=log_stream))
        start = time.monotonic()
        with pytest.raises(GitError) as exc_info:
            executor.run("5")
        assert time.monotonic() - start < 4
        assert exc_info.value.code == GIT_TIMEOUT
        assert exc_info.value.details["timeout_ms"] == 200
        assert "timed out" in _lines(log_stream)[-1]


# ---------------------------------------------------------------------------
# ExecutionLogger
# ---------------------------------------------------------------------------

class TestExecutionLogger:

    def test_success_line(self, log_stream):
        ExecutionLogger(stream=log_stream).log_execution("status", ["--porcelain"], 1.0, 1.045, True)
        assert _lines(log_stream) == ["✓ git status --porcelain (45ms)"]

    def test_failure_adds_error_line(self, log_stream):
        ExecutionLogger(stream=log_stream).log_execution(
            "commit", ["-F", "m.txt"], 0.0, 0.012, False, stderr="nothing to commit\n",
        )
        assert _lines(log_stream) == ["✗ git commit -F m.txt (12ms)", "  Error: nothing to commit"]

    def test_explicit_error_message_wins(self, log_stream):
        ExecutionLogger(stream=log_stream).log_execution(
            "push", ["--force"], 0.0, 0.0, False, stderr="ignored", error_message="Dangerous command blocked",
        )
        assert _lines(log_stream)[1] == "  Error: Dangerous command blocked"

    def test_stdout_only_in_verbose(self, log_stream):
        ExecutionLogger(stream=log_stream).log_execution("log", ["-1"], 0.0, 0.001, True, stdout="abc feat: x\n")
        assert len(_lines(log_stream)) == 1

        verbose_stream = io.StringIO()
        ExecutionLogger(verbose=True, stream=verbose_stream).log_execution(
            "log", ["-1"], 0.0, 0.001, True, stdout="abc feat: x\n",
        )
        assert _lines(verbose_stream)[1] == "  abc feat: x"

    def test_verbose_output_truncated(self, log_stream):
        ExecutionLogger(verbose=True, stream=log_stream).log_execution(
            "diff", [], 0.0, 0.0, True, stdout="x" * 2000,
        )
        assert "more chars" in log_stream.getvalue()
        assert len(log_stream.getvalue()) < 700

    def test_commit_subject(self, log_stream):
        ExecutionLogger(stream=log_stream).log_commit_subject("feat: add login\n\n- body")
        assert _lines(log_stream)[0].endswith("Commit: feat: add login")

    def test_closed_stream_is_ignored(self):
        stream = io.StringIO()
        stream.close()
        ExecutionLogger(stream=stream).log_execution("status", [], 0.0, 0.0, True)

    @requires_git
    def test_executor_logs_every_run(self, git_repo, log_stream):
        executor = GitExecutor(git_repo, logger=ExecutionLogger(stream=log_stream))
        executor.run("status", ["--porcelain"])
        executor.run("checkout", ["no-such-branch"])
        lines = _lines(log_stream)
        assert lines[0].startswith("✓ git status --porcelain (")
        assert lines[1].startswith("✗ git checkout no-such-branch (")
        assert lines[2].startswith("  Error: ")
