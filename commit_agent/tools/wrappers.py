"""Convenience Git Tools - status, diff, add and commit on top of the executor."""

from commit_agent.git.errors import (
    GitError, FILE_NOT_FOUND, INVALID_COMMIT_MESSAGE, NO_STAGED_CHANGES,
)
from commit_agent.git.executor import GitExecutor
from commit_agent.git.message_file import commit_message_file
from commit_agent.git.validators import DEFAULT_MAX_SUBJECT_LENGTH, validate_commit_message
from commit_agent.tools.base import GitTool, Progress, split_lines, validate_files
from commit_agent.tools.result import ToolResult

LARGE_DIFF_LINES = 1000
COMMIT_LOG_FORMAT = "--pretty=format:%H|%an|%ae|%ad|%s"


class GitStatusTool(GitTool):
    name = "git_status"
    label = "git status"
    definition = {
        "name": "git_status",
        "description": (
            "Get the current status of the git repository including branch, changed files "
            "and staged files."
        ),
        "input_schema": {"type": "object", "properties": {}},
    }

    def _run(self, payload: dict, progress: Progress) -> ToolResult:
        partial = progress.partial_results

        status = self._required('status', ['--porcelain'], "Failed to get git status")
        partial["status"] = status.stdout

        changed = self._required('diff', ['--name-only'], "Failed to get changed files")
        partial["changed_files"] = changed.stdout

        staged = self._required('diff', ['--name-only', '--cached'], "Failed to get staged files")
        partial["staged_files"] = staged.stdout

        branch = self._optional(progress, 'branch', ['--show-current'], "Could not determine current branch")
        current_branch = branch.stdout.strip() if branch else ""
        if current_branch:
            partial["current_branch"] = current_branch

        output = [
            f"Git Status:\n{status.stdout or '(no changes)'}",
            f"Changed Files:\n{changed.stdout or '(none)'}",
            f"Staged Files:\n{staged.stdout or '(none)'}",
        ]
        if current_branch:
            output.insert(0, f"Current Branch: {current_branch}")

        return ToolResult.ok("\n\n".join(output), warnings=progress.warnings, partial_results=partial)


class GitDiffTool(GitTool):
    name = "git_diff"
    label = "git diff"
    definition = {
        "name": "git_diff",
        "description": (
            "Get the detailed diff of unstaged and staged changes, with statistics. "
            "Optionally limit the diff to specific files."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "files": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional file paths to limit the diff to",
                },
            },
        },
    }

    def validate(self, payload):
        errors = super().validate(payload)
        if not errors:
            validate_files(payload, errors)
        return errors

    def _run(self, payload: dict, progress: Progress) -> ToolResult:
        files = payload.get("files") or []
        pathspec = ['--', *files] if files else []
        partial = progress.partial_results

        unstaged = self._required('diff', pathspec, "Failed to get unstaged diff")
        partial["unstaged"] = unstaged.stdout

        staged = self._required('diff', ['--cached', *pathspec], "Failed to get staged diff")
        partial["staged"] = staged.stdout

        stats = self._optional(progress, 'diff', ['--stat', *pathspec], "Could not compute diff statistics")

        output = [
            f"=== UNSTAGED CHANGES ===\n{unstaged.stdout or '(no unstaged changes)'}",
            f"\n=== STAGED CHANGES ===\n{staged.stdout or '(no staged changes)'}",
        ]
        if stats and stats.stdout:
            partial["stats"] = stats.stdout
            output.append(f"\n=== STATISTICS ===\n{stats.stdout}")

        total_lines = len((unstaged.stdout + staged.stdout).split('\n'))
        if total_lines > LARGE_DIFF_LINES:
            progress.warnings.append(
                f"Large diff detected ({total_lines} lines). Consider reviewing in smaller chunks."
            )

        return ToolResult.ok("\n".join(output), warnings=progress.warnings, partial_results=partial)


class GitAddTool(GitTool):
    name = "git_add"
    label = "git add"
    definition = {
        "name": "git_add",
        "description": (
            "Stage changes. Stages everything by default, only tracked files with update=true, "
            "or the given files (which must exist)."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "files": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Optional specific file paths to stage",
                },
                "all": {
                    "type": "boolean",
                    "description": "Stage all changes including untracked files (default when no files given)",
                },
                "update": {
                    "type": "boolean",
                    "description": "Stage only modified and deleted tracked files (git add -u)",
                },
            },
        },
    }

    def validate(self, payload):
        errors = super().validate(payload)
        if errors:
            return errors
        validate_files(payload, errors)
        for flag in ("all", "update"):
            if payload.get(flag) is not None and not isinstance(payload.get(flag), bool):
                errors.append(f"'{flag}' must be a boolean")
        return errors

    def _run(self, payload: dict, progress: Progress) -> ToolResult:
        files = payload.get("files") or []

        status = self._required('status', ['--porcelain'], "Failed to check repository status")
        if not status.stdout.strip():
            progress.warnings.append("Repository is clean, nothing to add")
            return ToolResult.ok("No changes to stage", warnings=progress.warnings)

        if payload.get("all") or not files:
            add_args = ['-u'] if payload.get("update") and not payload.get("all") else ['.']
        else:
            for file in files:
                if not (self.executor.working_dir / file).exists():
                    raise GitError(
                        f"File not found: {file}",
                        FILE_NOT_FOUND,
                        details={"file": file},
                        recoverable=True,
                        suggestion="Check the file path and try again",
                    )
            add_args = ['--', *files]

        self._required('add', add_args, "Failed to stage changes")

        staged = self._optional(progress, 'diff', ['--name-only', '--cached'], "Could not verify staged files")
        data = {"message": "Changes staged successfully"}
        if staged:
            data["staged_files"] = split_lines(staged.stdout)
        return ToolResult.ok(data, warnings=progress.warnings)


class GitCommitTool(GitTool):
    name = "git_commit"
    label = "git commit"
    definition = {
        "name": "git_commit",
        "description": (
            "Commit staged changes with a conventional commit message. Validates the message "
            "format and that something is staged. Returns the commit hash and details."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "commit_message": {
                    "type": "string",
                    "description": "The complete commit message (subject, blank line, body)",
                },
                "validate": {
                    "type": "boolean",
                    "description": "Validate conventional commit format (default: true)",
                },
            },
            "required": ["commit_message"],
        },
    }

    def __init__(
        self,
        executor: GitExecutor,
        validate_default: bool = True,
        max_subject_length: int = DEFAULT_MAX_SUBJECT_LENGTH,
        skip_verification: bool = False,
        dry_run: bool = False,
    ):
        super().__init__(executor)
        self.validate_default = validate_default
        self.max_subject_length = max_subject_length
        self.skip_verification = skip_verification
        self.dry_run = dry_run

    def validate(self, payload):
        errors = super().validate(payload)
        if errors:
            return errors
        if not isinstance(payload.get("commit_message"), str):
            errors.append("'commit_message' is required and must be a string")
        if payload.get("validate") is not None and not isinstance(payload.get("validate"), bool):
            errors.append("'validate' must be a boolean")
        return errors

    def _check_message(self, message: str, validate: bool | None) -> None:
        if validate is None:
            validate = self.validate_default
        if not validate:
            return
        result = validate_commit_message(message, self.max_subject_length)
        if not result.valid:
            raise GitError(
                "Invalid commit message format",
                INVALID_COMMIT_MESSAGE,
                details={"errors": result.errors},
                recoverable=True,
                suggestion="\n".join(result.errors),
            )

    def _run(self, payload: dict, progress: Progress) -> ToolResult:
        message = payload["commit_message"]
        self._check_message(message, payload.get("validate"))

        staged = self._required('diff', ['--cached', '--name-only'], "Failed to check staged changes")
        staged_files = split_lines(staged.stdout)
        if not staged_files:
            raise GitError(
                "No staged changes to commit",
                NO_STAGED_CHANGES,
                recoverable=True,
                suggestion="Stage changes with git_add before committing",
            )
        progress.partial_results["staged_files"] = staged_files

        if self.dry_run:
            progress.warnings.append("Dry run: commit was not created")
            return ToolResult.ok({
                "message": "Dry run: commit message validated, nothing committed",
                "commit_message": message,
                "staged_files": staged_files,
                "dry_run": True,
            }, warnings=progress.warnings)

        logger = getattr(self.executor, 'logger', None)
        if logger:
            logger.log_commit_subject(message)

        with commit_message_file(message, self.executor.working_dir) as path:
            commit_args = ['-F', str(path)]
            if self.skip_verification:
                commit_args.append('--no-verify')
            commit = self._required('commit', commit_args, "Failed to create commit")

        head = self._optional(progress, 'rev-parse', ['HEAD'], "Could not read commit hash")
        log = self._optional(progress, 'log', ['-1', COMMIT_LOG_FORMAT], "Could not read commit details")

        data = {
            "message": "Commit created successfully",
            "commit_output": commit.stdout,
            "commit_hash": head.stdout.strip() if head else "unknown",
            "staged_files": staged_files,
        }
        if log:
            parts = log.stdout.strip().split('|', 4)
            if len(parts) == 5:
                hash_, author, email, date, subject = parts
                data["commit_details"] = {
                    "hash": hash_,
                    "author": author,
                    "email": email,
                    "date": date,
                    "subject": subject,
                }
        return ToolResult.ok(data, warnings=progress.warnings)
