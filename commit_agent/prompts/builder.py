"""Prompt Builder - System and task prompts for the commit agent."""

from commit_agent import COMMIT_TYPES
from commit_agent.config import Config

# Body guidance by detail level
DETAIL_INSTRUCTIONS = {
    "brief": "Keep the body to 1-2 short bullets, or omit it for trivial changes.",
    "normal": "Write 2-5 bullets covering the key changes and why they were made.",
    "detailed": "Write a thorough body: every significant change, the reasoning behind it, and any side effects.",
}

# Staging commands by auto-stage mode
STAGING_INSTRUCTIONS = {
    "all": 'Stage ALL changes including untracked files: execute_git_command({ command: "add", args: ["."] })',
    "modified": 'Stage only modified and deleted tracked files: execute_git_command({ command: "add", args: ["-u"] })',
    "none": "Do NOT stage anything. Commit only what is already staged; if nothing is staged, stop and report it.",
}

_TOOL_EXAMPLES = """\
### Check Status:
execute_git_command({ command: "status", args: ["--porcelain"] })

### Get Diff:
execute_git_command({ command: "diff", args: ["--cached"] })
execute_git_command({ command: "diff", args: ["--stat"] })
execute_git_command({ command: "diff", args: ["--unified", "3"] })  // auto-corrected to --unified=3

### Stage Files:
execute_git_command({ command: "add", args: ["."] })

### Commit (multi-line message):
execute_git_command({
  command: "commit",
  args: [],
  commit_message: "feat(scope): brief description\\n\\n- what changed and why"
})

### Branch and Log:
execute_git_command({ command: "branch", args: ["--show-current"] })
execute_git_command({ command: "log", args: ["-1", "--pretty=format:%H|%an|%s"] })"""


class PromptBuilder:
    """Constructs the system and task prompts from the agent configuration."""

    def build_system(self, config: Config, git_version: str = "unknown") -> str:
        sections = [
            self._build_role_section(git_version),
            self._build_safety_section(),
            self._build_logging_section(config),
            self._build_push_section(config),
        ]
        return "\n\n".join(filter(None, sections))

    def build_task(self, config: Config) -> str:
        sections = [
            self._build_objectives_section(config),
            self._build_tool_section(),
            self._build_analysis_section(),
            self._build_message_rules_section(config),
            self._build_staging_section(config),
            self._build_execution_section(config),
            self._build_final_instructions(config),
        ]
        return "\n\n".join(filter(None, sections))

    # -- system prompt ---------------------------------------------------

    def _build_role_section(self, git_version: str) -> str:
        return f"""You are an AI assistant specialized in git repository management.

Git version: {git_version}

You have ONE master tool, execute_git_command, that runs any git command with safety checks
and returns structured JSON. Convenience tools (git_status, git_diff, git_add, git_commit)
wrap common sequences.

The tool validates and corrects common syntax errors automatically, for example
`--unified 3` becomes `--unified=3`."""

    def _build_safety_section(self) -> str:
        return """Safety:
- Dangerous commands (reset --hard, push --force, clean -f, rm -rf) are blocked
- Never set allow_dangerous unless the user explicitly asked for that exact operation
- rebase, merge, cherry-pick and reset run with a caution warning; avoid them
- Always check "success" in the tool response before continuing
- On an error, read "suggestion" and decide whether a retry can help ("recoverable")"""

    def _build_logging_section(self, config: Config) -> str:
        if config.verbose:
            return """Verbose logging:
- Explain each operation and why you run it
- Report intermediate findings as you go"""
        return """Minimal logging:
- The tool prints one line per command; do not repeat command output back
- Keep your own commentary to the final summary"""

    def _build_push_section(self, config: Config) -> str:
        if config.allow_push:
            return """Push operations:
- Pushing to the remote is ALLOWED after a successful commit
- Confirm the current branch before pushing; never force push"""
        return """Push operations:
- DO NOT push commits or interact with remote repositories"""

    # -- task prompt -----------------------------------------------------

    def _build_objectives_section(self, config: Config) -> str:
        if config.commit_type:
            type_instruction = f'using commit type "{config.commit_type}"'
        else:
            type_instruction = "choosing the most appropriate commit type"
        scope_instruction = f' with scope "{config.scope}"' if config.scope else ""

        action = "prepare (but do not create)" if config.dry_run else "create"
        return f"""# TASK OBJECTIVES
Review the changes in this repository, stage them, and {action} a single conventional commit,
{type_instruction}{scope_instruction}."""

    def _build_tool_section(self) -> str:
        return f"""# Tool Usage
{_TOOL_EXAMPLES}"""

    def _build_analysis_section(self) -> str:
        types_list = "\n".join(f"  - {t}: {desc}" for t, desc in COMMIT_TYPES.items())
        return f"""# Analyze the Changes
1. Get the repository status and categorize files (modified, added, deleted, renamed, untracked)
2. Read the diff; use --stat for an overview of large changes
3. Identify the PRIMARY purpose of the change:
{types_list}"""

    def _build_message_rules_section(self, config: Config) -> str:
        rules = [
            "# Commit Message Rules",
            f"- Subject line: type(scope): description, imperative mood, max {config.subject_max_length} characters",
            "- Leave a blank line between subject and body",
            f"- {DETAIL_INSTRUCTIONS[config.detail_level]}",
        ]
        if config.file_breakdown:
            rules.append("- End the body with a short file-by-file breakdown of what changed")
        if config.conventional_strict:
            rules.append("- The subject MUST follow the conventional commit format exactly; it is validated")
        if config.commit_type:
            rules.append(f'- The type MUST be "{config.commit_type}"')
        if config.scope:
            rules.append(f'- The scope MUST be "{config.scope}"')
        return "\n".join(rules)

    def _build_staging_section(self, config: Config) -> str:
        return f"""# Staging
{STAGING_INSTRUCTIONS[config.auto_stage]}"""

    def _build_execution_section(self, config: Config) -> str:
        lines = ["# Commit"]
        if config.dry_run:
            lines.append("- DRY RUN: do not create the commit. Output the commit message you would use.")
        else:
            lines.append("- Commit with execute_git_command, passing the full message in commit_message (never -m)")
        if config.skip_verification:
            lines.append('- Skip commit hooks by adding "--no-verify" to the commit args')
        lines.append("- Verify the result with a log or status command")
        return "\n".join(lines)

    def _build_final_instructions(self, config: Config) -> str:
        push_rule = ("- You MAY push the commit once it succeeds"
                     if config.allow_push else
                     "- DO NOT push the commit")
        return f"""<instructions>
Perform the steps above methodically, one tool call at a time.
When done, reply with the final commit message only, followed by one line summarizing the result.
{push_rule}
- Do not suggest any further actions
</instructions>"""
