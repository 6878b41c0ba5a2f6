"""CLI Main Entry Point"""

import time

from commit_agent.agent import CommitAgent
from commit_agent.config import Config, load_config, get_config_path
from commit_agent.git import ExecutionLogger, GitError, GitExecutor
from commit_agent.llm import LLMError, LLMResponse, get_client
from commit_agent.output import console, bold, dim, info, warning, print_error
from commit_agent.tools import build_registry

from commit_agent.cli.args import parse_args, cli_overrides


def _display_message(message):
    """Display the agent's final answer with horizontal rules and colored type."""
    colored = console.commit_type(message)
    lines = colored.split('\n')
    # Use raw message for width calculation (no ANSI codes)
    raw_lines = message.split('\n')
    width = min(max((len(line) for line in raw_lines), default=40), 100)
    print(f"\n{console.rule(width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(console.rule(width))


def display_config(config: Config) -> int:
    """Display the effective configuration."""
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")
    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .commitagentrc found)")

    print()
    print(f"  {bold('Settings:')}")
    for key, value in config.to_dict().items():
        shown = str(value).lower() if isinstance(value, bool) else str(value)
        print(f"    {key + ':':<22}{info(shown)}")
    for key in ("model", "commit_type", "scope"):
        if getattr(config, key) is None:
            print(f"    {key + ':':<22}{info('auto')}")

    print(f"\n  {dim('Config locations:')}")
    print("    Local:  .commitagentrc, .env (in current directory)")
    print("    Global: ~/.commitagentrc, ~/.agent-config\n")
    return 0


def _print_verbose_stats(config, response: LLMResponse, elapsed: float):
    """Print tool call and token statistics."""
    if not config.verbose:
        return
    print()
    print(dim(f"  Tool calls: {len(response.tool_calls)}"))
    print(dim(f"  Tokens: {response.tokens_used}"))
    print(dim(f"  Total time: {elapsed:.2f}s"))


def _build_agent(config: Config) -> tuple[CommitAgent, GitExecutor]:
    logger = ExecutionLogger(verbose=config.verbose)
    executor = GitExecutor(timeout_ms=config.git_timeout_ms, logger=logger)
    registry = build_registry(config, executor)
    client = get_client(provider=config.provider, model=config.model)
    return CommitAgent(config, client, registry, executor), executor


def run_agent(config: Config) -> int:
    """Main stage-and-commit flow.

    Returns:
        int: Exit code
    """
    t0 = time.time()
    try:
        agent, _ = _build_agent(config)
    except LLMError as e:
        print_error(str(e))
        return 1

    if config.dry_run:
        print(warning("Dry run: nothing will be committed"))
    print(f"Running commit agent using {info(agent.client.name)}...\n")

    try:
        response = agent.run()
    except GitError as e:
        print_error(e.message, e.suggestion)
        return 1
    except LLMError as e:
        print_error(str(e))
        return 1

    _display_message(response.content or "No response from agent.")
    _print_verbose_stats(config, response, time.time() - t0)
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    args = parse_args()
    config = load_config(cli_overrides(args))

    if args.display_config:
        return display_config(config)

    try:
        return run_agent(config)
    except KeyboardInterrupt:
        print(dim("\nCancelled."))
        return 130
