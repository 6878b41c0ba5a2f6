"""CLI Argument Parsing"""

import argparse
import argcomplete

from commit_agent import COMMIT_TYPE_NAMES, __version__


def _subject_length(value: str) -> int:
    length = int(value)
    if not 20 <= length <= 200:
        raise argparse.ArgumentTypeError("must be between 20 and 200 characters")
    return length


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='commit-agent',
        description='AI agent that stages and commits your changes with a conventional commit message',
        epilog='Example: commit-agent --commit-type feat --scope auth --dry-run'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')

    # Commit message format
    fmt = parser.add_argument_group('commit message format')
    fmt.add_argument('--commit-type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    fmt.add_argument('--scope', type=str, metavar='SCOPE', help='Set commit scope (e.g. auth, api, ui)')
    fmt.add_argument('--subject-max-length', type=_subject_length, metavar='N', help='Maximum subject line length (20-200)')
    fmt.add_argument('--detail-level', type=str, choices=['brief', 'normal', 'detailed'], help='Commit body detail level')
    fmt.add_argument('--file-breakdown', action=argparse.BooleanOptionalAction, default=None, help='Include a file-by-file breakdown in the body')

    # Behavior controls
    behavior = parser.add_argument_group('behavior controls')
    behavior.add_argument('--auto-stage', type=str, choices=['all', 'modified', 'none'], help='Automatic staging behavior')
    behavior.add_argument('--push', action='store_true', default=None, help='Allow pushing after committing')
    behavior.add_argument('--no-verify', action='store_true', default=None, help='Skip commit verification hooks')
    behavior.add_argument('--conventional-strict', action=argparse.BooleanOptionalAction, default=None, help='Enforce strict conventional commit format')

    # LLM options
    llm = parser.add_argument_group('LLM')
    llm.add_argument('-p', '--provider', type=str, choices=['auto', 'ollama', 'claude'], help='LLM provider')
    llm.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')

    # Execution
    execution = parser.add_argument_group('execution')
    execution.add_argument('--dry-run', action='store_true', default=None, help='Analyze and generate a message without committing')
    execution.add_argument('--verbose', action='store_true', default=None, help='Show command output and token usage')
    execution.add_argument('--display-config', action='store_true', help='Show current configuration')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)


def cli_overrides(args: argparse.Namespace) -> dict:
    """Map parsed arguments onto Config fields. Unset flags are None."""
    return {
        "provider": args.provider,
        "model": args.model,
        "commit_type": args.commit_type,
        "scope": args.scope,
        "subject_max_length": args.subject_max_length,
        "detail_level": args.detail_level,
        "file_breakdown": args.file_breakdown,
        "auto_stage": args.auto_stage,
        "allow_push": args.push,
        "skip_verification": args.no_verify,
        "conventional_strict": args.conventional_strict,
        "dry_run": args.dry_run,
        "verbose": args.verbose,
    }
