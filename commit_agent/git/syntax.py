"""Syntax Normalizer - Rewrite arguments git only accepts as --name=value."""

# Options whose value must be attached with "=" ("--unified 3" -> "--unified=3")
EQUALS_FLAGS = frozenset({
    'unified',
    'format',
    'pretty',
    'date',
    'color',
    'abbrev',
    'depth',
    'since',
    'until',
    'after',
    'before',
    'author',
    'committer',
    'grep',
    'max-count',
    'diff-filter',
})


def _is_flag(arg: str) -> bool:
    return arg.startswith('-')


def _mergeable(arg: str) -> bool:
    return arg.startswith('--') and arg[2:] in EQUALS_FLAGS


def normalize_args(args: list[str]) -> list[str]:
    """Merge allow-listed long flags with their following value.

    Already merged tokens ("--unified=3") never match the allow-list, so
    running this on its own output is a no-op.
    """
    normalized = []
    i = 0
    while i < len(args):
        arg = args[i]
        has_value = i + 1 < len(args) and not _is_flag(args[i + 1])
        if _mergeable(arg) and has_value:
            normalized.append(f"{arg}={args[i + 1]}")
            i += 2
        else:
            normalized.append(arg)
            i += 1
    return normalized


def normalize_command(args: list[str]) -> tuple[list[str], list[str]]:
    """Normalize args and describe each correction that was made."""
    normalized = normalize_args(args)
    corrections = [
        f"Auto-corrected '{arg} {args[idx + 1]}' to '{arg}={args[idx + 1]}'"
        for idx, arg in enumerate(args)
        if _mergeable(arg) and idx + 1 < len(args) and not _is_flag(args[idx + 1])
    ]
    return normalized, corrections
