"""Terminal Output Formatting Package

Color support is decided per stream: the execution log can be written to a
pipe or a file while the CLI still colors an interactive terminal.
NO_COLOR turns color off everywhere, FORCE_COLOR turns it on everywhere.
"""

import os
import re
import sys
from typing import TextIO

from commit_agent import COMMIT_TYPE_NAMES


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'


def _enable_windows_ansi() -> bool:
    try:
        import ctypes
        kernel32 = ctypes.windll.kernel32
        # processed output | wrap at EOL | virtual terminal processing
        kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
        return True
    except Exception:
        return False


def supports_color(stream: TextIO | None = None) -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    stream = stream if stream is not None else sys.stdout
    try:
        interactive = stream.isatty()
    except (AttributeError, ValueError):
        # No isatty(), or the stream is already closed
        return False
    if not interactive:
        return False
    return _enable_windows_ansi() if sys.platform == 'win32' else True


def supports_unicode(stream: TextIO | None = None) -> bool:
    if sys.platform != 'win32':
        return True
    encoding = getattr(stream if stream is not None else sys.stdout, 'encoding', None) or 'utf-8'
    try:
        '✓✗─📝⚠'.encode(encoding)
        return True
    except (UnicodeEncodeError, LookupError):
        return False


UNICODE_ENABLED = supports_unicode()

CHECK = '✓' if UNICODE_ENABLED else '[OK]'
CROSS = '✗' if UNICODE_ENABLED else '[X]'
MEMO = '📝' if UNICODE_ENABLED else '>>'
WARN = '⚠' if UNICODE_ENABLED else '[!]'
RULE = '─' if UNICODE_ENABLED else '-'

# Color of the "type(scope):" prefix, grouped by kind of change
COMMIT_TYPE_COLORS = {
    'feat': Colors.GREEN,
    'perf': Colors.GREEN,
    'fix': Colors.RED,
    'refactor': Colors.YELLOW,
    'revert': Colors.YELLOW,
    'docs': Colors.CYAN,
    'build': Colors.CYAN,
    'ci': Colors.CYAN,
    'test': Colors.MAGENTA,
    'style': Colors.DIM,
    'chore': Colors.DIM,
}

_COMMIT_PREFIX_RE = re.compile(rf"^({'|'.join(COMMIT_TYPE_NAMES)})(\([^)\n]*\))?!?:")


class Style:
    """Color helpers bound to one output stream."""

    def __init__(self, stream: TextIO | None = None):
        self.enabled = supports_color(stream)

    def paint(self, text: str, *codes: str) -> str:
        if not self.enabled:
            return text
        return f"{''.join(codes)}{text}{Colors.RESET}"

    def success(self, text: str) -> str:
        return self.paint(text, Colors.GREEN)

    def error(self, text: str) -> str:
        return self.paint(text, Colors.RED)

    def warning(self, text: str) -> str:
        return self.paint(text, Colors.YELLOW)

    def info(self, text: str) -> str:
        return self.paint(text, Colors.CYAN)

    def dim(self, text: str) -> str:
        return self.paint(text, Colors.DIM)

    def bold(self, text: str) -> str:
        return self.paint(text, Colors.BOLD)

    def status_icon(self, succeeded: bool) -> str:
        return self.success(CHECK) if succeeded else self.error(CROSS)

    def rule(self, width: int) -> str:
        return self.dim(RULE * width)

    def commit_type(self, message: str) -> str:
        """Color the conventional type prefix on the first line of a message."""
        match = _COMMIT_PREFIX_RE.match(message)
        if not match or not self.enabled:
            return message
        prefix = match.group(0)
        return self.paint(prefix, Colors.BOLD, COMMIT_TYPE_COLORS[match.group(1)]) + message[len(prefix):]


# Style for stdout, used by the CLI
console = Style()

success = console.success
error = console.error
warning = console.warning
info = console.info
dim = console.dim
bold = console.bold


def print_error(message: str, suggestion: str | None = None) -> None:
    style = Style(sys.stderr)
    print(f"{style.error(CROSS)} {style.error(message)}", file=sys.stderr)
    if suggestion:
        print(style.dim(f"  {suggestion}"), file=sys.stderr)


def print_warning(message: str) -> None:
    style = Style(sys.stderr)
    print(f"{style.warning(WARN)} {style.warning(message)}", file=sys.stderr)


__all__ = [
    "Colors", "Style", "console", "supports_color", "supports_unicode", "UNICODE_ENABLED",
    "CHECK", "CROSS", "MEMO", "WARN", "RULE",
    "success", "error", "warning", "info", "dim", "bold",
    "print_error", "print_warning",
    "COMMIT_TYPE_COLORS",
]
