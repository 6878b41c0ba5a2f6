"""Commit Message Staging - Pass multi-line commit messages through a file."""

import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

# Fragments the agent sometimes leaves behind when it builds "-m" arguments itself
MESSAGE_SENTINEL = "commit message"


def _unique_path(directory: Path) -> Path:
    return directory / f"commit_message_{time.time_ns() // 1_000_000}.txt"


@contextmanager
def commit_message_file(message: str, directory: str | Path | None = None) -> Iterator[Path]:
    """Write message to a temporary file and yield its path.

    The file is removed when the block exits, however it exits. A failed
    removal is ignored so it never hides the block's own result or error.
    """
    path = _unique_path(Path(directory) if directory else Path.cwd())
    try:
        # newline='' keeps the message byte-for-byte, including "\r\n" and blank lines
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(message)
        yield path
    finally:
        try:
            os.unlink(path)
        except OSError:
            pass


def rewrite_commit_args(args: list[str], path: str | Path) -> list[str]:
    """Replace any inline -m message with "-F <path>" at the front of args."""
    filtered = []
    skip_value = False
    for arg in args:
        if skip_value:
            skip_value = False
            if not arg.startswith('-'):
                continue
        if arg == '-m':
            skip_value = True
            continue
        if arg.startswith(MESSAGE_SENTINEL):
            continue
        filtered.append(arg)
    return ['-F', str(path), *filtered]
