"""Commit Message Validator - Conventional commit rules."""

import re
from dataclasses import dataclass, field

from commit_agent import COMMIT_TYPE_NAMES

DEFAULT_MAX_SUBJECT_LENGTH = 72

TYPES_PATTERN = '|'.join(COMMIT_TYPE_NAMES)
CONVENTIONAL_RE = re.compile(rf'^({TYPES_PATTERN})(\(.+\))?: .+')


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_commit_message(message: str, max_length: int = DEFAULT_MAX_SUBJECT_LENGTH) -> ValidationResult:
    """Check a commit message against the conventional commit format.

    Only the first line is checked for format and length; the body is free
    text. Every violation is reported, not just the first.
    """
    if not message or not message.strip():
        return ValidationResult(valid=False, errors=["Commit message cannot be empty"])

    errors = []
    first_line = message.split('\n')[0]

    if not CONVENTIONAL_RE.match(first_line):
        errors.append(
            "First line should follow conventional commit format: type(scope): description\n"
            f"Valid types: {', '.join(COMMIT_TYPE_NAMES)}"
        )

    if len(first_line) > max_length:
        errors.append(f"First line should be {max_length} characters or less (got {len(first_line)})")

    return ValidationResult(valid=not errors, errors=errors)
