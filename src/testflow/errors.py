"""Issue taxonomy for compilation diagnostics.

Classifies every condition the compiler can report so that:
- Callers get errors and warnings as data, never as exceptions
- Messages stay consistent between the library, CLI and logs
- Tests can assert on the category instead of the wording
"""

from __future__ import annotations

from enum import Enum

from testflow.constants import Framework


class IssueKind(Enum):
    NOISE = "noise"  # line is not an action, dropped silently
    EMPTY_INPUT = "empty_input"  # nothing classified: error
    CUSTOM_ACTION = "custom_action"  # generic action: warning
    TRUNCATION = "truncation"  # too many actions: warning
    EMITTER_FALLBACK = "emitter_fallback"  # generic arrow: silent
    UNKNOWN_FRAMEWORK = "unknown_framework"  # bad selector: error
    INVALID_LIMIT = "invalid_limit"  # bad max_actions/label_max_chars: error


NO_STEPS_MESSAGE = "no test steps could be parsed"


class CompilationError(Exception):
    """Raised inside the pipeline; converted to result errors at the boundary."""

    kind: IssueKind = IssueKind.EMPTY_INPUT


class EmptyInputError(CompilationError):
    kind = IssueKind.EMPTY_INPUT

    def __init__(self) -> None:
        super().__init__(NO_STEPS_MESSAGE)


class UnknownFrameworkError(CompilationError):
    kind = IssueKind.UNKNOWN_FRAMEWORK

    def __init__(self, value: object) -> None:
        valid = ", ".join(sorted(f.value for f in Framework))
        super().__init__(
            f"unknown framework {value!r} (expected one of: {valid})"
        )
        self.value = value


class InvalidLimitError(CompilationError):
    kind = IssueKind.INVALID_LIMIT

    def __init__(self, name: str, value: int, minimum: int) -> None:
        super().__init__(f"{name} must be at least {minimum}, got {value}")
        self.value = value


def custom_action_warning(line_number: int, verb: str) -> str:
    """Warning for an action kept with a generic label.

    ``line_number`` is 0-based; the message shows it 1-based.
    """
    return (
        f"line {line_number + 1}: unrecognised action '{verb}' "
        "rendered as a generic message"
    )


def truncation_warning(dropped: int, limit: int) -> str:
    """Warning for actions dropped past the configured limit."""
    return (
        f"diagram truncated: {dropped} action(s) dropped "
        f"(limit {limit})"
    )

