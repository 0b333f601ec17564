"""Compile test code into a Mermaid sequence diagram.

classify (per line) -> resolve + build -> emit. Every call allocates its
own registry, action list and result; the only shared state is the
read-only rule tables.
"""

from __future__ import annotations

import logging

from testflow.compiler.builder import build
from testflow.compiler.classifier import (
    classify,
    scan_blocks,
    split_lines,
    strip_block_comments,
)
from testflow.compiler.models import ClassifiedStatement, CompilationResult
from testflow.constants import (
    DIAGRAM_MAX_ACTIONS,
    LABEL_MAX_CHARS,
    LABEL_MIN_CHARS,
    Framework,
)
from testflow.diagrams.mermaid import emit
from testflow.errors import (
    CompilationError,
    EmptyInputError,
    InvalidLimitError,
    UnknownFrameworkError,
)

logger = logging.getLogger(__name__)


def _coerce_framework(framework: Framework | str) -> Framework:
    try:
        return Framework(framework)
    except ValueError:
        raise UnknownFrameworkError(framework) from None


def _check_limits(max_actions: int, label_max_chars: int) -> None:
    if max_actions < 1:
        raise InvalidLimitError("max_actions", max_actions, 1)
    if label_max_chars < LABEL_MIN_CHARS:
        raise InvalidLimitError(
            "label_max_chars", label_max_chars, LABEL_MIN_CHARS
        )


def classify_source(
    source: str, framework: Framework
) -> list[ClassifiedStatement]:
    """Classify every line of ``source``, dropping noise.

    Text inside block comments is blanked first, so commented-out steps
    and test headers are noise.
    """
    lines = strip_block_comments(split_lines(source))
    blocks = scan_blocks(lines, framework)
    statements: list[ClassifiedStatement] = []
    for line, block in zip(lines, blocks, strict=True):
        statement = classify(line, framework, block)
        if statement is not None:
            statements.append(statement)
    return statements


def compile_test_code(
    source: str,
    framework: Framework | str,
    *,
    max_actions: int = DIAGRAM_MAX_ACTIONS,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> CompilationResult:
    """Compile test source into a :class:`CompilationResult`.

    Never raises for bad input: an unknown framework, a limit below its
    minimum or source with no recognisable steps yields a result with a
    single error, no actions and empty ``diagram_text``.
    """
    resolved: Framework | None = None
    try:
        resolved = _coerce_framework(framework)
        _check_limits(max_actions, label_max_chars)
        statements = classify_source(source, resolved)
        if not statements:
            raise EmptyInputError()
        actions, participants, warnings = build(
            statements, resolved, max_actions=max_actions
        )
    except CompilationError as exc:
        logger.info(
            "event=compile_rejected kind=%s error=%s",
            exc.kind.value,
            exc,
        )
        return CompilationResult(framework=resolved, errors=(str(exc),))

    text = emit(actions, participants, label_max_chars=label_max_chars)
    logger.debug(
        "event=compile_done framework=%s actions=%d participants=%d "
        "warnings=%d",
        resolved,
        len(actions),
        len(participants),
        len(warnings),
    )
    return CompilationResult(
        framework=resolved,
        actions=actions,
        participants=participants,
        diagram_text=text,
        warnings=warnings,
    )
