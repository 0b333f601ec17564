"""Mermaid sequence diagram emitter for compiled test actions."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from testflow.compiler.models import DiagramAction, Participant
from testflow.constants import (
    BLOCK_FILL,
    ELLIPSIS,
    EMPTY_LABEL,
    LABEL_MAX_CHARS,
    ActionKind,
)

logger = logging.getLogger(__name__)

HEADER = "sequenceDiagram"
NOTE = "note"
DEFAULT_ARROW = "->>"

# Arrow per action kind; NOTE renders as "Note over a,b: label"
ARROWS: Mapping[ActionKind, str] = MappingProxyType({
    ActionKind.NAVIGATE: "->>",
    ActionKind.CLICK: "->>",
    ActionKind.FILL: "->>",
    ActionKind.SELECT: "->>",
    ActionKind.PRESS: "->>",
    ActionKind.SCROLL: "->>",
    ActionKind.VIEWPORT: "->>",
    ActionKind.REQUEST: "->>",
    ActionKind.EVALUATE: "-)",
    ActionKind.ASSERT: "-->>",
    ActionKind.ASSERT_ABSENT: "-->>",
    ActionKind.GRAB: "-->>",
    ActionKind.SCREENSHOT: "-->>",
    ActionKind.WAIT: NOTE,
})

_SPACES = re.compile(r"\s+")
# Characters Mermaid lexes as comment start, statement end, text start
_LABEL_SPECIAL = re.compile(r"[#;]")
_NAME_SPECIAL = re.compile(r"[#;:]")
_INDENT = "    "


def _entity(m: re.Match[str]) -> str:
    return f"#{ord(m.group())};"


def _clean(text: str, max_chars: int, special: re.Pattern[str]) -> str:
    text = _SPACES.sub(" ", text).strip()
    if not text:
        return EMPTY_LABEL
    if len(text) > max_chars:
        keep = max(max_chars - len(ELLIPSIS), 1)
        text = text[:keep].rstrip() + ELLIPSIS
    return special.sub(_entity, text.replace('"', "'"))


def sanitize_label(
    text: str, max_chars: int = LABEL_MAX_CHARS
) -> str:
    """Make text safe to follow the ``:`` of a Mermaid statement.

    Newlines and tabs become spaces and double quotes become single
    quotes. ``#`` (comment start) and ``;`` (statement separator) become
    the entities ``#35;`` and ``#59;`` in a single pass. Text longer than
    ``max_chars`` is cut and marked with an ellipsis before escaping.
    """
    return _clean(text, max_chars, _LABEL_SPECIAL)


def _display_name(name: str, max_chars: int) -> str:
    # ":" would start the alias text
    return _clean(name, max_chars, _NAME_SPECIAL)


def _participant_line(p: Participant, max_chars: int) -> str:
    display = _display_name(p.display_name, max_chars)
    if display == p.id:
        return f"{_INDENT}participant {p.id}"
    return f"{_INDENT}participant {p.id} as {display}"


def _action_line(
    action: DiagramAction, indent: str, max_chars: int
) -> str:
    label = sanitize_label(action.label, max_chars)
    arrow = ARROWS.get(action.kind)
    if arrow is None:
        logger.debug(
            "No arrow for %s, using %s", action.kind, DEFAULT_ARROW
        )
        arrow = DEFAULT_ARROW
    if arrow == NOTE:
        over = _span(action.source, action.target)
        return f"{indent}Note over {over}: {label}"
    return (
        f"{indent}{action.source.id}{arrow}{action.target.id}: {label}"
    )


def _span(first: Participant, last: Participant) -> str:
    if first.id == last.id:
        return first.id
    return f"{first.id},{last.id}"


def emit(
    actions: Sequence[DiagramAction],
    participants: Sequence[Participant],
    *,
    label_max_chars: int = LABEL_MAX_CHARS,
) -> str:
    """Serialize actions as Mermaid ``sequenceDiagram`` text.

    Participants are declared in registry order, then one line per action
    in ``sequence_index`` order. Runs of actions from the same named test
    block are wrapped in a highlighted ``rect`` with a title note. The
    result has no trailing newline.
    """
    lines = [HEADER]
    lines.extend(
        _participant_line(p, label_max_chars) for p in participants
    )

    ordered = sorted(actions, key=lambda a: a.sequence_index)
    current: str | None = None
    for action in ordered:
        if action.block != current:
            if current is not None:
                lines.append(f"{_INDENT}end")
            current = action.block
            if current is not None:
                lines.append(f"{_INDENT}rect {BLOCK_FILL}")
                title = sanitize_label(current, label_max_chars)
                over = (
                    _span(participants[0], participants[-1])
                    if participants
                    else _span(action.source, action.target)
                )
                lines.append(f"{_INDENT * 2}Note over {over}: {title}")
        indent = _INDENT * 2 if current is not None else _INDENT
        lines.append(_action_line(action, indent, label_max_chars))
    if current is not None:
        lines.append(f"{_INDENT}end")

    return "\n".join(lines)
