"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so framework and action names can be
passed straight through from the CLI, JSON payloads and config.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Framework(StrEnum):
    """Test framework grammars the classifier understands."""

    PLAYWRIGHT = "playwright"
    CODECEPTJS = "codeceptjs"


class ActionKind(StrEnum):
    """Closed set of recognised test actions."""

    NAVIGATE = "navigate"
    CLICK = "click"
    FILL = "fill"
    SELECT = "select"
    PRESS = "press"
    SCROLL = "scroll"
    WAIT = "wait"
    ASSERT = "assert"
    ASSERT_ABSENT = "assert_absent"
    GRAB = "grab"
    SCREENSHOT = "screenshot"
    EVALUATE = "evaluate"
    VIEWPORT = "viewport"
    REQUEST = "request"
    CUSTOM = "custom"


class OutputFormat(StrEnum):
    """CLI output formats."""

    MERMAID = "mermaid"
    JSON = "json"
    SVG = "svg"
    PNG = "png"
    PDF = "pdf"


# Kinds drawn from the system back to the acting participant
REPLY_KINDS = frozenset({
    ActionKind.ASSERT,
    ActionKind.ASSERT_ABSENT,
    ActionKind.GRAB,
    ActionKind.SCREENSHOT,
})

# ── Participants ────────────────────────────────────────

PAGE_ID = "page"
PAGE_NAME = "Page"
TESTER_ID = "tester"
TESTER_NAME = "Tester"
SUT_ID = "sut"
SUT_NAME = "System Under Test"

# CodeceptJS actor alias for the tester
CODECEPTJS_ACTOR = "I"

# Words Mermaid's sequence grammar reserves; never valid participant ids
MERMAID_KEYWORDS = frozenset({
    "actor",
    "activate",
    "alt",
    "and",
    "as",
    "autonumber",
    "box",
    "break",
    "create",
    "critical",
    "deactivate",
    "destroy",
    "else",
    "end",
    "left",
    "links",
    "link",
    "loop",
    "note",
    "of",
    "opt",
    "over",
    "par",
    "participant",
    "rect",
    "right",
    "title",
})

# ── Diagram Limits ──────────────────────────────────────

DIAGRAM_MAX_ACTIONS = 100
LABEL_MAX_CHARS = 80
LABEL_MIN_CHARS = 10
ELLIPSIS = "..."
EMPTY_LABEL = "(no label)"
BLOCK_FILL = "rgb(200, 220, 255)"

# ── Logging ─────────────────────────────────────────────

LOG_FILE_NAME = "testflow.log"
ID_HEX_LENGTH = 12
ERROR_TRUNCATION_CHARS = 200
