"""Statement classifier: one source line -> ClassifiedStatement or noise."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from testflow.compiler.models import ClassifiedStatement, SourceLine
from testflow.compiler.rules import RULES
from testflow.compiler.tokens import parse_call_chain, strip_line_comment
from testflow.constants import ActionKind, Framework

logger = logging.getLogger(__name__)

_COMMENT_PREFIXES = ("//", "/*", "*", "#!")
_TRAILING = re.compile(r"[;,]+$")
_ASSIGNMENT = re.compile(
    r"^(?:(?:const|let|var)\s+)?"
    r"(?:[A-Za-z_$][\w$]*|\{[^}]*\}|\[[^\]]*\])"
    r"\s*=(?![=>])\s*"
)
_PREFIX = re.compile(r"^(?:return\s+)?(?:await\s+)?(?:this\.)?")

_BLOCK_HEADERS: Mapping[Framework, re.Pattern[str]] = MappingProxyType({
    Framework.PLAYWRIGHT: re.compile(
        r"^(?P<indent>\s*)(?:test|it)"
        r"(?:\.(?:only|skip|fixme|fail|slow))?"
        r"\s*\(\s*(?P<q>['\"`])(?P<title>.*?)(?P=q)"
    ),
    Framework.CODECEPTJS: re.compile(
        r"^(?P<indent>\s*)Scenario"
        r"(?:\.(?:only|skip|todo))?"
        r"\s*\(\s*(?P<q>['\"`])(?P<title>.*?)(?P=q)"
    ),
})
_BLOCK_CLOSE = re.compile(r"^(?P<indent>\s*)\}\s*\)\s*;?\s*$")
# A string literal, a line comment or a block comment opener
_COMMENT_SCAN = re.compile(r"""(['"`])(?:\\.|(?!\1).)*\1|//|/\*""")


def normalize(text: str) -> str:
    """Reduce a raw line to the bare call expression it may contain.

    Returns an empty string for blank and comment lines.
    """
    stripped = text.strip()
    if not stripped or stripped.startswith(_COMMENT_PREFIXES):
        return ""
    stripped = strip_line_comment(stripped)
    stripped = _TRAILING.sub("", stripped).strip()
    stripped = _ASSIGNMENT.sub("", stripped, count=1)
    return _PREFIX.sub("", stripped, count=1).strip()


def classify(
    line: SourceLine,
    framework: Framework,
    block: str | None = None,
) -> ClassifiedStatement | None:
    """Classify one line against the framework's rule table.

    Returns None for noise: blank lines, comments, boilerplate and
    anything no rule accepts in full.
    """
    text = normalize(line.text)
    if not text:
        return None
    chain = parse_call_chain(text)
    if chain is None:
        return None

    for rule in RULES[framework]:
        extraction = rule.apply(chain)
        if extraction is None:
            continue
        kind = extraction.kind or rule.kind or ActionKind.CUSTOM
        logger.debug(
            "line %d matched rule %s as %s",
            line.number,
            rule.name,
            kind,
        )
        return ClassifiedStatement(
            kind=kind,
            raw_line=line.text,
            line_number=line.number,
            verb=extraction.verb,
            label=extraction.label,
            actor_hint=extraction.actor_hint,
            target_hint=extraction.target_hint,
            argument=extraction.argument,
            block=block,
        )
    return None


def scan_blocks(
    lines: Iterable[SourceLine],
    framework: Framework,
) -> list[str | None]:
    """Title of the enclosing test block for each line, or None.

    A block opens at a ``test(...)``/``Scenario(...)`` header and closes
    at the first ``})`` with the header's indentation.
    """
    header = _BLOCK_HEADERS[framework]
    titles: list[str | None] = []
    title: str | None = None
    indent = ""
    for line in lines:
        opened = header.match(line.text)
        if opened is not None:
            title = opened.group("title").strip() or None
            indent = opened.group("indent")
            titles.append(title)
            continue
        titles.append(title)
        closed = _BLOCK_CLOSE.match(line.text)
        if (
            title is not None
            and closed is not None
            and closed.group("indent") == indent
        ):
            title = None
    return titles


def strip_block_comments(lines: Iterable[SourceLine]) -> list[SourceLine]:
    """Blank out text inside ``/* ... */`` comments, across lines.

    Comment markers inside string literals are left alone and a ``//``
    comment ends the scan of its line.
    """
    stripped: list[SourceLine] = []
    inside = False
    for line in lines:
        text = line.text
        kept: list[str] = []
        pos = 0
        while pos < len(text):
            if inside:
                end = text.find("*/", pos)
                if end < 0:
                    break
                inside, pos = False, end + 2
                continue
            m = _COMMENT_SCAN.search(text, pos)
            if m is None or m.group() == "//":
                kept.append(text[pos:])
                break
            if m.group() != "/*":
                kept.append(text[pos:m.end()])
                pos = m.end()
                continue
            kept.append(text[pos:m.start()])
            inside, pos = True, m.end()
        stripped.append(SourceLine(number=line.number, text="".join(kept)))
    return stripped


def split_lines(source: str) -> list[SourceLine]:
    """Split text into numbered lines (0-based)."""
    return [
        SourceLine(number=i, text=text)
        for i, text in enumerate(source.splitlines())
    ]
