"""Call-chain tokenizer for single lines of JavaScript/TypeScript test code.

A statement such as ``page.getByRole('button', { name: 'Go' }).click()``
becomes a :class:`CallChain` of segments ``page``, ``getByRole(...)`` and
``click()``. Its signature (``page.getByRole().click()``) elides argument
text so rules can match on shape alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_IDENT = re.compile(r"[A-Za-z_$][\w$]*")
_STRING = re.compile(r"""(['"`])((?:\\.|(?!\1).)*)\1""", re.DOTALL)
_ESCAPE = re.compile(r"\\(.)")

_QUOTES = "'\"`"
_OPENERS = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class ChainSegment:
    """``name`` for a property access, ``name(args)`` for a call."""

    name: str
    args: str | None = None

    @property
    def is_call(self) -> bool:
        return self.args is not None


@dataclass(frozen=True)
class CallChain:
    segments: tuple[ChainSegment, ...]

    @property
    def root(self) -> str:
        return self.segments[0].name

    @property
    def last(self) -> ChainSegment:
        return self.segments[-1]

    @property
    def signature(self) -> str:
        return ".".join(
            f"{s.name}()" if s.is_call else s.name
            for s in self.segments
        )


def _skip_string(text: str, pos: int) -> int:
    """Index just past the string literal opening at ``pos``, or -1."""
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    return -1


def find_closing(text: str, pos: int) -> int:
    """Index of the bracket closing the one at ``pos``, or -1.

    Brackets inside string literals are ignored.
    """
    stack = [_OPENERS[text[pos]]]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            if i < 0:
                return -1
            continue
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in ")]}":
            if ch != stack.pop():
                return -1
            if not stack:
                return i
        i += 1
    return -1


def strip_line_comment(text: str) -> str:
    """Drop a trailing ``//`` comment that is not inside a string."""
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_string(text, i)
            if i < 0:
                return text
            continue
        if text.startswith("//", i):
            return text[:i].rstrip()
        i += 1
    return text


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def parse_call_chain(text: str) -> CallChain | None:
    """Tokenize ``text`` as a chain of property accesses and calls.

    Returns None unless the whole text is a chain containing at least one
    call. Optional chaining (``?.``) is treated like ``.``.
    """
    text = text.strip()
    segments: list[ChainSegment] = []
    pos = 0
    while True:
        m = _IDENT.match(text, pos)
        if m is None:
            return None
        name = m.group()
        pos = _skip_ws(text, m.end())
        args: str | None = None
        if pos < len(text) and text[pos] == "(":
            end = find_closing(text, pos)
            if end < 0:
                return None
            args = text[pos + 1:end].strip()
            pos = _skip_ws(text, end + 1)
        segments.append(ChainSegment(name, args))

        if pos >= len(text):
            break
        if text.startswith("?.", pos):
            pos = _skip_ws(text, pos + 2)
        elif text[pos] == ".":
            pos = _skip_ws(text, pos + 1)
        else:
            return None

    if not any(s.is_call for s in segments):
        return None
    return CallChain(tuple(segments))


def string_args(args: str | None) -> list[str]:
    """Quoted string literals in ``args``, in order, unescaped."""
    if not args:
        return []
    return [
        _ESCAPE.sub(r"\1", m.group(2))
        for m in _STRING.finditer(args)
    ]


def first_string_arg(args: str | None) -> str:
    found = string_args(args)
    return found[0] if found else ""

