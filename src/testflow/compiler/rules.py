"""Tagged classification rules, one ordered table per framework.

Each :class:`Rule` pairs a regex over a call-chain signature with an
extractor that turns the match into an :class:`Extraction`. Rules are tried
in declaration order (most specific first) and the first extraction wins.
Verbs live in lookup tables so adding one never touches control flow.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import urlsplit

from testflow.compiler.tokens import (
    CallChain,
    first_string_arg,
    parse_call_chain,
    string_args,
)
from testflow.constants import CODECEPTJS_ACTOR, ActionKind, Framework


@dataclass(frozen=True)
class Extraction:
    """What a rule pulled out of one statement."""

    verb: str
    label: str
    kind: ActionKind | None = None
    actor_hint: str | None = None
    target_hint: str | None = None
    argument: str | None = None


Extractor = Callable[[re.Match[str], CallChain], Extraction | None]


@dataclass(frozen=True)
class Rule:
    """``pattern`` selects, ``extractor`` extracts, ``kind`` tags.

    A rule whose ``kind`` is None takes the kind from its verb table.
    """

    name: str
    pattern: re.Pattern[str]
    extractor: Extractor
    kind: ActionKind | None = None

    def apply(self, chain: CallChain) -> Extraction | None:
        m = self.pattern.match(chain.signature)
        if m is None:
            return None
        return self.extractor(m, chain)


@dataclass(frozen=True)
class VerbSpec:
    """Kind and label template for one verb.

    Templates may use ``{verb}``, ``{arg}`` (first string argument or the
    raw argument text), ``{args}`` (all string arguments) and ``{suffix}``
    (the verb minus its family prefix, e.g. ``Element`` for
    ``waitForElement``).
    """

    kind: ActionKind
    template: str


def _spec(kind: ActionKind, template: str) -> VerbSpec:
    return VerbSpec(kind, template)


def _table(
    groups: list[tuple[VerbSpec, tuple[str, ...]]],
) -> Mapping[str, VerbSpec]:
    table: dict[str, VerbSpec] = {}
    for spec, verbs in groups:
        for verb in verbs:
            table[verb] = spec
    return MappingProxyType(table)


# ── Label helpers ───────────────────────────────────────

_SPACES = re.compile(r"\s+")


def _arg(args: str | None) -> str:
    return first_string_arg(args) or (args or "")


def _args(args: str | None, *prefix: str) -> str:
    found = string_args(args) or ([args] if args else [])
    return ", ".join([p for p in prefix if p] + found)


def _render(template: str, **values: str) -> str:
    label = _SPACES.sub(" ", template.format(**values)).strip()
    return label.rstrip(":").strip()


def _suffix(verb: str, prefixes: tuple[str, ...]) -> str:
    for prefix in prefixes:
        if verb.startswith(prefix) and len(verb) > len(prefix):
            return verb[len(prefix):]
    return ""


def url_host(url: str | None) -> str | None:
    """Host of an absolute http(s) URL, None for relative ones."""
    if not url:
        return None
    parts = urlsplit(url)
    if parts.scheme in ("http", "https") and parts.netloc:
        return parts.netloc
    return None


# ── Playwright (grammar A) ──────────────────────────────

PLAYWRIGHT_VERBS: Mapping[str, VerbSpec] = _table([
    (_spec(ActionKind.NAVIGATE, "Navigate to {arg}"), ("goto",)),
    (_spec(ActionKind.NAVIGATE, "Reload page"), ("reload",)),
    (_spec(ActionKind.NAVIGATE, "Go back"), ("goBack",)),
    (_spec(ActionKind.NAVIGATE, "Go forward"), ("goForward",)),
    (_spec(ActionKind.CLICK, "Click {arg}"), ("click", "tap")),
    (_spec(ActionKind.CLICK, "Double-click {arg}"), ("dblclick",)),
    (_spec(ActionKind.CLICK, "Check {arg}"), ("check", "setChecked")),
    (_spec(ActionKind.CLICK, "Uncheck {arg}"), ("uncheck",)),
    (_spec(ActionKind.CLICK, "Hover {arg}"), ("hover",)),
    (_spec(ActionKind.CLICK, "Focus {arg}"), ("focus",)),
    (_spec(ActionKind.CLICK, "Drag {args}"), ("dragTo", "dragAndDrop")),
    (_spec(ActionKind.FILL, "Fill: {args}"), ("fill",)),
    (_spec(ActionKind.FILL, "Type: {args}"), ("type", "pressSequentially")),
    (_spec(ActionKind.FILL, "Clear {arg}"), ("clear",)),
    (_spec(ActionKind.FILL, "Upload: {args}"), ("setInputFiles",)),
    (_spec(ActionKind.SELECT, "Select: {args}"), ("selectOption",)),
    (_spec(ActionKind.PRESS, "Press key: {args}"), ("press",)),
    (_spec(ActionKind.SCROLL, "Scroll to {arg}"), ("scrollIntoViewIfNeeded",)),
    (_spec(ActionKind.SCREENSHOT, "Take screenshot"), ("screenshot",)),
    (_spec(ActionKind.EVALUATE, "Execute JavaScript"), ("evaluate", "evaluateHandle")),
    (_spec(ActionKind.VIEWPORT, "Set viewport: {arg}"), ("setViewportSize",)),
    (
        _spec(ActionKind.GRAB, "Grab: {verb} {arg}"),
        ("textContent", "innerText", "innerHTML", "inputValue", "getAttribute", "title"),
    ),
])

_WAIT_PREFIX = "waitFor"
_WAIT_SPEC = _spec(ActionKind.WAIT, "{verb}: {arg}")

LOCATOR_BUILDERS = frozenset({
    "locator",
    "frameLocator",
    "getByRole",
    "getByText",
    "getByLabel",
    "getByPlaceholder",
    "getByTestId",
    "getByAltText",
    "getByTitle",
})

LOCATOR_MODIFIERS = frozenset({
    "first",
    "last",
    "nth",
    "filter",
    "and",
    "or",
    "all",
    "count",
    "contentFrame",
})

# Roots that are never a browser page or locator
_NON_PAGE_ROOTS = frozenset({
    CODECEPTJS_ACTOR,
    "console",
    "Math",
    "JSON",
    "Object",
    "Array",
    "Promise",
    "process",
    "window",
    "document",
    "test",
    "expect",
})

_HTTP_VERBS = ("get", "post", "put", "delete", "patch", "head", "fetch")


def _playwright_spec(verb: str) -> VerbSpec | None:
    if verb.startswith(_WAIT_PREFIX):
        return _WAIT_SPEC
    return PLAYWRIGHT_VERBS.get(verb)


def _locator_description(chain: CallChain) -> str:
    """Human readable selector for the locator part of a chain."""
    parts: list[str] = []
    for seg in chain.segments[1:-1]:
        if seg.name not in LOCATOR_BUILDERS:
            continue
        if seg.name in ("locator", "frameLocator"):
            parts.append(_arg(seg.args))
        else:
            parts.append(f"{seg.name}({_args(seg.args)})")
    return " > ".join(p for p in parts if p)


def _subject_actor(expr: str | None) -> str | None:
    """Participant named by an ``expect(...)`` subject, if any."""
    if not expr:
        return None
    text = re.sub(r"^\s*(?:await\s+)?(?:this\.)?", "", expr)
    sub = parse_call_chain(text)
    if sub is None or sub.root in _NON_PAGE_ROOTS:
        return None
    return sub.root


def _expect(m: re.Match[str], chain: CallChain) -> Extraction | None:
    head = chain.segments[0]
    if not head.is_call:
        head = chain.segments[1]
    matcher = m.group("verb")
    negated = ".not" in m.group("mods")
    subject = first_string_arg(head.args)
    value = _arg(chain.last.args)

    label = "Assert " + ("not " if negated else "") + matcher
    if subject:
        label += f" ({subject})"
    if value:
        label += f": {value}"
    return Extraction(
        verb=matcher,
        label=label,
        kind=ActionKind.ASSERT_ABSENT if negated else ActionKind.ASSERT,
        actor_hint=_subject_actor(head.args),
        argument=value or subject or None,
    )


def _keyboard(m: re.Match[str], chain: CallChain) -> Extraction | None:
    verb = m.group("verb")
    args = chain.last.args
    if verb in ("type", "insertText"):
        kind, label = ActionKind.FILL, f"Type: {_args(args)}"
    else:
        kind, label = ActionKind.PRESS, f"Press key: {_arg(args)}"
    return Extraction(
        verb=verb,
        label=label,
        kind=kind,
        actor_hint=m.group("root"),
        argument=_arg(args) or None,
    )


def _mouse(m: re.Match[str], chain: CallChain) -> Extraction | None:
    verb = m.group("verb")
    args = chain.last.args or ""
    kind = ActionKind.SCROLL if verb == "wheel" else ActionKind.CLICK
    return Extraction(
        verb=verb,
        label=_render("Mouse {verb}: {args}", verb=verb, args=args),
        kind=kind,
        actor_hint=m.group("root"),
        argument=args or None,
    )


def _request(m: re.Match[str], chain: CallChain) -> Extraction | None:
    verb = m.group("verb")
    url = _arg(chain.last.args)
    return Extraction(
        verb=verb,
        label=_render("{method} {url}", method=verb.upper(), url=url),
        kind=ActionKind.REQUEST,
        actor_hint=m.group("root"),
        target_hint=url_host(url),
        argument=url or None,
    )


def _locator_action(
    m: re.Match[str], chain: CallChain
) -> Extraction | None:
    verb = m.group("verb")
    spec = _playwright_spec(verb)
    if spec is None or m.group("root") in _NON_PAGE_ROOTS:
        return None
    selector = _locator_description(chain)
    args = chain.last.args
    label = _render(
        spec.template,
        verb=verb,
        arg=selector or _arg(args),
        args=_args(args, selector),
        suffix="",
    )
    return Extraction(
        verb=verb,
        label=label,
        kind=spec.kind,
        actor_hint=m.group("root"),
        argument=selector or None,
    )


def _page_action(m: re.Match[str], chain: CallChain) -> Extraction | None:
    verb = m.group("verb")
    spec = _playwright_spec(verb)
    if spec is None or m.group("root") in _NON_PAGE_ROOTS:
        return None
    args = chain.last.args
    label = _render(
        spec.template,
        verb=verb,
        arg=_arg(args),
        args=_args(args),
        suffix="",
    )
    return Extraction(
        verb=verb,
        label=label,
        kind=spec.kind,
        actor_hint=m.group("root"),
        argument=first_string_arg(args) or None,
    )


def _locator_custom(
    m: re.Match[str], chain: CallChain
) -> Extraction | None:
    verb = m.group("verb")
    if (
        verb in LOCATOR_BUILDERS
        or verb in LOCATOR_MODIFIERS
        or m.group("root") in _NON_PAGE_ROOTS
    ):
        return None
    selector = _locator_description(chain)
    arg = _arg(chain.last.args)
    inner = ", ".join(p for p in (selector, arg) if p)
    return Extraction(
        verb=verb,
        label=f"{verb}({inner})",
        actor_hint=m.group("root"),
        argument=selector or None,
    )


_LOCATOR_CHAIN = (
    r"^(?P<root>[\w$]+)\.(?:[\w$]+(?:\(\))?\.)*?"
    r"(?:locator|frameLocator|getBy[A-Z][\w$]*)\(\)"
    r"(?:\.[\w$]+(?:\(\))?)*?"
    r"\.(?P<verb>[\w$]+)\(\)$"
)

PLAYWRIGHT_RULES: tuple[Rule, ...] = (
    Rule(
        "expect",
        re.compile(
            r"^expect(?:\(\)|\.soft\(\)|\.poll\(\))"
            r"(?P<mods>(?:\.(?:not|resolves|rejects))*)"
            r"\.(?P<verb>to[\w$]*)\(\)$"
        ),
        _expect,
        ActionKind.ASSERT,
    ),
    Rule(
        "keyboard",
        re.compile(
            r"^(?P<root>[\w$]+)\.keyboard"
            r"\.(?P<verb>press|down|up|type|insertText)\(\)$"
        ),
        _keyboard,
        ActionKind.PRESS,
    ),
    Rule(
        "mouse",
        re.compile(
            r"^(?P<root>[\w$]+)\.mouse"
            r"\.(?P<verb>click|dblclick|move|down|up|wheel)\(\)$"
        ),
        _mouse,
        ActionKind.CLICK,
    ),
    Rule(
        "request",
        re.compile(
            r"^(?:(?P<root>[\w$]+)\.)?request"
            rf"\.(?P<verb>{'|'.join(_HTTP_VERBS)})\(\)$"
        ),
        _request,
        ActionKind.REQUEST,
    ),
    Rule("locator_action", re.compile(_LOCATOR_CHAIN), _locator_action),
    Rule(
        "page_action",
        re.compile(r"^(?P<root>[\w$]+)\.(?P<verb>[\w$]+)\(\)$"),
        _page_action,
    ),
    Rule(
        "locator_custom",
        re.compile(_LOCATOR_CHAIN),
        _locator_custom,
        ActionKind.CUSTOM,
    ),
)


# ── CodeceptJS (grammar B) ──────────────────────────────

CODECEPTJS_VERBS: Mapping[str, VerbSpec] = _table([
    (
        _spec(ActionKind.NAVIGATE, "Navigate to {arg}"),
        ("amOnPage", "navigateTo", "openNewTab"),
    ),
    (_spec(ActionKind.NAVIGATE, "Reload page"), ("refreshPage",)),
    (
        _spec(ActionKind.FILL, "{verb}: {args}"),
        ("fillField", "appendField", "clearField", "type", "attachFile"),
    ),
    (
        _spec(ActionKind.CLICK, "Click {arg}"),
        ("click", "doubleClick", "rightClick", "forceClick", "clickLink"),
    ),
    (
        _spec(ActionKind.ASSERT, "Verify: {arg}"),
        (
            "see",
            "seeElement",
            "seeInField",
            "seeInTitle",
            "seeInCurrentUrl",
            "seeCurrentUrlEquals",
            "seeCheckboxIsChecked",
            "seeNumberOfElements",
            "seeCookie",
            "seeTextEquals",
            "seeAttributesOnElements",
            "seeElementInDOM",
        ),
    ),
    (
        _spec(ActionKind.ASSERT_ABSENT, "Verify absent: {arg}"),
        (
            "dontSee",
            "dontSeeElement",
            "dontSeeInField",
            "dontSeeInTitle",
            "dontSeeInCurrentUrl",
            "dontSeeCheckboxIsChecked",
            "dontSeeCookie",
            "dontSeeElementInDOM",
        ),
    ),
    (
        _spec(ActionKind.WAIT, "Wait: {suffix} {arg}"),
        (
            "wait",
            "waitForElement",
            "waitForVisible",
            "waitForText",
            "waitForInvisible",
            "waitForDetached",
            "waitForFunction",
            "waitForNavigation",
            "waitForRequest",
            "waitForResponse",
            "waitNumberOfVisibleElements",
            "waitForClickable",
            "waitForEnabled",
            "waitInUrl",
            "waitUrlEquals",
        ),
    ),
    (
        _spec(ActionKind.GRAB, "Grab: {suffix} {arg}"),
        (
            "grabTextFrom",
            "grabValueFrom",
            "grabAttributeFrom",
            "grabNumberOfVisibleElements",
            "grabTitle",
            "grabCurrentUrl",
            "grabCookie",
            "grabHTMLFrom",
            "grabTextFromAll",
        ),
    ),
    (
        _spec(ActionKind.SELECT, "{verb}: {args}"),
        ("selectOption", "checkOption", "uncheckOption"),
    ),
    (
        _spec(ActionKind.PRESS, "Press key: {arg}"),
        ("pressKey", "pressKeyDown", "pressKeyUp"),
    ),
    (
        _spec(ActionKind.REQUEST, "{verb}: {arg}"),
        (
            "sendGetRequest",
            "sendPostRequest",
            "sendPutRequest",
            "sendDeleteRequest",
            "sendPatchRequest",
        ),
    ),
    (
        _spec(ActionKind.SCROLL, "Scroll: {arg}"),
        ("scrollTo", "scrollIntoView"),
    ),
    (_spec(ActionKind.SCROLL, "Scroll to top"), ("scrollPageToTop",)),
    (_spec(ActionKind.SCROLL, "Scroll to bottom"), ("scrollPageToBottom",)),
    (_spec(ActionKind.SCREENSHOT, "Take screenshot {arg}"), ("saveScreenshot",)),
    (
        _spec(ActionKind.EVALUATE, "Execute JavaScript"),
        ("executeScript", "executeAsyncScript"),
    ),
    (_spec(ActionKind.VIEWPORT, "Set viewport: {args}"), ("resizeWindow",)),
])

_CODECEPTJS_PREFIXES = ("waitFor", "wait", "grab")


def _tester_action(
    m: re.Match[str], chain: CallChain
) -> Extraction | None:
    verb = m.group("verb")
    spec = CODECEPTJS_VERBS.get(verb)
    if spec is None:
        return None
    args = chain.last.args
    label = _render(
        spec.template,
        verb=verb,
        arg=_arg(args),
        args=_args(args),
        suffix=_suffix(verb, _CODECEPTJS_PREFIXES),
    )
    target = (
        url_host(first_string_arg(args))
        if spec.kind == ActionKind.REQUEST
        else None
    )
    return Extraction(
        verb=verb,
        label=label,
        kind=spec.kind,
        actor_hint=CODECEPTJS_ACTOR,
        target_hint=target,
        argument=first_string_arg(args) or None,
    )


def _tester_custom(
    m: re.Match[str], chain: CallChain
) -> Extraction | None:
    verb = m.group("verb")
    arg = _arg(chain.last.args)
    return Extraction(
        verb=verb,
        label=f"{verb}({arg})",
        actor_hint=CODECEPTJS_ACTOR,
        argument=arg or None,
    )


_TESTER_CALL = re.compile(
    rf"^{CODECEPTJS_ACTOR}\.(?P<verb>[\w$]+)\(\)$"
)

CODECEPTJS_RULES: tuple[Rule, ...] = (
    Rule("tester_action", _TESTER_CALL, _tester_action),
    Rule("tester_custom", _TESTER_CALL, _tester_custom, ActionKind.CUSTOM),
)


RULES: Mapping[Framework, tuple[Rule, ...]] = MappingProxyType({
    Framework.PLAYWRIGHT: PLAYWRIGHT_RULES,
    Framework.CODECEPTJS: CODECEPTJS_RULES,
})
