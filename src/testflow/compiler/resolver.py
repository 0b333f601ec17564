"""Actor resolution and the per-run participant registry."""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from testflow.compiler.models import ClassifiedStatement, Participant
from testflow.constants import (
    CODECEPTJS_ACTOR,
    MERMAID_KEYWORDS,
    PAGE_ID,
    PAGE_NAME,
    SUT_ID,
    SUT_NAME,
    TESTER_ID,
    TESTER_NAME,
    Framework,
)

_UNSAFE = re.compile(r"[^a-z0-9_]+")

# Hint -> (id, display name) for actors with a conventional meaning
_WELL_KNOWN: Mapping[str, tuple[str, str]] = MappingProxyType({
    CODECEPTJS_ACTOR.lower(): (TESTER_ID, TESTER_NAME),
    TESTER_ID: (TESTER_ID, TESTER_NAME),
    PAGE_ID: (PAGE_ID, PAGE_NAME),
    SUT_ID: (SUT_ID, SUT_NAME),
})

_DEFAULT_ACTOR: Mapping[Framework, tuple[str, str]] = MappingProxyType({
    Framework.PLAYWRIGHT: (PAGE_ID, PAGE_NAME),
    Framework.CODECEPTJS: (TESTER_ID, TESTER_NAME),
})


def participant_id(name: str) -> str:
    """Case-normalised, Mermaid-safe identifier for an actor name."""
    ident = _UNSAFE.sub("_", name.strip().lower()).strip("_") or "actor"
    if ident[0].isdigit() or ident in MERMAID_KEYWORDS:
        ident = f"p_{ident}"
    return ident


class ParticipantRegistry:
    """Ordered, grow-only set of participants for one compilation run."""

    def __init__(self) -> None:
        self._by_id: dict[str, Participant] = {}
        self._order: list[Participant] = []

    def __len__(self) -> int:
        return len(self._order)

    def register(
        self,
        name: str,
        display_name: str | None = None,
    ) -> Participant:
        """Return the participant for ``name``, adding it on first sight."""
        known = _WELL_KNOWN.get(name.strip().lower())
        if known is not None:
            ident, display = known
        else:
            ident, display = participant_id(name), display_name or name
        existing = self._by_id.get(ident)
        if existing is not None:
            return existing
        participant = Participant(
            id=ident,
            display_name=display,
            first_seen_index=len(self._order),
        )
        self._by_id[ident] = participant
        self._order.append(participant)
        return participant

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(self._order)


def resolve(
    statement: ClassifiedStatement,
    registry: ParticipantRegistry,
    framework: Framework,
) -> tuple[Participant, Participant]:
    """Return ``(actor, target)`` for a statement, registering both.

    The actor is registered first so participant order follows the
    order actors appear in the source.
    """
    if statement.actor_hint:
        actor = registry.register(statement.actor_hint)
    else:
        ident, display = _DEFAULT_ACTOR[framework]
        actor = registry.register(ident, display)

    if statement.target_hint:
        target = registry.register(statement.target_hint)
    else:
        target = registry.register(SUT_ID, SUT_NAME)
    return actor, target
