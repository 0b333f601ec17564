"""Action model builder: classified statements -> ordered diagram actions."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from testflow.compiler.models import (
    ClassifiedStatement,
    DiagramAction,
    Participant,
)
from testflow.compiler.resolver import ParticipantRegistry, resolve
from testflow.constants import (
    DIAGRAM_MAX_ACTIONS,
    REPLY_KINDS,
    ActionKind,
    Framework,
)
from testflow.errors import custom_action_warning, truncation_warning

logger = logging.getLogger(__name__)


def build(
    statements: Sequence[ClassifiedStatement],
    framework: Framework,
    *,
    max_actions: int = DIAGRAM_MAX_ACTIONS,
) -> tuple[
    tuple[DiagramAction, ...],
    tuple[Participant, ...],
    tuple[str, ...],
]:
    """Resolve participants and number actions in source order.

    Statements past ``max_actions`` are dropped before resolution, so
    they never introduce participants. Reply kinds (assertions, grabs,
    screenshots) are oriented from the target back to the actor.
    """
    registry = ParticipantRegistry()
    actions: list[DiagramAction] = []
    warnings: list[str] = []

    kept = statements[:max_actions]
    for statement in kept:
        actor, target = resolve(statement, registry, framework)
        source, dest = actor, target
        if statement.kind in REPLY_KINDS:
            source, dest = target, actor
        if statement.kind == ActionKind.CUSTOM:
            warnings.append(
                custom_action_warning(
                    statement.line_number, statement.verb
                )
            )
        actions.append(
            DiagramAction(
                source=source,
                target=dest,
                label=statement.label,
                kind=statement.kind,
                sequence_index=len(actions),
                line_number=statement.line_number,
                block=statement.block,
            )
        )

    dropped = len(statements) - len(kept)
    if dropped > 0:
        logger.debug(
            "Dropped %d actions over limit %d", dropped, max_actions
        )
        warnings.append(truncation_warning(dropped, max_actions))

    return tuple(actions), registry.participants, tuple(warnings)
